import orjson

from starkperp.client_id import nonce_from_client_id
from starkperp.signers import KeyPair, SignableTransfer, SignableWithdrawal
from tests.unit.conftest import TEST_PRIVATE_KEY


def test_message_layout():
    payload = SignableWithdrawal(
        humanAmount="12.5",
        expiration="2024-02-01T00:00:00.000Z",
        clientId="abc",
        positionId="7",
    )

    message = payload.to_message(3)

    assert orjson.loads(message) == {
        "type": "WITHDRAWAL",
        "networkId": 3,
        "nonce": str(nonce_from_client_id("abc")),
        "humanAmount": "12.5",
        "expiration": "2024-02-01T00:00:00.000Z",
        "clientId": "abc",
        "positionId": "7",
    }
    assert message.startswith(b'{"clientId":"abc","expiration"')
    assert b" " not in message


def test_message_is_stable_and_typed():
    transfer = SignableTransfer(
        humanAmount="1",
        expiration="2024-02-01T00:00:00.000Z",
        receiverPositionId="2",
        senderPositionId="1",
        receiverPublicKey="0x01",
        clientId="abc",
    )

    assert transfer.to_message(1) == transfer.to_message(1)
    assert transfer.to_message(1) != transfer.to_message(3)
    assert orjson.loads(transfer.to_message(1))["type"] == "TRANSFER"
    assert transfer.nonce == nonce_from_client_id("abc")


def test_key_pair_from_various_inputs():
    from_hex = KeyPair.from_private_key(TEST_PRIVATE_KEY)
    from_unprefixed = KeyPair.from_private_key(TEST_PRIVATE_KEY[2:])
    from_bytes = KeyPair.from_private_key(bytes.fromhex(TEST_PRIVATE_KEY[2:]))

    assert from_hex.public_key == from_unprefixed.public_key == from_bytes.public_key
    assert KeyPair.from_private_key(from_hex) == from_hex
    assert from_hex.public_key.startswith("0x")
    assert TEST_PRIVATE_KEY[2:] not in repr(from_hex)
