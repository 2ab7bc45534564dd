import pytest

from starkperp.errors import MissingCounterpartyKey
from starkperp.types import (
    Asset,
    FastWithdrawalParams,
    TransferParams,
    WithdrawalParams,
)
from tests.mock_executors import MockSuccessfulOutput, ok
from tests.unit.conftest import (
    TEST_POSITION_ID,
    is_request,
    is_signed_by,
    load_json,
    request_body,
)

EXPIRATION = "2024-02-01T00:00:00.000Z"
LP_STARK_KEY = "0x" + "34" * 32


def test_create_withdrawal(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=ok({"withdrawal": {"id": "w-1"}}, status=201),
            call_validation=is_request("POST", "/v3/withdrawals"),
        )
    )

    response = client.create_withdrawal(
        WithdrawalParams(amount="250.5", asset=Asset.USDC, expiration=EXPIRATION),
        TEST_POSITION_ID,
    )

    assert response["withdrawal"]["id"] == "w-1"
    sent = request_body(mock_http.call_log[0])
    assert sent is not None
    assert sent["amount"] == "250.5"
    assert sent["asset"] == "USDC"
    assert sent["expiration"] == EXPIRATION
    assert sent["clientId"]
    assert sent["signature"]
    assert is_signed_by(client.authenticator)(mock_http.call_log[0])


def test_create_fast_withdrawal(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=ok({"withdrawal": {"id": "fw-1"}}, status=201),
            call_validation=is_request("POST", "/v3/fast-withdrawals"),
        )
    )

    client.create_fast_withdrawal(
        FastWithdrawalParams(
            creditAsset=Asset.USDC,
            creditAmount="100",
            debitAmount="101",
            toAddress="0x" + "cd" * 20,
            lpPositionId="2",
            expiration=EXPIRATION,
            lpStarkKey=LP_STARK_KEY,
        ),
        TEST_POSITION_ID,
    )

    sent = request_body(mock_http.call_log[0])
    assert sent is not None
    assert "lpStarkKey" not in sent
    assert sent["lpPositionId"] == "2"
    assert sent["creditAmount"] == "100"
    assert sent["debitAmount"] == "101"


def test_create_fast_withdrawal_without_lp_key(mock_http_client):
    client, mock_http = mock_http_client

    with pytest.raises(MissingCounterpartyKey):
        client.create_fast_withdrawal(
            FastWithdrawalParams(
                creditAsset=Asset.USDC,
                creditAmount="100",
                debitAmount="101",
                toAddress="0x" + "cd" * 20,
                lpPositionId="2",
                expiration=EXPIRATION,
            ),
            TEST_POSITION_ID,
        )

    assert mock_http.call_log == []


def test_create_transfer(mock_http_client):
    client, mock_http = mock_http_client
    transfer_response = load_json("test.create_transfer.case0")[
        "response.create_transfer"
    ]

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=ok(transfer_response, status=201),
            call_validation=is_request("POST", "/v3/transfers"),
        )
    )

    response = client.create_transfer(
        TransferParams(
            amount=10,
            receiverAccountId="receiver-account",
            receiverPublicKey=LP_STARK_KEY,
            receiverPositionId="99",
            expiration=EXPIRATION,
        ),
        TEST_POSITION_ID,
    )

    assert response["transfer"]["status"] == "PENDING"
    sent = request_body(mock_http.call_log[0])
    assert sent is not None
    assert set(sent) == {
        "amount",
        "receiverAccountId",
        "expiration",
        "clientId",
        "signature",
    }
    assert sent["amount"] == "10"


def test_create_account(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=ok({"account": {"starkKey": "0x1"}}, status=201),
            call_validation=is_request("POST", "/v3/accounts"),
        )
    )

    client.create_account("0x1", "0x2")

    assert mock_http.call_log[0].arg_pack[3] == (
        b'{"starkKey":"0x1","starkKeyYCoordinate":"0x2"}'
    )
    assert mock_http.call_log[0].arg_pack[2]["X-SIGNATURE"] == (
        "KcTrtU89gKneGq95L/LQBuY04RgfI4bhTJPebxvUEN0="
    )
