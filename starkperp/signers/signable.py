"""Action specific payloads handed to the asymmetric signing capability.

Each payload holds exactly the fields that the signature commits to. The
canonical message adds the payload type, the network id and the nonce derived
from the client id, and is serialized as compact JSON with sorted keys so the
same payload always produces the same bytes.
"""

from dataclasses import asdict, dataclass
from typing import Any, ClassVar

import orjson

from starkperp.client_id import nonce_from_client_id
from starkperp.types import ISO8601, ClientId, Nonce, PositionId


class SignablePayload:
    """Base class of the signable payload dataclasses."""

    PAYLOAD_TYPE: ClassVar[str]

    clientId: ClientId

    @property
    def nonce(self) -> Nonce:
        """Nonce derived from the payload's client id."""
        return nonce_from_client_id(self.clientId)

    def to_message(self, network_id: int) -> bytes:
        """Serialize the payload into the bytes that get signed.

        Args:
            network_id: Network the signature is scoped to

        Returns:
            bytes: Canonical JSON message

        """
        fields: dict[str, Any] = asdict(self)  # type: ignore[call-overload]
        message = {
            "type": self.PAYLOAD_TYPE,
            "networkId": network_id,
            "nonce": str(self.nonce),
            **fields,
        }
        return orjson.dumps(message, option=orjson.OPT_SORT_KEYS)


@dataclass(frozen=True)
class SignableOrder(SignablePayload):
    """Order fields covered by the order signature."""

    PAYLOAD_TYPE: ClassVar[str] = "ORDER"

    humanSize: str
    humanPrice: str
    limitFee: str
    market: str
    side: str
    expiration: ISO8601
    clientId: ClientId
    positionId: PositionId


@dataclass(frozen=True)
class SignableWithdrawal(SignablePayload):
    """Withdrawal fields covered by the withdrawal signature."""

    PAYLOAD_TYPE: ClassVar[str] = "WITHDRAWAL"

    humanAmount: str
    expiration: ISO8601
    clientId: ClientId
    positionId: PositionId


@dataclass(frozen=True)
class SignableConditionalTransfer(SignablePayload):
    """Transfer to the LP position, conditional on the fact being registered."""

    PAYLOAD_TYPE: ClassVar[str] = "CONDITIONAL_TRANSFER"

    senderPositionId: PositionId
    receiverPositionId: PositionId
    receiverPublicKey: str
    factRegistryAddress: str
    fact: str
    humanAmount: str
    clientId: ClientId
    expiration: ISO8601


@dataclass(frozen=True)
class SignableTransfer(SignablePayload):
    """Transfer fields covered by the transfer signature."""

    PAYLOAD_TYPE: ClassVar[str] = "TRANSFER"

    humanAmount: str
    expiration: ISO8601
    receiverPositionId: PositionId
    senderPositionId: PositionId
    receiverPublicKey: str
    clientId: ClientId
