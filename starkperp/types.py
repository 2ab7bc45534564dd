"""Type definitions for the starkperp client.

This module contains type aliases, enums, and dataclasses used throughout the
client: credentials, signing context and the signable actions that callers
submit through the private API.
"""

import re
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, TypeAlias

from starkperp.errors import ValidationError

# ============================================================================
# TYPE ALIASES
# ============================================================================

ClientId: TypeAlias = str
Nonce: TypeAlias = int
ISO8601: TypeAlias = str
PositionId: TypeAlias = str

# JSON type hierarchy
JsonObject: TypeAlias = dict[str, "JsonValue"]
JsonArray: TypeAlias = list["JsonValue"]
JsonValue: TypeAlias = None | bool | int | float | str | JsonObject | JsonArray
# responses are decoded as dict only
Json: TypeAlias = JsonObject

HumanNumericInput: TypeAlias = Decimal | str | float | int


# ============================================================================
# NUMERIC CONVERSION UTILITIES
# ============================================================================

DECIMAL_PATTERN = re.compile(r"^\d+(\.\d+)?$")


def full_precision_string(n: HumanNumericInput) -> str:
    """Convert a numeric input to a full precision string representation."""
    if isinstance(n, str):
        if not DECIMAL_PATTERN.match(n):
            raise ValidationError(f"Invalid numeric input {n}")
        return n
    if isinstance(n, bool):
        raise ValidationError(f"Invalid numeric input type {n} - {type(n)}")
    if isinstance(n, (int, float)):
        n = Decimal(str(n))
    if not isinstance(n, Decimal):
        raise ValidationError(f"Invalid numeric input type {n} - {type(n)}")
    if not n.is_finite() or n < 0:
        raise ValidationError(f"Invalid numeric input {n}")
    return format(n, "f")


# ============================================================================
# CORE ENUMS
# ============================================================================


class RequestMethod(Enum):
    """HTTP methods used by the private API."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class Market(Enum):
    """Perpetual markets."""

    BTC_USD = "BTC-USD"
    ETH_USD = "ETH-USD"
    LINK_USD = "LINK-USD"
    AAVE_USD = "AAVE-USD"
    UNI_USD = "UNI-USD"
    SUSHI_USD = "SUSHI-USD"
    SOL_USD = "SOL-USD"
    YFI_USD = "YFI-USD"
    ONEINCH_USD = "1INCH-USD"
    AVAX_USD = "AVAX-USD"
    SNX_USD = "SNX-USD"
    CRV_USD = "CRV-USD"
    UMA_USD = "UMA-USD"
    DOT_USD = "DOT-USD"
    DOGE_USD = "DOGE-USD"
    MATIC_USD = "MATIC-USD"
    MKR_USD = "MKR-USD"
    FIL_USD = "FIL-USD"
    ADA_USD = "ADA-USD"
    ATOM_USD = "ATOM-USD"
    COMP_USD = "COMP-USD"
    BCH_USD = "BCH-USD"
    LTC_USD = "LTC-USD"
    EOS_USD = "EOS-USD"
    ALGO_USD = "ALGO-USD"
    ZRX_USD = "ZRX-USD"
    XMR_USD = "XMR-USD"
    ZEC_USD = "ZEC-USD"


class Asset(Enum):
    """Collateral and withdrawal assets."""

    USDC = "USDC"


class OrderSide(Enum):
    """Order side."""

    BUY = "BUY"
    SELL = "SELL"


class OrderType(Enum):
    """Order type."""

    LIMIT = "LIMIT"
    MARKET = "MARKET"
    STOP_LIMIT = "STOP_LIMIT"
    TRAILING_STOP = "TRAILING_STOP"
    TAKE_PROFIT = "TAKE_PROFIT"


class TimeInForce(Enum):
    """Order time in force."""

    GTT = "GTT"
    FOK = "FOK"
    IOC = "IOC"


class OrderStatus(Enum):
    """Order status."""

    PENDING = "PENDING"
    OPEN = "OPEN"
    FILLED = "FILLED"
    CANCELED = "CANCELED"
    UNTRIGGERED = "UNTRIGGERED"


class PositionStatus(Enum):
    """Position status."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    LIQUIDATED = "LIQUIDATED"


class AccountAction(Enum):
    """Transfer types reported by the transfers endpoint."""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    FAST_WITHDRAWAL = "FAST_WITHDRAWAL"
    TRANSFER_OUT = "TRANSFER_OUT"
    TRANSFER_IN = "TRANSFER_IN"


class LeaderboardPnlPeriod(Enum):
    """Leaderboard pnl periods."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    ALL_TIME = "ALL_TIME"


def enum_value(value: Any) -> Any:
    """Unwrap an Enum member to its wire value, leaving anything else untouched."""
    if isinstance(value, Enum):
        return value.value
    return value


# ============================================================================
# CREDENTIALS AND CONTEXT
# ============================================================================


@dataclass(frozen=True)
class ApiKeyCredentials:
    """Account authentication triple used for request signing.

    The secret is base64 encoded key material. It is excluded from repr so it
    never ends up in logs or tracebacks.
    """

    key: str
    secret: str = field(repr=False)
    passphrase: str = field(repr=False)


@dataclass(frozen=True)
class SigningContext:
    """Network scope mixed into every asymmetric signature."""

    network_id: int

    def __post_init__(self) -> None:
        """Reject network ids that are not positive integers."""
        if isinstance(self.network_id, bool) or not isinstance(self.network_id, int):
            raise ValidationError(f"Invalid network_id {self.network_id!r}")
        if self.network_id <= 0:
            raise ValidationError(f"Invalid network_id {self.network_id!r}")


# ============================================================================
# SIGNABLE ACTIONS
# ============================================================================


class SignableAction:
    """Common behaviour of actions that carry a clientId and signature.

    Subclasses are dataclasses using the API field names. ``to_request`` never
    mutates the action; it returns a new JSON object with the resolved
    clientId and signature merged in.
    """

    ACTION_NAME: ClassVar[str] = "Action"
    # fields used to build the signature but never transmitted
    SIGNING_ONLY_FIELDS: ClassVar[tuple[str, ...]] = ()
    # when set, only these fields (plus clientId/signature) are transmitted
    TRANSMITTED_FIELDS: ClassVar[tuple[str, ...] | None] = None

    clientId: ClientId | None
    signature: str | None

    def to_request(self, client_id: ClientId, signature: str) -> JsonObject:
        """Merge the resolved clientId and signature into the action fields.

        Args:
            client_id: The resolved client id.
            signature: The resolved, non-empty signature.

        Returns:
            JsonObject: The finalized payload to transmit.

        Raises:
            ValidationError: If client_id or signature is empty.

        """
        if not client_id:
            raise ValidationError(f"{self.ACTION_NAME} has no clientId")
        if not signature:
            raise ValidationError(f"{self.ACTION_NAME} has no signature")

        data: dict[str, Any] = asdict(self)  # type: ignore[call-overload]
        if self.TRANSMITTED_FIELDS is not None:
            data = {k: data[k] for k in self.TRANSMITTED_FIELDS}
        for name in self.SIGNING_ONLY_FIELDS:
            data.pop(name, None)

        request = {k: enum_value(v) for k, v in data.items() if v is not None}
        request["clientId"] = client_id
        request["signature"] = signature
        return request


@dataclass
class OrderParams(SignableAction):
    """Parameters for placing an order."""

    ACTION_NAME: ClassVar[str] = "Order"

    market: Market | str
    side: OrderSide | str
    type: OrderType | str
    postOnly: bool
    size: HumanNumericInput
    price: HumanNumericInput
    limitFee: HumanNumericInput
    expiration: ISO8601
    timeInForce: TimeInForce | str | None = None
    cancelId: str | None = None
    triggerPrice: HumanNumericInput | None = None
    trailingPercent: HumanNumericInput | None = None
    reduceOnly: bool | None = None
    clientId: ClientId | None = None
    signature: str | None = None

    def __post_init__(self) -> None:
        """Normalize numeric inputs to full precision strings."""
        self.size = full_precision_string(self.size)
        self.price = full_precision_string(self.price)
        self.limitFee = full_precision_string(self.limitFee)
        if self.triggerPrice is not None:
            self.triggerPrice = full_precision_string(self.triggerPrice)
        if self.trailingPercent is not None:
            self.trailingPercent = str(self.trailingPercent)


@dataclass
class WithdrawalParams(SignableAction):
    """Parameters for a slow withdrawal."""

    ACTION_NAME: ClassVar[str] = "Withdrawal"

    amount: HumanNumericInput
    asset: Asset | str
    expiration: ISO8601
    clientId: ClientId | None = None
    signature: str | None = None

    def __post_init__(self) -> None:
        """Normalize the amount to a full precision string."""
        self.amount = full_precision_string(self.amount)


@dataclass
class FastWithdrawalParams(SignableAction):
    """Parameters for a fast withdrawal through a liquidity provider."""

    ACTION_NAME: ClassVar[str] = "Fast withdrawal"
    SIGNING_ONLY_FIELDS: ClassVar[tuple[str, ...]] = ("lpStarkKey",)

    creditAsset: Asset | str
    creditAmount: HumanNumericInput
    debitAmount: HumanNumericInput
    toAddress: str
    lpPositionId: PositionId
    expiration: ISO8601
    lpStarkKey: str | None = None
    clientId: ClientId | None = None
    signature: str | None = None

    def __post_init__(self) -> None:
        """Normalize amounts to full precision strings."""
        self.creditAmount = full_precision_string(self.creditAmount)
        self.debitAmount = full_precision_string(self.debitAmount)


@dataclass
class TransferParams(SignableAction):
    """Parameters for a transfer to another account."""

    ACTION_NAME: ClassVar[str] = "Transfer"
    TRANSMITTED_FIELDS: ClassVar[tuple[str, ...] | None] = (
        "amount",
        "receiverAccountId",
        "expiration",
    )

    amount: HumanNumericInput
    receiverAccountId: str
    receiverPublicKey: str
    receiverPositionId: PositionId
    expiration: ISO8601
    clientId: ClientId | None = None
    signature: str | None = None

    def __post_init__(self) -> None:
        """Normalize the amount to a full precision string."""
        self.amount = full_precision_string(self.amount)
