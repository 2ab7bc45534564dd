"""Python client for the starkperp private API.

Requests are authenticated with an API key triple, and orders, withdrawals,
fast withdrawals and transfers are signed with the account's signing key.
"""

from importlib.metadata import PackageNotFoundError, version

from starkperp.api import PrivateApiClient
from starkperp.clock import Clock
from starkperp.env_setup import ClientConfig, setup_environment
from starkperp.errors import (
    BaseError,
    ExchangeError,
    SigningCapabilityFailure,
    SigningError,
    TransportError,
    UnsignedActionError,
    ValidationError,
)
from starkperp.facts import NETWORK_ID_MAINNET, NETWORK_ID_ROPSTEN, NetworkConfig
from starkperp.helpers import API_HOST_MAINNET, API_HOST_ROPSTEN
from starkperp.request_auth import RequestAuthenticator
from starkperp.signers import ActionSigner, EcdsaActionSigner, KeyPair
from starkperp.types import (
    ApiKeyCredentials,
    Asset,
    FastWithdrawalParams,
    Market,
    OrderParams,
    OrderSide,
    OrderType,
    SigningContext,
    TimeInForce,
    TransferParams,
    WithdrawalParams,
)

try:
    __version__ = version("starkperp")
except PackageNotFoundError:
    __version__ = "unknown"


def get_version() -> str:
    """Return the installed version of the starkperp package."""
    return __version__


__all__ = [
    "PrivateApiClient",
    "Clock",
    "ClientConfig",
    "setup_environment",
    "BaseError",
    "ExchangeError",
    "TransportError",
    "ValidationError",
    "SigningError",
    "UnsignedActionError",
    "SigningCapabilityFailure",
    "NETWORK_ID_MAINNET",
    "NETWORK_ID_ROPSTEN",
    "NetworkConfig",
    "API_HOST_MAINNET",
    "API_HOST_ROPSTEN",
    "RequestAuthenticator",
    "ActionSigner",
    "EcdsaActionSigner",
    "KeyPair",
    "ApiKeyCredentials",
    "Asset",
    "FastWithdrawalParams",
    "Market",
    "OrderParams",
    "OrderSide",
    "OrderType",
    "SigningContext",
    "TimeInForce",
    "TransferParams",
    "WithdrawalParams",
    "get_version",
]
