"""Helper utilities for the starkperp client.

This module contains utility functions for serialization, deserialization,
query path construction and account id derivation.
"""

import logging
import uuid
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, Mapping
from urllib.parse import urlencode

import orjson

from starkperp.errors import DeserializationError, SerializationError
from starkperp.types import Json

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

API_HOST_MAINNET: str = "https://api.starkperp.exchange"
API_HOST_ROPSTEN: str = "https://api.stage.starkperp.exchange"
DEFAULT_API_HOST: str = API_HOST_MAINNET

API_VERSION_PREFIX: str = "/v3/"

# Namespace used to derive deterministic user and account ids from an address.
ACCOUNT_ID_NAMESPACE = uuid.UUID("0f9da948-a6fb-4c45-9edc-4685c3f3317d")


# ============================================================================
# CLIENT IDENTIFICATION
# ============================================================================


@lru_cache(maxsize=1)
def get_starkperp_client() -> str:
    """Get the starkperp client identification string."""
    import starkperp

    return f"StarkperpPythonClient/{starkperp.__version__}"


# ============================================================================
# SERIALIZATION / DESERIALIZATION
# ============================================================================


def json_default(obj: object) -> str:
    """Serialize values orjson does not handle natively.

    Decimal is converted to string to preserve precision.
    """
    if isinstance(obj, Decimal):
        return str(obj)

    raise TypeError


def serialize_request(request: Json | None) -> bytes | None:
    """Serialize a request object to compact JSON bytes.

    Keys keep their insertion order and no whitespace is emitted, so the bytes
    are identical to the data segment of the request signature.

    Args:
        request: Request data to serialize

    Returns:
        JSON bytes, or None if the request is None or empty

    Raises:
        SerializationError: If serialization fails

    """
    if not request:
        return None
    try:
        return orjson.dumps(request, default=json_default)
    except Exception as e:
        raise SerializationError(f"Failed to serialize {request=}") from e


def deserialize_response(response_body: bytes, url: str) -> Json:
    """Deserialize a JSON response body.

    An empty body decodes to an empty object.

    Args:
        response_body: Response bytes to deserialize
        url: URL that was requested (for error messages)

    Returns:
        Deserialized JSON object

    Raises:
        DeserializationError: If deserialization fails

    """
    if not response_body:
        return {}
    try:
        return orjson.loads(response_body)  # type: ignore
    except Exception as e:
        raise DeserializationError(
            f"Failed to parse JSON response from {url}: {e}"
        ) from e


# ============================================================================
# REQUEST PATHS
# ============================================================================


def generate_query_path(endpoint: str, params: Mapping[str, Any]) -> str:
    """Append params to an endpoint as a query string.

    None values are dropped and Enum members are replaced with their value.
    Booleans are sent as lowercase ``true``/``false``.

    Args:
        endpoint: The endpoint without the version prefix (e.g. "orders")
        params: Query parameters

    Returns:
        str: The endpoint with the query string, or the endpoint alone if no
            parameter remains

    """
    query: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, bool):
            value = "true" if value else "false"
        query.append((key, str(value)))

    if not query:
        return endpoint
    return f"{endpoint}?{urlencode(query)}"


# ============================================================================
# ACCOUNT IDS
# ============================================================================


def get_user_id(address: str) -> str:
    """Derive the stable user id for an ethereum address."""
    return str(uuid.uuid5(ACCOUNT_ID_NAMESPACE, address.lower()))


def get_account_id(address: str, account_number: int = 0) -> str:
    """Derive the stable account id used in account paths.

    Args:
        address: Ethereum address owning the account (case insensitive)
        account_number: Account number under that address (default: 0)

    Returns:
        str: The account id as a UUID string

    """
    return str(
        uuid.uuid5(ACCOUNT_ID_NAMESPACE, get_user_id(address) + str(account_number))
    )
