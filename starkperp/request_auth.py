"""Symmetric request authentication.

Every private request carries an HMAC-SHA256 signature over the canonical
message ``timestamp + method + path + body``. The body segment is empty when
the request has no data, including an empty object, and is otherwise the
compact JSON that is actually transmitted.
"""

import base64
import binascii
import hmac
import logging
from dataclasses import dataclass, field
from hashlib import sha256
from typing import Mapping, assert_never

from starkperp.errors import InvalidSecret, MissingCredentialsError, ValidationError
from starkperp.helpers import get_starkperp_client, serialize_request
from starkperp.types import ISO8601, ApiKeyCredentials, JsonValue, RequestMethod

log = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-SIGNATURE"
API_KEY_HEADER = "X-API-KEY"
TIMESTAMP_HEADER = "X-TIMESTAMP"
PASSPHRASE_HEADER = "X-PASSPHRASE"

RequestData = Mapping[str, JsonValue] | bytes | str | None


def decode_secret(secret: str) -> bytes:
    """Decode a base64 API secret.

    Both the standard and the URL-safe alphabets are accepted and missing
    padding is tolerated.

    Args:
        secret: The base64 encoded secret

    Returns:
        bytes: The raw HMAC key

    Raises:
        InvalidSecret: If the secret is empty or not valid base64

    """
    if not isinstance(secret, str):
        raise InvalidSecret(f"expected str, got {type(secret).__name__}")
    normalized = secret.strip().replace("-", "+").replace("_", "/")
    if not normalized:
        raise InvalidSecret("secret is empty")
    normalized += "=" * (-len(normalized) % 4)
    try:
        key = base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecret(str(e)) from e
    if not key:
        raise InvalidSecret("secret decodes to an empty key")
    return key


def to_request_method(method: RequestMethod | str) -> RequestMethod:
    """Coerce a method name to RequestMethod.

    Raises:
        ValidationError: If the method is not one of GET, POST, PUT, DELETE

    """
    if isinstance(method, RequestMethod):
        return method
    try:
        return RequestMethod(str(method).upper())
    except ValueError as e:
        raise ValidationError(f"Unsupported request method {method!r}") from e


def method_code(method: RequestMethod | str) -> str:
    """Map an HTTP method onto the short code used in the canonical message."""
    method = to_request_method(method)
    if method is RequestMethod.GET:
        return "GET"
    elif method is RequestMethod.POST:
        return "POST"
    elif method is RequestMethod.PUT:
        return "PUT"
    elif method is RequestMethod.DELETE:
        return "DELETE"
    else:
        assert_never(method)


def data_segment(data: RequestData) -> str:
    """Return the body part of the canonical message.

    None and empty payloads contribute the empty string, never ``{}``.
    Serialized bodies are used verbatim so the signature covers exactly the
    bytes that are sent.
    """
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8")
    if isinstance(data, str):
        return data
    body = serialize_request(dict(data))
    return "" if body is None else body.decode("utf-8")


def canonical_message(
    request_path: str,
    method: RequestMethod | str,
    iso_timestamp: ISO8601,
    data: RequestData = None,
) -> str:
    """Build the exact string covered by the request signature."""
    return iso_timestamp + method_code(method) + request_path + data_segment(data)


@dataclass(frozen=True)
class RequestEnvelope:
    """A fully authenticated request ready for the transport.

    ``body`` holds the exact bytes to transmit; the signature header was
    computed over those bytes and ``timestamp``.
    """

    method: RequestMethod
    path: str
    body: bytes | None
    timestamp: ISO8601
    headers: dict[str, str] = field(repr=False)


class RequestAuthenticator:
    """Signs private requests with the account's API secret.

    The secret is decoded once at construction. Signing is a pure function of
    its inputs and the secret.

    Example:
        .. code-block:: python

            authenticator = RequestAuthenticator(credentials)
            signature = authenticator.sign(
                "/v3/orders", RequestMethod.GET, "2024-01-01T00:00:00.000Z"
            )

    """

    _credentials: ApiKeyCredentials
    _hmac_key: bytes

    def __init__(self, credentials: ApiKeyCredentials):
        """Initialize the authenticator.

        Args:
            credentials: The API key credentials

        Raises:
            MissingCredentialsError: If the API key or passphrase is empty
            InvalidSecret: If credentials.secret is not valid base64

        """
        if not credentials.key:
            raise MissingCredentialsError("API key")
        if not credentials.passphrase:
            raise MissingCredentialsError("API passphrase")
        self._credentials = credentials
        self._hmac_key = decode_secret(credentials.secret)

    @property
    def api_key(self) -> str:
        """The API key sent with every request."""
        return self._credentials.key

    def sign(
        self,
        request_path: str,
        method: RequestMethod | str,
        iso_timestamp: ISO8601,
        data: RequestData = None,
    ) -> str:
        """Compute the request signature.

        Args:
            request_path: Path including the version prefix and query string
            method: HTTP method
            iso_timestamp: Timestamp also sent in the timestamp header
            data: Request body as a mapping or already serialized JSON

        Returns:
            str: Base64 encoded HMAC-SHA256 digest

        """
        message = canonical_message(request_path, method, iso_timestamp, data)
        digest = hmac.new(self._hmac_key, message.encode("utf-8"), sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def build_envelope(
        self,
        method: RequestMethod | str,
        request_path: str,
        iso_timestamp: ISO8601,
        data: Mapping[str, JsonValue] | None = None,
    ) -> RequestEnvelope:
        """Serialize the body once and sign exactly what will be sent.

        Args:
            method: HTTP method
            request_path: Path including the version prefix and query string
            iso_timestamp: The single timestamp captured for this attempt
            data: Request body, or None

        Returns:
            RequestEnvelope: Body bytes and authentication headers

        """
        method = to_request_method(method)
        body = serialize_request(dict(data)) if data is not None else None
        headers = {
            SIGNATURE_HEADER: self.sign(request_path, method, iso_timestamp, body),
            API_KEY_HEADER: self._credentials.key,
            TIMESTAMP_HEADER: iso_timestamp,
            PASSPHRASE_HEADER: self._credentials.passphrase,
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Starkperp-Client": get_starkperp_client(),
        }
        return RequestEnvelope(
            method=method,
            path=request_path,
            body=body,
            timestamp=iso_timestamp,
            headers=headers,
        )
