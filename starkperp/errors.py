"""Exception hierarchy for the starkperp client.

This module defines the public exception hierarchy for the entire client. All
exceptions raised by this library inherit from BaseError.

Exception Hierarchy
-------------------
BaseError
├── ExchangeError - API server returned an error response
├── TransportError - Network/protocol-level errors during transmission
├── ValidationError - Client-side input validation failures
└── SigningError - An action could not be signed
"""


class BaseError(Exception):
    """Base exception for all starkperp errors.

    All exceptions raised by this library inherit from this class, allowing users
    to catch all client-related errors with a single except clause.

    This exception should not be raised directly. Use one of the specific subclasses
    instead (ExchangeError, TransportError, ValidationError, SigningError).
    """

    pass


# ============================================================================
# EXCHANGE ERROR
# ============================================================================


class ExchangeError(BaseError):
    """Exception raised when the API server returns an error response.

    ExchangeError indicates that:
    - The network connection succeeded
    - The request was properly formatted and transmitted
    - A server processed the request and returned an error response
    """

    pass


class BadHttpStatus(ExchangeError):
    """Raised when response status from exchange is not 2XX."""

    status_code: int
    message: str

    def __init__(self, status_code: int, message: str):
        """Initialize a BadHttpStatus error.

        Args:
            status_code: The HTTP status code returned by the server.
            message: Description of the HTTP error.

        """
        self.status_code = status_code
        self.message = message
        super().__init__(message)


## 5xx status errors


class InternalServerError(BadHttpStatus):
    """Raised when the server returns a 500 Internal Server Error."""

    pass


class BadGateway(BadHttpStatus):
    """Raised when the server returns a 502 Bad Gateway error."""

    pass


class ServiceUnavailable(BadHttpStatus):
    """Raised when the server returns a 503 Service Unavailable error."""

    pass


class GatewayTimeout(BadHttpStatus):
    """Raised when the server returns a 504 Gateway Timeout error."""

    pass


## 4xx status errors


class BadRequest(BadHttpStatus):
    """Raised when the server returns a 400 Bad Request error."""

    pass


class NotFound(BadHttpStatus):
    """Raised when the server returns a 404 Not Found error."""

    pass


class RateLimited(BadHttpStatus):
    """Raised when the server returns a 429 Rate Limited error."""

    pass


class Unauthorized(BadHttpStatus):
    """Raised when the server returns a 401 Unauthorized error."""

    pass


class Forbidden(BadHttpStatus):
    """Raised when the server returns a 403 Forbidden error."""

    pass


# ============================================================================
# TRANSPORT ERROR
# ============================================================================


class TransportError(BaseError):
    """Exception raised for errors in the process of transporting data to/from the API server.

    TransportError indicates that valid application-level data was not
    successfully exchanged. The client never retries these; retry policy belongs
    to the caller, which must reuse the already signed payload (same clientId and
    signature) rather than signing the action again.
    """

    pass


class HttpConnectionError(TransportError):
    """Raised when a connection cannot be established or is lost."""

    def __init__(self, message: str, url: str | None = None):
        """Initialize an HttpConnectionError.

        Args:
            message: Description of the connection error.
            url: The URL that failed to connect, if available.

        """
        self.message = message
        self.url = url
        if url:
            super().__init__(f"{message} (url: {url})")
        else:
            super().__init__(message)


class TransportTimeoutError(TransportError):
    """Raised when a request or connection times out."""

    def __init__(self, message: str, timeout_seconds: float | None = None):
        """Initialize a TransportTimeoutError.

        Args:
            message: Description of the timeout error.
            timeout_seconds: The timeout duration in seconds, if available.

        """
        self.message = message
        self.timeout_seconds = timeout_seconds
        if timeout_seconds:
            super().__init__(f"{message} (timeout: {timeout_seconds}s)")
        else:
            super().__init__(message)


class DeserializationError(TransportError):
    """Raised when response data cannot be deserialized/decoded."""

    def __init__(self, message: str):
        """Initialize a DeserializationError.

        Args:
            message: Description of the deserialization error.

        """
        self.message = message
        super().__init__(message)


class SerializationError(TransportError):
    """Raised when request data cannot be serialized/encoded."""

    def __init__(self, message: str):
        """Initialize a SerializationError.

        Args:
            message: Description of the serialization error.

        """
        self.message = message
        super().__init__(message)


# ============================================================================
# VALIDATION ERROR
# ============================================================================


class ValidationError(BaseError):
    """Exception raised for client-side input validation failures.

    ValidationError indicates that:
    - No network request was attempted
    - The error is due to invalid input from the caller
    - The error can be fixed by correcting the input parameters
    """

    pass


class MissingCredentialsError(ValidationError):
    """Raised when required authentication credentials are missing."""

    def __init__(self, credential_type: str = "API key"):
        """Initialize a MissingCredentialsError.

        Args:
            credential_type: The type of credential that is missing (default: "API key").

        """
        self.credential_type = credential_type
        super().__init__(f"{credential_type} is not set")


class InvalidSecret(ValidationError):
    """Raised at construction when the API secret is not valid base64."""

    def __init__(self, reason: str):
        """Initialize an InvalidSecret error.

        Args:
            reason: Why the secret could not be decoded. Never contains the secret.

        """
        self.reason = reason
        super().__init__(f"API secret is not valid base64: {reason}")


class MissingCounterpartyKey(ValidationError):
    """Raised when a fast withdrawal is signed locally without the LP public key."""

    def __init__(self, field_name: str = "lpStarkKey"):
        """Initialize a MissingCounterpartyKey error.

        Args:
            field_name: Name of the missing receiver public key field.

        """
        self.field_name = field_name
        super().__init__(
            f"{field_name} is required to sign a fast withdrawal locally"
        )


# ============================================================================
# SIGNING ERROR
# ============================================================================


class SigningError(BaseError):
    """Exception raised when an action cannot be signed.

    No SignedPayload is ever produced when a SigningError is raised.
    """

    pass


class UnsignedActionError(SigningError):
    """Raised when an action needs a local signature but no key pair is configured."""

    def __init__(self, action: str):
        """Initialize an UnsignedActionError.

        Args:
            action: Human readable name of the action (e.g. "Order").

        """
        self.action = action
        super().__init__(
            f"{action} is not signed and client was not initialized with a signing key"
        )


class SigningCapabilityFailure(SigningError):
    """Raised when the asymmetric signing capability itself fails."""

    def __init__(self, action: str, message: str):
        """Initialize a SigningCapabilityFailure.

        Args:
            action: Human readable name of the action being signed.
            message: Description of the failure.

        """
        self.action = action
        self.message = message
        super().__init__(f"Failed to sign {action}: {message}")
