"""Private HTTP API client.

This module provides the PrivateApiClient class for the authenticated
endpoints of the exchange: account and user queries, order placement and
cancellation, withdrawals, fast withdrawals and transfers.
"""

import logging
from typing import Any, Mapping

import orjson

from starkperp.clock import Clock
from starkperp.errors import (
    BadGateway,
    BadHttpStatus,
    BadRequest,
    Forbidden,
    GatewayTimeout,
    InternalServerError,
    NotFound,
    RateLimited,
    ServiceUnavailable,
    Unauthorized,
)
from starkperp.executors import DEFAULT_HTTP_EXECUTOR, HttpExecutor
from starkperp.executors.interface import HttpResponse
from starkperp.facts import NETWORK_ID_MAINNET, NetworkConfig
from starkperp.helpers import (
    API_VERSION_PREFIX,
    DEFAULT_API_HOST,
    generate_query_path,
    get_account_id,
)
from starkperp.orchestrator import ActionSigningOrchestrator
from starkperp.request_auth import RequestAuthenticator
from starkperp.signers import ActionSigner, KeyPair
from starkperp.types import (
    ISO8601,
    AccountAction,
    ApiKeyCredentials,
    FastWithdrawalParams,
    Json,
    JsonValue,
    LeaderboardPnlPeriod,
    Market,
    OrderParams,
    OrderSide,
    OrderStatus,
    OrderType,
    PositionId,
    PositionStatus,
    RequestMethod,
    SigningContext,
    TransferParams,
    WithdrawalParams,
    enum_value,
)

log = logging.getLogger(__name__)

GenericParams = Mapping[str, Any]


def _error_message(body: Json) -> str:
    """Extract a readable message from an error response body."""
    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        messages = [
            str(e.get("msg", e)) if isinstance(e, dict) else str(e) for e in errors
        ]
        return "; ".join(messages)

    message = body.get("message") or body.get("msg")
    if message is not None:
        return str(message)

    return str(body) if body else "<no error message>"


def raise_response_errors(response: HttpResponse) -> None:
    """Check HTTP response status and raise appropriate errors.

    Args:
        response: The HTTP response to validate

    Raises:
        BadRequest: For 400 status codes
        Unauthorized: For 401 status codes
        Forbidden: For 403 status codes
        NotFound: For 404 status codes
        RateLimited: For 429 status codes
        BadHttpStatus: For other 4XX and unexpected status codes
        InternalServerError: For 500 and other 5XX status codes
        BadGateway: For 502 status codes
        ServiceUnavailable: For 503 status codes
        GatewayTimeout: For 504 status codes

    """
    status = response.status

    if 200 <= status < 300:
        return

    body = response.body if isinstance(response.body, dict) else {}
    error_message = _error_message(body)

    # 4xx Client Errors
    if status == 400:
        raise BadRequest(status, f"Bad request: {error_message}")

    if status == 401:
        raise Unauthorized(status, f"Unauthorized: {error_message}")

    if status == 403:
        raise Forbidden(status, f"Forbidden: {error_message}")

    if status == 404:
        raise NotFound(status, f"Not found: {error_message}")

    if status == 429:
        reset = (response.headers or {}).get("ratelimit-reset")
        rate_limit_msg = f"Rate limit exceeded: {error_message}"
        if reset is not None:
            rate_limit_msg += f" (resets at {reset})"
        raise RateLimited(status, rate_limit_msg)

    if 400 <= status < 500:
        raise BadHttpStatus(status, f"Client error ({status}): {error_message}")

    # 5xx Server Errors
    if status == 500:
        raise InternalServerError(status, f"Internal server error: {error_message}")

    if status == 502:
        raise BadGateway(status, f"Bad gateway: {error_message}")

    if status == 503:
        raise ServiceUnavailable(status, f"Service unavailable: {error_message}")

    if status == 504:
        raise GatewayTimeout(status, f"Gateway timeout: {error_message}")

    if 500 <= status < 600:
        raise InternalServerError(status, f"Server error ({status}): {error_message}")

    raise BadHttpStatus(status, f"Unexpected status code ({status}): {error_message}")


class PrivateApiClient:
    """Client for the authenticated endpoints of the exchange.

    Every request is signed with the API credentials. Orders, withdrawals,
    fast withdrawals and transfers are additionally signed with the account's
    signing key unless the caller supplies a signature.

    Examples:
        .. code-block:: python

            from starkperp import ApiKeyCredentials, OrderParams, PrivateApiClient

            client = PrivateApiClient(
                api_key_credentials=ApiKeyCredentials(
                    key=os.environ["STARKPERP_API_KEY"],
                    secret=os.environ["STARKPERP_API_SECRET"],
                    passphrase=os.environ["STARKPERP_API_PASSPHRASE"],
                ),
                network_id=1,
                stark_private_key=os.environ["STARKPERP_STARK_PRIVATE_KEY"],
            )

            order = client.create_order(
                OrderParams(
                    market="BTC-USD",
                    side="BUY",
                    type="LIMIT",
                    postOnly=False,
                    size="1.5",
                    price="50000",
                    limitFee="0.0015",
                    expiration="2024-01-01T00:00:00.000Z",
                ),
                position_id="12345",
            )
    """

    host: str
    clock: Clock

    _authenticator: RequestAuthenticator
    _orchestrator: ActionSigningOrchestrator
    _http_executor: HttpExecutor

    def __init__(
        self,
        api_key_credentials: ApiKeyCredentials,
        network_id: int = NETWORK_ID_MAINNET,
        host: str = DEFAULT_API_HOST,
        stark_private_key: str | bytes | KeyPair | None = None,
        clock: Clock | None = None,
        executor: HttpExecutor | None = None,
        signer: ActionSigner | None = None,
        network_config: NetworkConfig | None = None,
    ):
        """Initialize the private API client.

        Args:
            api_key_credentials: API key, base64 secret and passphrase
            network_id: Network all action signatures are scoped to
            host: Base URL of the API (default: production host)
            stark_private_key: Signing key for orders and transfers (optional)
            clock: Timestamp source (default: unadjusted local clock)
            executor: Custom HTTP executor (optional, uses default if not provided)
            signer: Custom asymmetric signer (optional)
            network_config: On-chain addresses for fast withdrawals (optional)

        Raises:
            InvalidSecret: If the API secret is not valid base64
            ValidationError: If the network id or private key is invalid

        """
        self.host = host.rstrip("/")
        self.clock = clock if clock is not None else Clock()
        self._authenticator = RequestAuthenticator(api_key_credentials)

        key_pair = (
            KeyPair.from_private_key(stark_private_key)
            if stark_private_key is not None
            else None
        )
        self._orchestrator = ActionSigningOrchestrator(
            SigningContext(network_id=network_id),
            key_pair=key_pair,
            signer=signer,
            network_config=network_config,
        )
        self._http_executor = (
            executor if executor is not None else DEFAULT_HTTP_EXECUTOR()
        )

    @property
    def network_id(self) -> int:
        """Network all action signatures are scoped to."""
        return self._orchestrator.signing_context.network_id

    @property
    def orchestrator(self) -> ActionSigningOrchestrator:
        """The orchestrator signing this client's actions."""
        return self._orchestrator

    @property
    def authenticator(self) -> RequestAuthenticator:
        """The authenticator signing this client's requests."""
        return self._authenticator

    ############################################################################
    ## Request helpers

    def request(
        self,
        method: RequestMethod | str,
        endpoint: str,
        data: Mapping[str, JsonValue] | None = None,
    ) -> Json:
        """Send an authenticated request.

        The timestamp is read once and used for both the signature and the
        timestamp header.

        Args:
            method: HTTP method
            endpoint: Endpoint without version prefix, including any query string
            data: Request body (optional)

        Returns:
            Json: The parsed JSON response body

        Raises:
            ExchangeError: If the server responds with a non-2XX status
            TransportError: If the request could not be transported

        """
        request_path = f"{API_VERSION_PREFIX}{endpoint}"
        iso_timestamp = self.clock.get_adjusted_iso_string()
        envelope = self._authenticator.build_envelope(
            method, request_path, iso_timestamp, data
        )

        log.debug("%s %s", envelope.method.value, request_path)
        response = self._http_executor.send_request(
            envelope.method.value,
            f"{self.host}{request_path}",
            envelope.headers,
            envelope.body,
        )
        raise_response_errors(response)
        return response.body

    def get(self, endpoint: str, params: GenericParams) -> Json:
        """Send an authenticated GET request to any private endpoint."""
        return self._get(endpoint, params)

    def _get(self, endpoint: str, params: GenericParams) -> Json:
        return self.request(RequestMethod.GET, generate_query_path(endpoint, params))

    def _post(self, endpoint: str, data: Mapping[str, JsonValue]) -> Json:
        return self.request(RequestMethod.POST, endpoint, data)

    def _put(self, endpoint: str, data: Mapping[str, JsonValue]) -> Json:
        return self.request(RequestMethod.PUT, endpoint, data)

    def _delete(self, endpoint: str, params: GenericParams) -> Json:
        return self.request(
            RequestMethod.DELETE, generate_query_path(endpoint, params)
        )

    ############################################################################
    ## Users and accounts

    def get_registration(self, generic_params: GenericParams | None = None) -> Json:
        """Get the registration signature for the ethereum address.

        Endpoint:
            GET /v3/registration

        """
        return self._get("registration", {**(generic_params or {})})

    def get_user(self, generic_params: GenericParams | None = None) -> Json:
        """Get the user associated with the ethereum address.

        Endpoint:
            GET /v3/users

        """
        return self._get("users", {**(generic_params or {})})

    def update_user(
        self,
        email: str,
        username: str,
        user_data: Mapping[str, JsonValue],
    ) -> Json:
        """Update information for the user.

        Args:
            email: Email associated with the user
            username: Username of the user
            user_data: Free form user data, sent JSON encoded as a string

        Endpoint:
            PUT /v3/users

        """
        return self._put(
            "users",
            {
                "email": email,
                "username": username,
                "userData": orjson.dumps(dict(user_data)).decode("utf-8"),
            },
        )

    def create_account(self, stark_key: str, stark_key_y_coordinate: str) -> Json:
        """Create an account for the ethereum address.

        Args:
            stark_key: Public key used for signing by this account
            stark_key_y_coordinate: Y coordinate of the public key

        Endpoint:
            POST /v3/accounts

        """
        return self._post(
            "accounts",
            {
                "starkKey": stark_key,
                "starkKeyYCoordinate": stark_key_y_coordinate,
            },
        )

    def get_account(
        self,
        ethereum_address: str,
        generic_params: GenericParams | None = None,
    ) -> Json:
        """Get account number 0 of an ethereum address.

        Endpoint:
            GET /v3/accounts/:id

        """
        return self._get(
            f"accounts/{get_account_id(ethereum_address)}",
            {**(generic_params or {})},
        )

    def get_accounts(self, generic_params: GenericParams | None = None) -> Json:
        """Get all accounts of the ethereum address.

        Endpoint:
            GET /v3/accounts

        """
        return self._get("accounts", {**(generic_params or {})})

    def get_account_leaderboard_pnl(
        self,
        period: LeaderboardPnlPeriod | str,
        generic_params: GenericParams | None = None,
    ) -> Json:
        """Get leaderboard pnl of account number 0 for a period.

        Endpoint:
            GET /v3/accounts/leaderboard-pnl/:period

        """
        period_value = enum_value(period)
        return self._get(
            f"accounts/leaderboard-pnl/{period_value}",
            {**(generic_params or {})},
        )

    def get_positions(
        self,
        market: Market | str | None = None,
        status: PositionStatus | str | None = None,
        limit: int | None = None,
        created_before_or_at: ISO8601 | None = None,
        generic_params: GenericParams | None = None,
    ) -> Json:
        """Get positions of the account.

        Endpoint:
            GET /v3/positions

        """
        return self._get(
            "positions",
            {
                "market": market,
                "status": status,
                "limit": limit,
                "createdBeforeOrAt": created_before_or_at,
                **(generic_params or {}),
            },
        )

    ############################################################################
    ## Orders

    def get_orders(
        self,
        market: Market | str | None = None,
        status: OrderStatus | str | None = None,
        side: OrderSide | str | None = None,
        type: OrderType | str | None = None,
        limit: int | None = None,
        created_before_or_at: ISO8601 | None = None,
        generic_params: GenericParams | None = None,
    ) -> Json:
        """Get orders matching the filters.

        Endpoint:
            GET /v3/orders

        """
        return self._get(
            "orders",
            {
                "market": market,
                "status": status,
                "side": side,
                "type": type,
                "limit": limit,
                "createdBeforeOrAt": created_before_or_at,
                **(generic_params or {}),
            },
        )

    def get_order_by_id(
        self, order_id: str, generic_params: GenericParams | None = None
    ) -> Json:
        """Get an order by its id.

        Endpoint:
            GET /v3/orders/:id

        """
        return self._get(f"orders/{order_id}", {**(generic_params or {})})

    def get_order_by_client_id(
        self, client_id: str, generic_params: GenericParams | None = None
    ) -> Json:
        """Get an order by its client id.

        Endpoint:
            GET /v3/orders/client/:id

        """
        return self._get(f"orders/client/{client_id}", {**(generic_params or {})})

    def create_order(self, params: OrderParams, position_id: PositionId) -> Json:
        """Place a new order.

        The order is signed locally unless ``params.signature`` is set. Reusing
        the clientId and signature of a previous attempt resubmits the exact
        same order without signing again.

        Args:
            params: The order, optionally with clientId and signature
            position_id: Position of the account placing the order

        Returns:
            Json: The response containing the created order

        Raises:
            UnsignedActionError: If unsigned and no signing key is configured
            SigningCapabilityFailure: If local signing fails

        Endpoint:
            POST /v3/orders

        """
        order = self._orchestrator.sign_order(params, position_id)
        return self._post("orders", order)

    def cancel_order(self, order_id: str) -> Json:
        """Cancel an order by its id.

        Endpoint:
            DELETE /v3/orders/:id

        """
        return self._delete(f"orders/{order_id}", {})

    def cancel_all_orders(self, market: Market | str | None = None) -> Json:
        """Cancel all orders, optionally only for one market.

        Endpoint:
            DELETE /v3/orders

        """
        params = {"market": market} if market else {}
        return self._delete("orders", params)

    def get_fills(
        self,
        market: Market | str | None = None,
        order_id: str | None = None,
        limit: int | None = None,
        created_before_or_at: ISO8601 | None = None,
        generic_params: GenericParams | None = None,
    ) -> Json:
        """Get fills matching the filters.

        Endpoint:
            GET /v3/fills

        """
        return self._get(
            "fills",
            {
                "market": market,
                "orderId": order_id,
                "limit": limit,
                "createdBeforeOrAt": created_before_or_at,
                **(generic_params or {}),
            },
        )

    ############################################################################
    ## Transfers

    def get_transfers(
        self,
        type: AccountAction | str | None = None,
        limit: int | None = None,
        created_before_or_at: ISO8601 | None = None,
        generic_params: GenericParams | None = None,
    ) -> Json:
        """Get transfers matching the filters.

        Endpoint:
            GET /v3/transfers

        """
        return self._get(
            "transfers",
            {
                "type": type,
                "limit": limit,
                "createdBeforeOrAt": created_before_or_at,
                **(generic_params or {}),
            },
        )

    def create_withdrawal(
        self, params: WithdrawalParams, position_id: PositionId
    ) -> Json:
        """Request a withdrawal.

        Raises:
            UnsignedActionError: If unsigned and no signing key is configured
            SigningCapabilityFailure: If local signing fails

        Endpoint:
            POST /v3/withdrawals

        """
        withdrawal = self._orchestrator.sign_withdrawal(params, position_id)
        return self._post("withdrawals", withdrawal)

    def create_fast_withdrawal(
        self, params: FastWithdrawalParams, position_id: PositionId
    ) -> Json:
        """Request a fast withdrawal through a liquidity provider.

        Args:
            params: The fast withdrawal. lpStarkKey is required when signing
                locally and is never transmitted.
            position_id: Position the funds are debited from

        Raises:
            UnsignedActionError: If unsigned and no signing key is configured
            MissingCounterpartyKey: If signing locally without lpStarkKey
            SigningCapabilityFailure: If local signing fails

        Endpoint:
            POST /v3/fast-withdrawals

        """
        fast_withdrawal = self._orchestrator.sign_fast_withdrawal(params, position_id)
        return self._post("fast-withdrawals", fast_withdrawal)

    def create_transfer(self, params: TransferParams, position_id: PositionId) -> Json:
        """Transfer funds to another account.

        Raises:
            UnsignedActionError: If unsigned and no signing key is configured
            SigningCapabilityFailure: If local signing fails

        Endpoint:
            POST /v3/transfers

        """
        transfer = self._orchestrator.sign_transfer(params, position_id)
        return self._post("transfers", transfer)

    ############################################################################
    ## Funding, pnl and keys

    def get_funding_payments(
        self,
        market: Market | str | None = None,
        limit: int | None = None,
        effective_before_or_at: ISO8601 | None = None,
        generic_params: GenericParams | None = None,
    ) -> Json:
        """Get funding payments matching the filters.

        Endpoint:
            GET /v3/funding

        """
        return self._get(
            "funding",
            {
                "market": market,
                "limit": limit,
                "effectiveBeforeOrAt": effective_before_or_at,
                **(generic_params or {}),
            },
        )

    def get_historical_pnl(
        self,
        created_before_or_at: ISO8601 | None = None,
        created_on_or_after: ISO8601 | None = None,
        generic_params: GenericParams | None = None,
    ) -> Json:
        """Get historical pnl ticks between two times.

        Endpoint:
            GET /v3/historical-pnl

        """
        return self._get(
            "historical-pnl",
            {
                "createdBeforeOrAt": created_before_or_at,
                "createdOnOrAfter": created_on_or_after,
                **(generic_params or {}),
            },
        )

    def get_api_keys(self, generic_params: GenericParams | None = None) -> Json:
        """Get the API keys of the ethereum address.

        Endpoint:
            GET /v3/api-keys

        """
        return self._get("api-keys", {**(generic_params or {})})

    def send_verification_email(self) -> Json:
        """Send a verification email to the user's address.

        Endpoint:
            PUT /v3/emails/send-verification-email

        """
        return self._put("emails/send-verification-email", {})


__all__ = ["PrivateApiClient", "raise_response_errors"]
