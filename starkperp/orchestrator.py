"""Signing of orders, withdrawals, fast withdrawals and transfers.

Every action moves through the same steps: a client id is assigned (the
caller's, or a fresh one), the signature is resolved (the caller's, or one
produced locally with the configured key pair), and both are merged into the
action fields to form the payload handed to the transport.

Caller supplied signatures are never verified here; the exchange verifies them.
"""

import logging
from dataclasses import dataclass
from typing import Callable, TypeAlias

from starkperp.client_id import ClientIdentifier
from starkperp.errors import (
    BaseError,
    MissingCounterpartyKey,
    SigningCapabilityFailure,
    UnsignedActionError,
)
from starkperp.facts import NetworkConfig, get_network_config, get_transfer_erc20_fact
from starkperp.signers import DEFAULT_ACTION_SIGNER, ActionSigner, KeyPair
from starkperp.signers.signable import (
    SignableConditionalTransfer,
    SignableOrder,
    SignablePayload,
    SignableTransfer,
    SignableWithdrawal,
)
from starkperp.types import (
    ClientId,
    FastWithdrawalParams,
    JsonObject,
    OrderParams,
    PositionId,
    SignableAction,
    SigningContext,
    TransferParams,
    WithdrawalParams,
    enum_value,
)

log = logging.getLogger(__name__)


# ============================================================================
# SIGNATURE RESOLUTION
# ============================================================================


@dataclass(frozen=True)
class Supplied:
    """The caller provided the signature."""

    signature: str


@dataclass(frozen=True)
class NeedsLocalSigning:
    """The signature must be produced locally over this payload."""

    payload: SignablePayload


SignatureResolution: TypeAlias = Supplied | NeedsLocalSigning


def resolve_signature(
    action_name: str,
    supplied_signature: str | None,
    key_pair: KeyPair | None,
    build_payload: Callable[[], SignablePayload],
) -> SignatureResolution:
    """Decide whether an action keeps its signature or must be signed locally.

    ``build_payload`` is only called when local signing is needed.

    Args:
        action_name: Name used in error messages
        supplied_signature: Signature provided by the caller, if any
        key_pair: Configured key pair, if any
        build_payload: Builds the signable payload

    Returns:
        SignatureResolution: Supplied or NeedsLocalSigning

    Raises:
        UnsignedActionError: If there is no signature and no key pair

    """
    if supplied_signature:
        return Supplied(supplied_signature)
    if key_pair is None:
        raise UnsignedActionError(action_name)
    return NeedsLocalSigning(build_payload())


# ============================================================================
# ORCHESTRATOR
# ============================================================================


class ActionSigningOrchestrator:
    """Assigns client ids and resolves signatures for signable actions.

    Holds only immutable configuration, so one instance can serve concurrent
    calls.

    Example:
        .. code-block:: python

            orchestrator = ActionSigningOrchestrator(
                SigningContext(network_id=1),
                key_pair=KeyPair.from_private_key(private_key),
            )
            payload = orchestrator.sign_order(order, position_id="12345")

    """

    _signing_context: SigningContext
    _key_pair: KeyPair | None
    _signer: ActionSigner
    _client_identifier: ClientIdentifier
    _network_config: NetworkConfig | None

    def __init__(
        self,
        signing_context: SigningContext,
        key_pair: KeyPair | None = None,
        signer: ActionSigner | None = None,
        client_identifier: ClientIdentifier | None = None,
        network_config: NetworkConfig | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            signing_context: Network scope of all signatures
            key_pair: Key pair for local signing (optional)
            signer: Asymmetric signing capability (default: EcdsaActionSigner)
            client_identifier: Client id source (default: random ids)
            network_config: On-chain addresses for fast withdrawals (default:
                looked up from the network id when first needed)

        """
        self._signing_context = signing_context
        self._key_pair = key_pair
        self._signer = signer if signer is not None else DEFAULT_ACTION_SIGNER()
        self._client_identifier = (
            client_identifier if client_identifier is not None else ClientIdentifier()
        )
        self._network_config = network_config

    @property
    def signing_context(self) -> SigningContext:
        """Network scope of all signatures."""
        return self._signing_context

    @property
    def can_sign(self) -> bool:
        """Whether a key pair is configured for local signing."""
        return self._key_pair is not None

    @property
    def network_config(self) -> NetworkConfig:
        """On-chain addresses for the configured network."""
        if self._network_config is not None:
            return self._network_config
        return get_network_config(self._signing_context.network_id)

    def assign_client_id(self, client_id: ClientId | None) -> ClientId:
        """Keep the caller's client id, or generate one."""
        if client_id:
            return client_id
        return self._client_identifier.generate()

    def sign_order(self, params: OrderParams, position_id: PositionId) -> JsonObject:
        """Finalize an order.

        Args:
            params: The order, optionally with clientId and signature
            position_id: Position the order belongs to

        Returns:
            JsonObject: Order fields with clientId and signature

        Raises:
            UnsignedActionError: If unsigned and no key pair is configured
            SigningCapabilityFailure: If the signer fails

        """

        def build(client_id: ClientId) -> SignablePayload:
            return SignableOrder(
                humanSize=str(params.size),
                humanPrice=str(params.price),
                limitFee=str(params.limitFee),
                market=enum_value(params.market),
                side=enum_value(params.side),
                expiration=params.expiration,
                clientId=client_id,
                positionId=position_id,
            )

        return self._finalize(params, build)

    def sign_withdrawal(
        self, params: WithdrawalParams, position_id: PositionId
    ) -> JsonObject:
        """Finalize a withdrawal.

        Raises:
            UnsignedActionError: If unsigned and no key pair is configured
            SigningCapabilityFailure: If the signer fails

        """

        def build(client_id: ClientId) -> SignablePayload:
            return SignableWithdrawal(
                humanAmount=str(params.amount),
                expiration=params.expiration,
                clientId=client_id,
                positionId=position_id,
            )

        return self._finalize(params, build)

    def sign_fast_withdrawal(
        self, params: FastWithdrawalParams, position_id: PositionId
    ) -> JsonObject:
        """Finalize a fast withdrawal.

        When signing locally the fact is derived first, salted with the nonce
        of the resolved client id, and the LP's public key is required.

        Args:
            params: The fast withdrawal, optionally with clientId and signature
            position_id: Position the funds are debited from

        Returns:
            JsonObject: Fast withdrawal fields with clientId and signature.
                lpStarkKey is never included.

        Raises:
            UnsignedActionError: If unsigned and no key pair is configured
            MissingCounterpartyKey: If signing locally without lpStarkKey
            SigningCapabilityFailure: If the signer fails

        """

        def build(client_id: ClientId) -> SignablePayload:
            if not params.lpStarkKey:
                raise MissingCounterpartyKey("lpStarkKey")
            network = self.network_config
            fact = get_transfer_erc20_fact(
                recipient=params.toAddress,
                token_address=network.collateral_token_address,
                token_decimals=network.collateral_token_decimals,
                human_amount=str(params.creditAmount),
                salt=self._client_identifier.derive_nonce(client_id),
            )
            return SignableConditionalTransfer(
                senderPositionId=position_id,
                receiverPositionId=params.lpPositionId,
                receiverPublicKey=params.lpStarkKey,
                factRegistryAddress=network.fact_registry_address,
                fact=fact,
                humanAmount=str(params.debitAmount),
                clientId=client_id,
                expiration=params.expiration,
            )

        return self._finalize(params, build)

    def sign_transfer(
        self, params: TransferParams, position_id: PositionId
    ) -> JsonObject:
        """Finalize a transfer.

        Raises:
            UnsignedActionError: If unsigned and no key pair is configured
            SigningCapabilityFailure: If the signer fails

        """

        def build(client_id: ClientId) -> SignablePayload:
            return SignableTransfer(
                humanAmount=str(params.amount),
                expiration=params.expiration,
                receiverPositionId=params.receiverPositionId,
                senderPositionId=position_id,
                receiverPublicKey=params.receiverPublicKey,
                clientId=client_id,
            )

        return self._finalize(params, build)

    def _finalize(
        self,
        action: SignableAction,
        build: Callable[[ClientId], SignablePayload],
    ) -> JsonObject:
        client_id = self.assign_client_id(action.clientId)
        resolution = resolve_signature(
            action.ACTION_NAME,
            action.signature,
            self._key_pair,
            lambda: build(client_id),
        )

        if isinstance(resolution, Supplied):
            log.debug("%s carries a caller supplied signature", action.ACTION_NAME)
            signature = resolution.signature
        else:
            signature = self._sign(action.ACTION_NAME, resolution.payload)

        return action.to_request(client_id, signature)

    def _sign(self, action_name: str, payload: SignablePayload) -> str:
        # resolve_signature only yields NeedsLocalSigning with a key pair
        assert self._key_pair is not None

        log.debug(
            "Signing %s locally on network %d",
            action_name,
            self._signing_context.network_id,
        )
        try:
            signature = self._signer.sign(
                payload, self._key_pair, self._signing_context.network_id
            )
        except BaseError:
            raise
        except Exception as e:
            raise SigningCapabilityFailure(action_name, str(e)) from e

        if not isinstance(signature, str) or not signature:
            raise SigningCapabilityFailure(action_name, "signer returned no signature")
        return signature
