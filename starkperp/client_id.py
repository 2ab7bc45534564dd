"""Client id generation and nonce derivation.

A client id is the idempotency key of one action. The nonce used in signed
payloads and as the fact salt is derived from it, so resubmitting an action
with the same client id always reproduces the same nonce.
"""

import secrets
from hashlib import sha256

from starkperp.errors import ValidationError
from starkperp.types import ClientId, Nonce

CLIENT_ID_ENTROPY_BITS = 128
NONCE_UPPER_BOUND_EXCLUSIVE = 2**64


def generate_random_client_id() -> ClientId:
    """Generate a random client id with 128 bits of entropy, as lowercase hex."""
    return secrets.token_hex(CLIENT_ID_ENTROPY_BITS // 8)


def nonce_from_client_id(client_id: ClientId) -> Nonce:
    """Derive the nonce of an action from its client id.

    Args:
        client_id: The action's client id

    Returns:
        Nonce: SHA-256 of the UTF-8 client id reduced to 64 bits

    Raises:
        ValidationError: If client_id is empty or not a string

    """
    if not isinstance(client_id, str) or not client_id:
        raise ValidationError(f"Invalid {client_id=}")
    digest = sha256(client_id.encode("utf-8")).digest()
    return int.from_bytes(digest, "big") % NONCE_UPPER_BOUND_EXCLUSIVE


class ClientIdentifier:
    """Generates client ids and derives their nonces.

    The orchestrator takes an instance so tests can substitute deterministic ids.
    """

    def generate(self) -> ClientId:
        """Generate a fresh client id."""
        return generate_random_client_id()

    def derive_nonce(self, client_id: ClientId) -> Nonce:
        """Derive the nonce for a client id."""
        return nonce_from_client_id(client_id)
