"""Action signer implementation using eth_keys.

Signs the SHA-256 digest of a payload's canonical message with secp256k1
ECDSA. Signatures are deterministic (RFC 6979), so the same payload signed
with the same key on the same network always yields the same signature.
"""

from hashlib import sha256
from typing import override

import eth_keys.datatypes
import eth_keys.exceptions
import eth_utils

from starkperp.errors import ValidationError
from starkperp.signers.interface import ActionSigner, KeyPair
from starkperp.signers.signable import SignablePayload


def message_hash(payload: SignablePayload, network_id: int) -> bytes:
    """Hash the canonical message of a payload."""
    return sha256(payload.to_message(network_id)).digest()


class EcdsaActionSigner(ActionSigner):
    """Action signer implementation using eth_keys secp256k1 ECDSA."""

    @override
    def sign(
        self,
        payload: SignablePayload,
        key_pair: KeyPair,
        network_id: int,
    ) -> str:
        """Sign a payload with the key pair.

        Args:
            payload: The action specific signable payload.
            key_pair: The key pair to sign with.
            network_id: Network the signature is scoped to.

        Returns:
            The signature as hex ``r || s || v`` without prefix.

        """
        signed_message = key_pair.private_key.sign_msg_hash(
            message_hash(payload, network_id)
        )

        r = signed_message.r.to_bytes(32, "big")
        s = signed_message.s.to_bytes(32, "big")
        v = signed_message.v.to_bytes(1, "big")

        return r.hex() + s.hex() + v.hex()

    def verify(
        self,
        payload: SignablePayload,
        signature: str,
        public_key: str,
        network_id: int,
    ) -> bool:
        """Check a signature against a payload and public key.

        The client never verifies signatures before submitting them; this is
        offered to callers that want to check a pre-computed signature.

        Args:
            payload: The payload the signature should cover.
            signature: Hex ``r || s || v`` signature.
            public_key: Hex encoded uncompressed public key (0x optional).
            network_id: Network the signature should be scoped to.

        Returns:
            True if the signature is valid for the payload and key.

        Raises:
            ValidationError: If the signature or public key is malformed.

        """
        try:
            sig = eth_keys.datatypes.Signature(
                signature_bytes=bytes.fromhex(signature.removeprefix("0x"))
            )
            key = eth_keys.datatypes.PublicKey(
                bytes.fromhex(public_key.removeprefix("0x"))
            )
        except (
            ValueError,
            eth_utils.ValidationError,
            eth_keys.exceptions.BadSignature,
        ) as e:
            raise ValidationError(f"Malformed signature or public key: {e}") from e

        return key.verify_msg_hash(message_hash(payload, network_id), sig)
