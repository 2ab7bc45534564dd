"""Abstract interface of the asymmetric signing capability.

This module defines the key pair held by a client and the abstract signer that
turns a signable payload into a signature, enabling pluggable signing schemes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Self

import eth_keys.datatypes
import eth_utils

from starkperp.errors import ValidationError
from starkperp.signers.signable import SignablePayload


@dataclass(frozen=True)
class KeyPair:
    """Signing key bound to one account.

    The private key is excluded from repr.
    """

    private_key: eth_keys.datatypes.PrivateKey = field(repr=False)

    @classmethod
    def from_private_key(
        cls, private_key: "str | bytes | eth_keys.datatypes.PrivateKey | KeyPair"
    ) -> Self:
        """Build a key pair from a private key.

        Args:
            private_key: Hex string (with or without 0x prefix), 32 raw bytes,
                an eth_keys PrivateKey or an existing KeyPair

        Returns:
            KeyPair: The key pair

        Raises:
            ValidationError: If the key is malformed

        """
        if isinstance(private_key, KeyPair):
            return cls(private_key.private_key)
        if isinstance(private_key, eth_keys.datatypes.PrivateKey):
            return cls(private_key)

        if isinstance(private_key, str):
            hex_key = private_key[2:] if private_key.startswith("0x") else private_key
            try:
                private_key = bytes.fromhex(hex_key)
            except ValueError as e:
                raise ValidationError("Private key is not valid hex") from e

        if not isinstance(private_key, bytes):
            raise ValidationError from TypeError(
                f"Unexpected type for private_key {type(private_key)}"
            )
        try:
            return cls(eth_keys.datatypes.PrivateKey(private_key))
        except (eth_utils.ValidationError, ValueError) as e:
            raise ValidationError(f"Invalid private key: {e}") from e

    @property
    def public_key(self) -> str:
        """Hex encoded (0x prefixed) public key."""
        return self.private_key.public_key.to_hex()


class ActionSigner(ABC):
    """Abstract base class for asymmetric action signers."""

    @abstractmethod
    def sign(
        self,
        payload: SignablePayload,
        key_pair: KeyPair,
        network_id: int,
    ) -> str:
        """Sign a payload.

        Args:
            payload: The action specific signable payload.
            key_pair: The key pair to sign with.
            network_id: Network the signature is scoped to.

        Returns:
            The signature as a hex string.

        """
        ...
