"""Asymmetric signing capability.

This package provides the key pair, the pluggable signer interface, the
default eth_keys based signer and the action specific signable payloads.
"""

from starkperp.signers.ecdsa import EcdsaActionSigner
from starkperp.signers.interface import ActionSigner, KeyPair
from starkperp.signers.signable import (
    SignableConditionalTransfer,
    SignableOrder,
    SignablePayload,
    SignableTransfer,
    SignableWithdrawal,
)

DEFAULT_ACTION_SIGNER = EcdsaActionSigner

__all__ = [
    "ActionSigner",
    "EcdsaActionSigner",
    "KeyPair",
    "SignablePayload",
    "SignableOrder",
    "SignableWithdrawal",
    "SignableConditionalTransfer",
    "SignableTransfer",
    "DEFAULT_ACTION_SIGNER",
]
