"""Fact derivation for fast withdrawals.

A fast withdrawal is a transfer to a liquidity provider that only becomes
valid once the LP registers a fact on chain proving it paid the recipient.
The fact commits to the recipient, the token, the quantized amount and a salt
derived from the withdrawal's client id.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import eth_utils

from starkperp.errors import ValidationError
from starkperp.types import HumanNumericInput, Nonce

log = logging.getLogger(__name__)

NETWORK_ID_MAINNET = 1
NETWORK_ID_ROPSTEN = 3

COLLATERAL_TOKEN_DECIMALS = 6

UINT256_UPPER_BOUND_EXCLUSIVE = 2**256


@dataclass(frozen=True)
class NetworkConfig:
    """On-chain addresses used when signing for one network."""

    network_id: int
    collateral_token_address: str
    fact_registry_address: str
    collateral_token_decimals: int = COLLATERAL_TOKEN_DECIMALS


KNOWN_NETWORKS: dict[int, NetworkConfig] = {
    NETWORK_ID_MAINNET: NetworkConfig(
        network_id=NETWORK_ID_MAINNET,
        collateral_token_address="0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
        fact_registry_address="0xbe9a129909ebcb954bc065536d2bfafbd170d27a",
    ),
    NETWORK_ID_ROPSTEN: NetworkConfig(
        network_id=NETWORK_ID_ROPSTEN,
        collateral_token_address="0x8707a5bf4c2842d46b31a405ba41b858c0f876c4",
        fact_registry_address="0x8fb814935f7e63deb304b500180e19df5167b50e",
    ),
}


def get_network_config(network_id: int) -> NetworkConfig:
    """Look up the addresses of a known network.

    Raises:
        ValidationError: If the network id is unknown

    """
    config = KNOWN_NETWORKS.get(network_id)
    if config is None:
        known = ", ".join(str(n) for n in KNOWN_NETWORKS)
        raise ValidationError(
            f"No network config for {network_id=}. Known network ids: {known}"
        )
    return config


def to_quantized_amount(human_amount: HumanNumericInput, decimals: int) -> int:
    """Convert a human readable amount to token base units.

    Args:
        human_amount: Amount such as "12.5"
        decimals: Token decimals

    Returns:
        int: The amount in base units

    Raises:
        ValidationError: If the amount is negative, not a number, or has more
            precision than the token supports

    """
    try:
        amount = Decimal(str(human_amount))
    except InvalidOperation as e:
        raise ValidationError(f"Invalid amount {human_amount!r}") from e
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Invalid amount {human_amount!r}")

    quantized = amount.scaleb(decimals)
    if quantized != quantized.to_integral_value():
        raise ValidationError(
            f"Amount {human_amount} has more than {decimals} decimal places"
        )
    return int(quantized)


def _address_bytes(name: str, address: str) -> bytes:
    if not eth_utils.is_address(address):
        raise ValidationError(f"Invalid {name} address {address!r}")
    return bytes(eth_utils.to_canonical_address(address))


def _uint256_bytes(name: str, value: int) -> bytes:
    if not 0 <= value < UINT256_UPPER_BOUND_EXCLUSIVE:
        raise ValidationError(f"{name} does not fit in uint256: {value}")
    return value.to_bytes(32, "big")


def get_transfer_erc20_fact(
    recipient: str,
    token_address: str,
    token_decimals: int,
    human_amount: HumanNumericInput,
    salt: Nonce,
) -> str:
    """Derive the fact for an ERC20 transfer.

    The fact is ``keccak256(recipient ‖ amount ‖ token ‖ salt)`` using solidity
    packed encoding (20 byte addresses, 32 byte big-endian integers).

    Args:
        recipient: Address receiving the tokens
        token_address: ERC20 token address
        token_decimals: Decimals of the token
        human_amount: Human readable amount
        salt: Nonce derived from the action's client id

    Returns:
        str: The 0x prefixed hex fact

    Raises:
        ValidationError: If an address is malformed or the amount is not
            representable in token base units

    """
    amount = to_quantized_amount(human_amount, token_decimals)
    packed = (
        _address_bytes("recipient", recipient)
        + _uint256_bytes("amount", amount)
        + _address_bytes("token", token_address)
        + _uint256_bytes("salt", salt)
    )
    return "0x" + eth_utils.keccak(packed).hex()
