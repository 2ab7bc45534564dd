"""Tests for client id generation and nonce derivation."""

import re

import pytest

from starkperp.client_id import (
    NONCE_UPPER_BOUND_EXCLUSIVE,
    ClientIdentifier,
    generate_random_client_id,
    nonce_from_client_id,
)
from starkperp.errors import ValidationError


def test_random_client_id_is_128_bit_hex():
    client_id = generate_random_client_id()
    assert re.fullmatch(r"[0-9a-f]{32}", client_id)


def test_random_client_ids_are_unique():
    ids = {generate_random_client_id() for _ in range(10_000)}
    assert len(ids) == 10_000


def test_nonce_known_answer():
    # sha256("abc") ends in b410ff61f20015ad
    assert nonce_from_client_id("abc") == int("b410ff61f20015ad", 16)


def test_nonce_is_stable():
    client_id = generate_random_client_id()
    assert nonce_from_client_id(client_id) == nonce_from_client_id(client_id)
    assert ClientIdentifier().derive_nonce(client_id) == nonce_from_client_id(
        client_id
    )


def test_nonces_do_not_collide():
    nonces = {nonce_from_client_id(generate_random_client_id()) for _ in range(10_000)}
    assert len(nonces) == 10_000
    assert all(0 <= nonce < NONCE_UPPER_BOUND_EXCLUSIVE for nonce in nonces)


def test_nonce_handles_non_ascii_client_id():
    assert nonce_from_client_id("ordre-é") != nonce_from_client_id("ordre-e")


@pytest.mark.parametrize("client_id", ["", None, 123])
def test_nonce_rejects_invalid_client_id(client_id):
    with pytest.raises(ValidationError):
        nonce_from_client_id(client_id)  # type: ignore
