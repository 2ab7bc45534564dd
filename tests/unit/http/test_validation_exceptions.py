"""Tests for validation exceptions in the API client."""

import pytest

from starkperp import PrivateApiClient
from starkperp.errors import (
    InvalidSecret,
    MissingCredentialsError,
    ValidationError,
)
from starkperp.types import ApiKeyCredentials, OrderParams
from tests.mock_executors import MockHttpExecutor
from tests.unit.conftest import TEST_SECRET


def make_client(**overrides) -> PrivateApiClient:
    kwargs = dict(
        api_key_credentials=ApiKeyCredentials(
            key="FOO", secret=TEST_SECRET, passphrase="BAR"
        ),
        network_id=1,
        executor=MockHttpExecutor(),
    )
    kwargs.update(overrides)
    return PrivateApiClient(**kwargs)


def test_invalid_secret_raises_at_construction():
    """Test that a secret that is not base64 fails before any request is made."""
    with pytest.raises(InvalidSecret) as exc_info:
        make_client(
            api_key_credentials=ApiKeyCredentials(
                key="FOO", secret="%%%not-base64%%%", passphrase="BAR"
            )
        )

    assert "not valid base64" in str(exc_info.value)
    assert "%%%not-base64%%%" not in str(exc_info.value)


def test_missing_api_key_raises():
    """Test that an empty API key raises MissingCredentialsError."""
    with pytest.raises(MissingCredentialsError) as exc_info:
        make_client(
            api_key_credentials=ApiKeyCredentials(
                key="", secret=TEST_SECRET, passphrase="BAR"
            )
        )

    assert "API key is not set" in str(exc_info.value)


def test_missing_passphrase_raises():
    """Test that an empty passphrase raises MissingCredentialsError."""
    with pytest.raises(MissingCredentialsError):
        make_client(
            api_key_credentials=ApiKeyCredentials(
                key="FOO", secret=TEST_SECRET, passphrase=""
            )
        )


@pytest.mark.parametrize("network_id", [0, -3, "1"])
def test_invalid_network_id(network_id):
    """Test that a network id that is not a positive integer is rejected."""
    with pytest.raises(ValidationError):
        make_client(network_id=network_id)


@pytest.mark.parametrize("private_key", ["0xnothex", "00" * 32, b"short"])
def test_invalid_private_key(private_key):
    """Test that malformed signing keys are rejected at construction."""
    with pytest.raises(ValidationError):
        make_client(stark_private_key=private_key)


def test_unknown_request_method():
    """Test that an unsupported HTTP method raises ValidationError."""
    client = make_client()

    with pytest.raises(ValidationError):
        client.request("PATCH", "orders")


@pytest.mark.parametrize(
    "field, value",
    [
        ("size", "-1"),
        ("price", "abc"),
        ("limitFee", float("nan")),
        ("size", True),
    ],
)
def test_invalid_order_numbers(field, value):
    """Test that invalid numeric order fields raise ValidationError."""
    fields = dict(
        market="BTC-USD",
        side="BUY",
        type="LIMIT",
        postOnly=False,
        size="1",
        price="1",
        limitFee="0.001",
        expiration="2024-02-01T00:00:00.000Z",
    )
    fields[field] = value

    with pytest.raises(ValidationError):
        OrderParams(**fields)
