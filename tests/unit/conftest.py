import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Generator
from urllib.parse import urlsplit

import orjson
import pytest

from starkperp.api import PrivateApiClient
from starkperp.clock import Clock
from starkperp.request_auth import RequestAuthenticator
from starkperp.types import ApiKeyCredentials
from tests.mock_executors import InputPack, MockHttpExecutor, MockOutputNotExhausted

DATA_DIR = Path(__file__).parent.joinpath("data")

TEST_HOST = "https://api.gaierror.xyz"
TEST_NETWORK_ID = 3
# base64 of b"starkperp-test-secret-0123456789"
TEST_SECRET = "c3RhcmtwZXJwLXRlc3Qtc2VjcmV0LTAxMjM0NTY3ODk="
TEST_PRIVATE_KEY = (
    "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
)
TEST_POSITION_ID = "12345"

log = logging.getLogger(__name__)


class FixedClock(Clock):
    """Clock that always returns the same timestamp."""

    def __init__(self, iso_timestamp: str = "2024-01-01T00:00:00.000Z"):
        super().__init__()
        self.iso_timestamp = iso_timestamp
        self.reads = 0

    def get_adjusted_iso_string(self) -> str:
        self.reads += 1
        return self.iso_timestamp


@pytest.fixture
def credentials() -> ApiKeyCredentials:
    return ApiKeyCredentials(key="FOO", secret=TEST_SECRET, passphrase="BAR")


@pytest.fixture
def mock_http_client(
    credentials: ApiKeyCredentials,
) -> Generator[tuple[PrivateApiClient, MockHttpExecutor], None, None]:
    mock_http = MockHttpExecutor()
    client = PrivateApiClient(
        api_key_credentials=credentials,
        network_id=TEST_NETWORK_ID,
        # not contacted, requests go to the mock
        host=TEST_HOST,
        stark_private_key=TEST_PRIVATE_KEY,
        clock=FixedClock(),
        # replace real network requests with our mock
        executor=mock_http,
    )

    yield (client, mock_http)

    if len(mock_http.staged_outputs) > 0:
        raise MockOutputNotExhausted(mock_http.staged_outputs)


@pytest.fixture
def mock_http_client_without_key(
    credentials: ApiKeyCredentials,
) -> Generator[tuple[PrivateApiClient, MockHttpExecutor], None, None]:
    mock_http = MockHttpExecutor()
    client = PrivateApiClient(
        api_key_credentials=credentials,
        network_id=TEST_NETWORK_ID,
        host=TEST_HOST,
        clock=FixedClock(),
        executor=mock_http,
    )

    yield (client, mock_http)

    if len(mock_http.staged_outputs) > 0:
        raise MockOutputNotExhausted(mock_http.staged_outputs)


def is_request(method: str, path: str):
    """Build a call validation matching method and path (with query string)."""

    def validate(call: InputPack) -> bool:
        if call.function_name != "send_request":
            return False
        call_method, url, _headers, _body = call.arg_pack
        parts = urlsplit(url)
        full_path = parts.path + (f"?{parts.query}" if parts.query else "")
        return call_method == method and full_path == path

    return validate


def is_signed_by(authenticator: RequestAuthenticator):
    """Build a call validation checking the signature header of a request."""

    def validate(call: InputPack) -> bool:
        method, url, headers, body = call.arg_pack
        parts = urlsplit(url)
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        expected = authenticator.sign(path, method, headers["X-TIMESTAMP"], body)
        return headers["X-SIGNATURE"] == expected

    return validate


def request_body(call: InputPack) -> dict[str, Any] | None:
    body = call.arg_pack[3]
    return orjson.loads(body) if body is not None else None


@lru_cache(maxsize=1)
def data_files() -> list[Path]:
    return list(DATA_DIR.iterdir())


@lru_cache(maxsize=None)
def json_data_files(name: str) -> list[Path]:
    return list(
        sorted(
            path
            for path in data_files()
            if path.match(f"*/{name}.*.json", case_sensitive=True)
        )
    )


def load_json(name: str, case: int | None = None) -> dict[str, Any]:
    case_part = f"{case}." if case else ""
    path = Path(__file__).parent / "data" / f"{name}.{case_part}json"
    with open(path, "rb") as fh:
        return orjson.loads(fh.read())


def load_json_all_cases(name: str) -> list[tuple[dict[str, Any], Path]]:
    """Load all json payloads for a given base name (case0, case1, ...)."""
    results = []
    for path in json_data_files(name):
        with open(path, "rb") as fh:
            payload = orjson.loads(fh.read())
            results.append((payload, path))
    return results
