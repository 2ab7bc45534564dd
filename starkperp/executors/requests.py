"""HTTP executor implementation using requests."""

from typing import override

import requests

from starkperp.errors import (
    BaseError,
    HttpConnectionError,
    TransportError,
    TransportTimeoutError,
)
from starkperp.executors.interface import HttpExecutor, HttpResponse
from starkperp.helpers import deserialize_response


class RequestsHttpExecutor(HttpExecutor):
    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    @override
    def send_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> HttpResponse:
        try:
            response = self.session.request(
                method, url, headers=headers, data=body, timeout=self.timeout
            )
        except BaseError:
            raise
        except requests.Timeout as e:
            raise TransportTimeoutError(
                f"{method} request to {url} timed out", timeout_seconds=self.timeout
            ) from e
        except requests.ConnectionError as e:
            raise HttpConnectionError(f"Failed to connect to {url}", url=url) from e
        except Exception as e:
            raise TransportError(f"{method} request to {url} failed: {e}") from e
        return HttpResponse(
            status=response.status_code,
            body=deserialize_response(response.content, url),
            headers=dict(response.headers),
        )
