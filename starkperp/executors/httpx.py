"""HTTP executor implementation using httpx.

This module provides HTTP request handling using the httpx library and is the
default transport of the starkperp client.
"""

from typing import override

import httpx

from starkperp.errors import (
    BaseError,
    HttpConnectionError,
    TransportError,
    TransportTimeoutError,
)
from starkperp.executors.interface import HttpExecutor, HttpResponse
from starkperp.helpers import deserialize_response


class HttpxHttpExecutor(HttpExecutor):
    """HTTP executor implementation using httpx.

    Provides synchronous HTTP request execution using the httpx library.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ):
        """Initialize the HTTPX HTTP executor.

        Args:
            client: Optional preconfigured httpx client. One is created if not
                provided and closed when the executor is destroyed.
            timeout: Request timeout in seconds (default: httpx default)

        """
        self._owns_client = client is None
        self.timeout = timeout
        if client is not None:
            self.client = client
        elif timeout is not None:
            self.client = httpx.Client(timeout=timeout)
        else:
            self.client = httpx.Client()

    @override
    def send_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> HttpResponse:
        """Send a request with httpx.

        Args:
            method: The HTTP method to use (e.g., 'GET', 'POST', 'PUT', 'DELETE').
            url: The absolute URL of the request.
            headers: Headers to send.
            body: Serialized request body, or None.

        Returns:
            HttpResponse containing the status code and deserialized response body.

        Raises:
            TransportTimeoutError: If the request times out.
            HttpConnectionError: If there is a connection or network error.
            TransportError: If any other transport-level error occurs.

        """
        try:
            response = self.client.request(method, url, headers=headers, content=body)
        except BaseError:
            raise
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"{method} request to {url} timed out", timeout_seconds=self.timeout
            ) from e
        except httpx.ConnectError as e:
            raise HttpConnectionError(f"Failed to connect to {url}", url=url) from e
        except httpx.NetworkError as e:
            raise HttpConnectionError(
                f"Network error during {method} request to {url}", url=url
            ) from e
        except Exception as e:
            raise TransportError(f"{method} request to {url} failed: {e}") from e
        return HttpResponse(
            status=response.status_code,
            body=deserialize_response(response.content, url),
            headers=dict(response.headers),
        )

    def close(self) -> None:
        """Close the underlying client if this executor created it."""
        if self._owns_client:
            self.client.close()

    def __del__(self) -> None:
        """Cleanup the httpx client when the executor is destroyed."""
        client = getattr(self, "client", None)
        if client is not None and getattr(self, "_owns_client", False):
            client.close()
