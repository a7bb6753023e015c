"""HTTP transport used to probe provider APIs and read raw files."""

from typing import Protocol, runtime_checkable

import httpx

from gitref.exceptions import TransportError
from gitref.log import get_logger

logger = get_logger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Minimal GET capability the access classifier depends on."""

    def get(self, url: str, *, token: str = "", timeout: float) -> bytes:
        ...


class HttpxTransport:
    """httpx-based transport.

    Proxy settings are taken from the environment.
    """

    def __init__(
        self,
        client_name: str = "",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            client_name: Sent as the "Client" header when non-empty
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self._client_name = client_name
        self._transport = transport

    def _headers(self, token: str) -> dict[str, str]:
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if self._client_name:
            headers["Client"] = self._client_name
        return headers

    def get(self, url: str, *, token: str = "", timeout: float) -> bytes:
        """GET ``url`` and return the response body.

        Raises:
            TransportError: On network failure or a non-2xx status
        """
        logger.debug("HTTP GET %s", url)
        try:
            with httpx.Client(
                follow_redirects=True,
                timeout=timeout,
                transport=self._transport,
            ) as client:
                response = client.get(url, headers=self._headers(token))
        except httpx.RequestError as e:
            raise TransportError(f"Network error requesting {url}: {e}", url=url) from e

        if not response.is_success:
            raise TransportError(
                f"failed to retrieve {url}, {response.status_code}: {response.reason_phrase}",
                url=url,
                status_code=response.status_code,
            )
        return response.content
