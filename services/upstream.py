"""HTTP client for the single upstream fetch behind each relayed request."""

import httpx

from core.exceptions import (
    InvalidTargetError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
)
from core.request_types import UpstreamResponse


class UpstreamClient:
    """Fetch target URLs and buffer the body.

    Redirect following and the timeout are configured on ``client``.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, target: str, headers: dict[str, str]) -> UpstreamResponse:
        """GET ``target`` and return the final response after redirects."""
        try:
            response = await self._client.get(target, headers=headers)
        except httpx.InvalidURL as e:
            raise InvalidTargetError(f"malformed target URL: {e}") from e
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(_describe(e), target=target) from e
        except httpx.HTTPError as e:
            raise UpstreamConnectionError(_describe(e), target=target) from e

        return UpstreamResponse(
            url=str(response.url),
            status_code=response.status_code,
            headers=response.headers,
            content=response.content,
            encoding=response.charset_encoding,
        )


def _describe(error: Exception) -> str:
    """Human readable description; some httpx errors carry an empty message."""
    return str(error) or type(error).__name__
