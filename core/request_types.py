"""Shared request data types."""

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class UpstreamResponse:
    """Fully buffered result of a single upstream fetch."""

    url: str
    status_code: int
    headers: httpx.Headers
    content: bytes
    encoding: str | None = None

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()
