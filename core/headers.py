"""Header construction for upstream requests and relay responses."""

from collections.abc import Mapping

from core.config import CorsSettings

PASSTHROUGH_HEADERS = ("content-type", "content-length", "cache-control")


class HeaderBuilder:
    """Build outbound and response headers."""

    def __init__(self, user_agent: str, cors: CorsSettings) -> None:
        self._user_agent = user_agent
        self._cors = cors

    def build_upstream_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        """Identify as the relay and forward the caller's Accept header."""
        return {
            "User-Agent": self._user_agent,
            "Accept": headers.get("accept") or "*/*",
        }

    def build_passthrough_headers(self, upstream: Mapping[str, str]) -> dict[str, str]:
        """Copy content-type, content-length and cache-control when present.

        Content-Length is dropped when the upstream body was content-encoded,
        since the relayed bytes are the decoded ones.
        """
        copied: dict[str, str] = {}
        for name in PASSTHROUGH_HEADERS:
            value = upstream.get(name)
            if not value:
                continue
            if name == "content-length" and upstream.get("content-encoding"):
                continue
            copied[name] = value
        return copied

    def build_html_headers(self, upstream: Mapping[str, str]) -> dict[str, str]:
        """Headers kept on a rewritten document besides its forced content type."""
        cache = upstream.get("cache-control")
        return {"cache-control": cache} if cache else {}

    def build_cors_headers(self, origin: str | None) -> dict[str, str]:
        """CORS headers attached to every response."""
        headers = {
            "Access-Control-Allow-Methods": "GET,OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        }
        allowed = self._cors.allowed_origins
        if "*" in allowed:
            headers["Access-Control-Allow-Origin"] = "*"
        else:
            headers["Vary"] = "Origin"
            if origin and origin in allowed:
                headers["Access-Control-Allow-Origin"] = origin
        return headers
