"""Fetch, classify and dispatch relayed responses."""

from collections.abc import Mapping

from fastapi import Response
from fastapi.responses import HTMLResponse

from core.config import RelaySettings
from core.exceptions import RewriteError
from core.headers import HeaderBuilder
from core.overlay import render_overlay
from core.protocols import RequestLogger
from core.request_types import UpstreamResponse
from core.rewrite import LinkRewriter, parse_document, serialize_document, transform
from services.upstream import UpstreamClient

NO_BODY_STATUSES = (204, 304)


class RelayService:
    """Relay one target: rewrite HTML documents, pass everything else through."""

    def __init__(
        self,
        settings: RelaySettings,
        logger: RequestLogger,
        upstream: UpstreamClient,
        header_builder: HeaderBuilder,
        rewriter: LinkRewriter | None = None,
    ) -> None:
        self._settings = settings
        self._logger = logger
        self._upstream = upstream
        self._headers = header_builder
        self._rewriter = rewriter or LinkRewriter(settings.base_path, settings.target_param)

    async def relay(self, target: str, headers: Mapping[str, str]) -> Response:
        """Fetch ``target`` once and build the response for the caller."""
        upstream = await self._upstream.fetch(
            target, self._headers.build_upstream_headers(headers)
        )
        if upstream.status_code in NO_BODY_STATUSES:
            return self._empty_response(upstream)
        if upstream.is_html:
            return self._html_response(upstream)
        return self._passthrough_response(upstream)

    def rewrite_html(self, upstream: UpstreamResponse) -> str:
        """Run the rewrite pipeline over an HTML upstream body."""
        try:
            soup = parse_document(upstream.content, upstream.encoding)
            transform(
                soup,
                upstream.url,
                self._rewriter,
                render_overlay(upstream.url, self._settings),
            )
            return serialize_document(soup)
        except Exception as e:
            raise RewriteError(str(e) or type(e).__name__) from e

    def _html_response(self, upstream: UpstreamResponse) -> Response:
        document = self.rewrite_html(upstream)
        self._logger.log_relay(
            upstream.url, upstream.status_code, kind="html", size=len(document)
        )
        return HTMLResponse(
            content=document,
            status_code=upstream.status_code,
            headers=self._headers.build_html_headers(upstream.headers),
        )

    def _passthrough_response(self, upstream: UpstreamResponse) -> Response:
        self._logger.log_relay(
            upstream.url,
            upstream.status_code,
            kind="passthrough",
            size=len(upstream.content),
        )
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers=self._headers.build_passthrough_headers(upstream.headers),
        )

    def _empty_response(self, upstream: UpstreamResponse) -> Response:
        headers = self._headers.build_passthrough_headers(upstream.headers)
        headers.pop("content-length", None)
        self._logger.log_relay(
            upstream.url, upstream.status_code, kind="passthrough", size=0
        )
        return Response(status_code=upstream.status_code, headers=headers)
