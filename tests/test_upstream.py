import asyncio

import httpx
import pytest

from core.exceptions import InvalidTargetError, UpstreamConnectionError, UpstreamTimeoutError
from services.upstream import UpstreamClient


def _fetch(handler, target, headers=None):
    async def run():
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            follow_redirects=True,
            timeout=5.0,
        ) as client:
            return await UpstreamClient(client).fetch(target, headers or {})

    return asyncio.run(run())


def test_fetch_buffers_response():
    def handler(request):
        return httpx.Response(
            201,
            headers={"Content-Type": "text/plain; charset=iso-8859-1"},
            content=b"hello",
        )

    result = _fetch(handler, "https://example.com/a")

    assert result.url == "https://example.com/a"
    assert result.status_code == 201
    assert result.content == b"hello"
    assert result.encoding == "iso-8859-1"
    assert result.is_html is False


def test_fetch_sends_given_headers():
    seen = {}

    def handler(request):
        seen.update(request.headers)
        return httpx.Response(200)

    _fetch(handler, "https://example.com/", {"User-Agent": "Relay/1", "Accept": "image/*"})

    assert seen["user-agent"] == "Relay/1"
    assert seen["accept"] == "image/*"


def test_fetch_follows_redirects():
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new/"})
        return httpx.Response(200, headers={"Content-Type": "TEXT/HTML"}, content=b"<p>")

    result = _fetch(handler, "https://example.com/old")

    assert result.url == "https://example.com/new/"
    assert result.status_code == 200
    assert result.is_html is True


def test_redirect_policy_comes_from_client():
    def handler(request):
        return httpx.Response(302, headers={"Location": "https://example.com/next"})

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await UpstreamClient(client).fetch("https://example.com/", {})

    result = asyncio.run(run())

    assert result.status_code == 302
    assert result.url == "https://example.com/"


def test_connection_failure():
    def handler(request):
        raise httpx.ConnectError("Name or service not known", request=request)

    with pytest.raises(UpstreamConnectionError, match="Name or service not known") as exc:
        _fetch(handler, "https://missing.example/")
    assert exc.value.target == "https://missing.example/"


def test_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamTimeoutError):
        _fetch(handler, "https://slow.example/")


def test_too_many_redirects():
    def handler(request):
        return httpx.Response(302, headers={"Location": str(request.url)})

    with pytest.raises(UpstreamConnectionError):
        _fetch(handler, "https://loop.example/")


def test_invalid_url():
    def handler(request):
        return httpx.Response(200)

    with pytest.raises(InvalidTargetError):
        _fetch(handler, "https://example.com:abc/")
