"""Encoding of target URLs into the relay's query parameter."""

import base64
import binascii
import re
from urllib.parse import urlsplit

from core.exceptions import InvalidTargetError

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


def encode_target(url: str) -> str:
    """Encode a URL as standard base64 of its UTF-8 bytes."""
    return base64.b64encode(url.encode("utf-8")).decode("ascii")


def decode_target(token: str) -> str:
    """Decode a base64 token back into a URL string.

    Spaces are turned back into ``+`` since form-style query parsing decodes
    an unescaped ``+`` into a space. Missing ``=`` padding is tolerated.
    """
    cleaned = token.strip().replace(" ", "+")
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        raw = base64.b64decode(cleaned, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise InvalidTargetError(f"could not decode target: {e}") from e


def validate_target(url: str) -> str:
    """Return ``url`` if it is an absolute http(s) URL with a host."""
    if not _HTTP_URL.match(url):
        raise InvalidTargetError("target must start with http:// or https://")
    try:
        host = urlsplit(url).hostname
    except ValueError as e:
        raise InvalidTargetError(f"malformed target URL: {e}") from e
    if not host:
        raise InvalidTargetError("target URL has no host")
    return url


def parse_target(token: str) -> str:
    """Decode and validate an encoded target."""
    return validate_target(decode_target(token))


def proxied_link(url: str, base_path: str, param: str) -> str:
    """Build the relay-relative path that fetches ``url`` through the relay."""
    return f"{base_path}?{param}={encode_target(url)}"
