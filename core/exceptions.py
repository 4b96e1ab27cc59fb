"""Custom exception hierarchy for the relay."""


class ProxyError(Exception):
    """Base exception for all relay errors."""


class InvalidTargetError(ProxyError):
    """Raised when the encoded target is missing a valid http(s) URL."""


class UpstreamError(ProxyError):
    """Raised when the upstream fetch fails.

    Attributes:
        message: Error message
        target: URL that was being fetched (optional)
    """

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target


class UpstreamTimeoutError(UpstreamError):
    """Raised when the upstream host does not answer in time."""


class UpstreamConnectionError(UpstreamError):
    """Raised on DNS, connection, TLS or protocol failures."""


class RewriteError(ProxyError):
    """Raised when an HTML document cannot be rewritten."""
