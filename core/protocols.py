"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_relay(
        self,
        target: str,
        status: int,
        *,
        kind: str,
        size: int,
    ) -> None: ...
    def log_error(self, target: str, status: int, message: str) -> None: ...
