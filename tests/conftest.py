"""Pytest configuration and fixtures for relay tests."""

import base64
from contextlib import ExitStack

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config


class RecordingLogger:
    """RequestLogger that keeps events in memory."""

    def __init__(self):
        self.relays: list[tuple[str, int, str, int]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_relay(self, target: str, status: int, *, kind: str, size: int) -> None:
        self.relays.append((target, status, kind, size))

    def log_error(self, target: str, status: int, message: str) -> None:
        self.errors.append((target, status, message))


def b64(url: str) -> str:
    return base64.b64encode(url.encode("utf-8")).decode("ascii")


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def test_config() -> Config:
    return Config()


@pytest.fixture
def make_client(test_config, logger):
    """Build a TestClient whose upstream requests are served by ``handler``."""
    with ExitStack() as stack:

        def _make(handler, config: Config | None = None) -> TestClient:
            app = create_app(
                config or test_config,
                logger,
                transport=httpx.MockTransport(handler),
            )
            return stack.enter_context(TestClient(app))

        yield _make
