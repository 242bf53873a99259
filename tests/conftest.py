from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config, ProxySettings, UpstreamSettings

SECRET = "Bearer test-secret-value-123"
UPSTREAM = "https://api.1inch.dev"


class RecordingLogger:
    """RequestLogger that keeps every call for assertions."""

    def __init__(self):
        self.forwards = []
        self.rejections = []
        self.errors = []

    def log_forward(self, method, url, status):
        self.forwards.append((method, url, status))

    def log_rejected(self, method, path, status, reason):
        self.rejections.append((method, path, status, reason))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


class StubUpstream:
    """Fake upstream API that records every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response] | None = None):
        self.requests: list[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def make_config(authorization: str = SECRET, environment: str = "production") -> Config:
    return Config(
        proxy=ProxySettings(environment=environment),
        upstream=UpstreamSettings(authorization=authorization),
    )


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    """Keep request logs out of the working directory."""
    from ui import log_utils

    monkeypatch.setattr(log_utils, "LOG_ROOT", tmp_path / "logs")
    monkeypatch.setattr(log_utils, "CLI_LOG_FILE", tmp_path / "logs" / "proxy.log")
    return tmp_path / "logs"


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def stub_upstream():
    return StubUpstream()


@pytest.fixture
def proxy_client(recording_logger):
    """Factory returning a started TestClient for a given config and upstream."""
    clients = []

    def _make(upstream: StubUpstream, config: Config | None = None) -> TestClient:
        app = create_app(config or make_config(), recording_logger, transport=upstream.transport)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
