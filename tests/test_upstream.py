import json

import httpx
import pytest

from conftest import SECRET, RecordingLogger, StubUpstream
from core.exceptions import (
    UpstreamConnectionError,
    UpstreamError,
    UpstreamFormatError,
    UpstreamTimeoutError,
)
from core.request_types import PreparedRequest
from services.upstream import UpstreamClient

TARGET = "https://api.1inch.dev/swap/v6.0/1/quote?src=0xeee"
HEADERS = {"Authorization": SECRET, "Content-Type": "application/json"}


def _client(upstream: StubUpstream) -> UpstreamClient:
    return UpstreamClient(httpx.AsyncClient(transport=upstream.transport), timeout=5.0)


@pytest.mark.asyncio
async def test_get_sends_injected_headers_and_no_body():
    upstream = StubUpstream()
    logger = RecordingLogger()

    status, payload = await _client(upstream).forward(PreparedRequest("GET", TARGET, HEADERS), logger)

    assert (status, payload) == (200, {"ok": True})
    assert len(upstream.requests) == 1
    sent = upstream.requests[0]
    assert sent.method == "GET"
    assert str(sent.url) == TARGET
    assert sent.headers["Authorization"] == SECRET
    assert sent.content == b""
    assert logger.forwards == [("GET", TARGET, 200)]


@pytest.mark.asyncio
async def test_post_sends_json_body():
    upstream = StubUpstream()
    prepared = PreparedRequest("POST", TARGET, HEADERS, body={"order": {"maker": "0xabc"}})

    await _client(upstream).forward(prepared, RecordingLogger())

    sent = upstream.requests[0]
    assert sent.method == "POST"
    assert json.loads(sent.content) == {"order": {"maker": "0xabc"}}
    assert sent.headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_upstream_rejection_is_logged_and_raised():
    upstream = StubUpstream(lambda request: httpx.Response(404, text="not found"))
    logger = RecordingLogger()

    with pytest.raises(UpstreamError) as exc_info:
        await _client(upstream).forward(PreparedRequest("GET", TARGET, HEADERS), logger)

    assert exc_info.value.status_code == 404
    assert logger.errors == [("1inch", 404, "not found")]
    assert logger.forwards == []


@pytest.mark.asyncio
async def test_connection_refused():
    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    logger = RecordingLogger()
    with pytest.raises(UpstreamConnectionError) as exc_info:
        await _client(StubUpstream(refuse)).forward(PreparedRequest("GET", TARGET, HEADERS), logger)

    assert exc_info.value.status_code == 500
    assert "Connection refused" in str(exc_info.value)
    assert "ConnectError" in exc_info.value.stack
    assert logger.errors[0][1] == 500


@pytest.mark.asyncio
async def test_timeout():
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamTimeoutError):
        await _client(StubUpstream(slow)).send(PreparedRequest("GET", TARGET, HEADERS))


@pytest.mark.asyncio
async def test_non_json_success():
    upstream = StubUpstream(lambda request: httpx.Response(200, text="plain text"))
    with pytest.raises(UpstreamFormatError):
        await _client(upstream).forward(PreparedRequest("GET", TARGET, HEADERS), RecordingLogger())


@pytest.mark.asyncio
async def test_send_returns_raw_result():
    upstream = StubUpstream(lambda request: httpx.Response(503, content=b"busy"))
    result = await _client(upstream).send(PreparedRequest("GET", TARGET, HEADERS))
    assert result.status_code == 503
    assert result.text == "busy"
    assert not result.ok
