from datetime import datetime

import pytest

from conftest import make_config
from core.envelopes import error_payload, health_payload, map_upstream_result
from core.exceptions import (
    ConfigurationError,
    InvalidTargetError,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamFormatError,
)
from core.request_types import UpstreamResult

TARGET = "https://api.1inch.dev/swap/v6.0/1/quote"


def test_success_passes_json_through_with_200():
    status, payload = map_upstream_result(UpstreamResult(200, b'{"toAmount": "42"}'), TARGET)
    assert status == 200
    assert payload == {"toAmount": "42"}


def test_created_is_reported_as_200():
    status, payload = map_upstream_result(UpstreamResult(201, b"[1, 2]"), TARGET)
    assert status == 200
    assert payload == [1, 2]


def test_non_json_success_is_format_error():
    with pytest.raises(UpstreamFormatError) as exc_info:
        map_upstream_result(UpstreamResult(200, b"<html>oops</html>"), TARGET)
    assert exc_info.value.status_code == 500


def test_non_2xx_keeps_upstream_status_and_text():
    with pytest.raises(UpstreamError) as exc_info:
        map_upstream_result(UpstreamResult(404, b"not found"), TARGET)

    error = exc_info.value
    assert error.status_code == 404
    assert error.to_payload() == {"error": "not found", "status": 404, "url": TARGET}


def test_error_payload_always_has_string_error():
    config = make_config()
    for error in (
        ConfigurationError(),
        InvalidTargetError("https://x", "https://api.1inch.dev"),
        UpstreamError("rate limited", 429, TARGET),
        UpstreamConnectionError("Connection refused", url=TARGET, stack="Traceback..."),
    ):
        assert isinstance(error_payload(error, config)["error"], str)


def test_stack_only_in_development():
    error = UpstreamConnectionError("Connection refused", url=TARGET, stack="Traceback...")

    production = error_payload(error, make_config(environment="production"))
    development = error_payload(error, make_config(environment="development"))

    assert production == {"error": "Error occurred while fetching data", "message": "Connection refused"}
    assert development["stack"] == "Traceback..."


def test_health_payload():
    payload = health_payload(make_config())

    assert payload["status"] == "OK"
    assert payload["hasAuthorization"] is True
    assert payload["environment"] == "production"
    assert "https://api.1inch.dev" in payload["usage"]
    datetime.fromisoformat(payload["timestamp"])


def test_health_payload_never_contains_secret():
    config = make_config()
    assert config.upstream.authorization not in str(health_payload(config))


@pytest.mark.parametrize("body", [b'{"price": NaN}', b"[Infinity]", b'{"x": -Infinity}', b'{"x": 1e400}'])
def test_non_finite_numbers_are_format_errors(body):
    with pytest.raises(UpstreamFormatError) as exc_info:
        map_upstream_result(UpstreamResult(200, body), TARGET)
    assert "invalid JSON" in str(exc_info.value)


def test_finite_floats_still_parse():
    _, payload = map_upstream_result(UpstreamResult(200, b'{"price": 1.5e3}'), TARGET)
    assert payload == {"price": 1500.0}
