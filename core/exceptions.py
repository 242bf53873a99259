"""Custom exception hierarchy for the 1inch API proxy."""

from typing import Any

FETCH_ERROR_MESSAGE = "Error occurred while fetching data"


class ProxyError(Exception):
    """Base exception for all proxy errors.

    Every subclass maps to one HTTP status and one JSON error envelope.
    The envelope always carries a string ``error`` field.
    """

    status_code = 500

    def to_payload(self, *, include_diagnostics: bool = False) -> dict[str, Any]:
        return {"error": str(self)}


class MissingTargetError(ProxyError):
    """No target URL could be derived from the request."""

    status_code = 400

    def __init__(self, message: str = "Include `url` in the query string or request body") -> None:
        super().__init__(message)


class InvalidTargetError(ProxyError):
    """Derived target URL does not start with the allowed prefix.

    Attributes:
        url: The rejected target URL
        allowed_prefix: The prefix every target must start with
    """

    status_code = 400

    def __init__(self, url: str, allowed_prefix: str) -> None:
        super().__init__(f"Base URL must start with {allowed_prefix}")
        self.url = url
        self.allowed_prefix = allowed_prefix


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""

    status_code = 500

    def __init__(self, message: str = "Server configuration error: Missing authorization") -> None:
        super().__init__(message)


class RequestTooLarge(ProxyError):
    """Request body exceeds size limit."""

    status_code = 413

    def __init__(self, message: str = "Request body too large") -> None:
        super().__init__(message)


class InvalidJSON(ProxyError):
    """Request body is not valid JSON."""

    status_code = 400


class UpstreamError(ProxyError):
    """Raised when the upstream API returns a non-2xx response.

    The proxy answers with the upstream status code unchanged.

    Attributes:
        message: Raw upstream response text
        status_code: HTTP status code from upstream
        url: Target URL that was requested
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url

    def to_payload(self, *, include_diagnostics: bool = False) -> dict[str, Any]:
        return {"error": str(self), "status": self.status_code, "url": self.url}


class UpstreamTransportError(ProxyError):
    """Raised when the outbound call fails before a usable response arrives."""

    status_code = 500

    def __init__(self, message: str, url: str | None = None, stack: str | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.stack = stack

    def to_payload(self, *, include_diagnostics: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": FETCH_ERROR_MESSAGE, "message": str(self)}
        if include_diagnostics and self.stack:
            payload["stack"] = self.stack
        return payload


class UpstreamTimeoutError(UpstreamTransportError):
    """Raised when an upstream request times out."""


class UpstreamConnectionError(UpstreamTransportError):
    """Raised when unable to connect to the upstream API."""


class UpstreamFormatError(UpstreamTransportError):
    """Raised when a successful upstream response is not valid JSON."""
