"""Shared request data types."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class InboundRequest:
    """The parts of an incoming request that decide where it goes."""

    method: str
    path: str
    query_string: str = ""
    query_params: dict[str, str] = field(default_factory=dict)
    body: Any = None


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    method: str
    target_url: str
    headers: dict[str, str]
    body: Any = None


@dataclass(frozen=True)
class UpstreamResult:
    """Status and raw body of an upstream response."""

    status_code: int
    content: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")
