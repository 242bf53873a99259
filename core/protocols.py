"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, ConsoleLogger)."""

    def log_forward(self, method: str, url: str, status: int) -> None: ...
    def log_rejected(self, method: str, path: str, status: int, reason: str) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
