"""Line-oriented request logging for terminals without a live dashboard."""

from datetime import datetime

from rich.console import Console
from rich.markup import escape

from ui.log_utils import write_cli_log, write_forward_log


class ConsoleLogger:
    """Print one line per request and mirror it to the CLI log file."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def log_forward(self, method: str, url: str, status: int) -> None:
        self._print("green", method, status, escape(url))
        write_forward_log(method, url, status)
        write_cli_log("FORWARD", url, method=method, status=status)

    def log_rejected(self, method: str, path: str, status: int, reason: str) -> None:
        self._print("yellow", method, status, f"{escape(path)} [dim]({escape(reason)})[/dim]")
        write_cli_log("REJECTED", reason, method=method, path=path, status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        self._print("red", route, status, escape(message[:200]))
        write_cli_log("ERROR", message[:200], route=route, status=status)

    def _print(self, style: str, label: str, status: int, detail: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.console.print(f"[dim]{timestamp}[/dim] [{style}]{label} {status}[/{style}] {detail}")
