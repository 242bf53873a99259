"""Shared logging utilities."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"
MAX_REQUEST_LOGS = 500


def write_incoming_log(
    method: str,
    path: str,
    headers: dict[str, str],
    body: Any,
    *,
    log_root: Path | None = None,
) -> Path:
    """Write a single incoming request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "path": path,
        "headers": _redact_headers(headers),
        "body": body,
    }
    return _write_json((log_root or LOG_ROOT) / "incoming", payload)


def write_forward_log(
    method: str,
    url: str,
    status: int,
    *,
    log_root: Path | None = None,
) -> Path:
    """Write a single forwarded request log entry.

    The injected headers are not part of the entry; only the fact that a
    credential was attached is recorded.
    """
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "url": url,
        "status": status,
        "headers": {"Authorization": "***", "Content-Type": "application/json"},
    }
    return _write_json((log_root or LOG_ROOT) / "outgoing", payload)


def write_cli_log(
    level: str,
    message: str,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    CLI_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with CLI_LOG_FILE.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path | None = None) -> int:
    """Delete per-request JSON logs from a previous run."""
    root = log_root or LOG_ROOT
    deleted = 0
    for folder in (root / "incoming", root / "outgoing"):
        if not folder.exists():
            continue
        for old_file in folder.glob("*.json"):
            try:
                old_file.unlink()
                deleted += 1
            except OSError:
                pass
    return deleted


def mask_secret(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    _prune_folder(folder, MAX_REQUEST_LOGS)
    return file_path


def _prune_folder(folder: Path, keep: int) -> int:
    """Delete all but the newest `keep` log files in a folder."""
    files = sorted(folder.glob("*.json"))
    if len(files) <= keep:
        return 0

    deleted = 0
    # Filenames start with a timestamp, so sorted order is oldest first
    for old_file in files[: len(files) - keep]:
        try:
            old_file.unlink()
            deleted += 1
        except OSError:
            pass
    return deleted


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if "key" in key.lower() or "authorization" in key.lower():
            redacted[key] = mask_secret(value)
        else:
            redacted[key] = value
    return redacted


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
