"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_DIR = Path.home() / ".config" / "oneinch-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

ALLOWED_PREFIX = "https://api.1inch.dev"

# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "AUTHORIZATION": ("upstream", "authorization"),
    "PORT": ("proxy", "port"),
    "HOST": ("proxy", "host"),
    "ENVIRONMENT": ("proxy", "environment"),
}


class ProxySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = 3000
    environment: str = "production"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class UpstreamSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_prefix: str = ALLOWED_PREFIX
    authorization: str = ""
    timeout: float = 30.0


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)

    @property
    def is_development(self) -> bool:
        return self.proxy.environment == "development"

    @property
    def has_authorization(self) -> bool:
        return bool(self.upstream.authorization)


def load_config(
    config_file: Path = CONFIG_FILE,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from the JSON file, then apply environment overrides."""
    environ = os.environ if environ is None else environ
    data = _read_config_file(config_file)

    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is not None:
            data.setdefault(section, {})[field] = value

    return Config.model_validate(data)


def _read_config_file(config_file: Path) -> dict[str, Any]:
    """Return raw config data, or an empty dict when the file is absent or corrupted.

    Raises:
        OSError: the file exists but cannot be read
    """
    if not config_file.exists():
        return {}

    try:
        data = json.loads(config_file.read_text())
        # Validate file contents on their own so a bad file is caught here
        Config.model_validate(data)
        return data
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError):
        # Move corrupted config aside and fall back to defaults
        backup = config_file.with_suffix(".json.bak")
        try:
            config_file.rename(backup)
        except OSError:
            pass
        return {}
