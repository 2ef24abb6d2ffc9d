"""Runtime settings for dotlocal."""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ROOT = Path.home() / ".dotlocal"

PROXY_BINARY_NAME = "caddy"
PROXY_COMMON_PATHS = (
    "/usr/local/bin/caddy",
    "/opt/homebrew/bin/caddy",
    "/usr/bin/caddy",
)

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_ENV_FIELDS = {
    "DOTLOCAL_HOME": "root",
    "DOTLOCAL_PROXY_BINARY": "proxy_binary",
    "DOTLOCAL_HELPER_BINARY": "helper_binary",
    "DOTLOCAL_CONTROL_PORT": "control_port",
    "DOTLOCAL_LOG_LEVEL": "log_level",
}


class DotLocalSettings(BaseModel):
    """Pydantic settings shared by the CLI and the daemon."""

    model_config = ConfigDict(
        str_strip_whitespace=True, validate_assignment=True, extra="forbid"
    )

    root: Path = Field(default=DEFAULT_ROOT, description="Config root directory")
    config_filename: str = Field(default="dotlocal.json", min_length=1)
    caddyfile_name: str = Field(default="Caddyfile", min_length=1)
    log_filename: str = Field(default="dotlocal.log", min_length=1)

    proxy_binary: str | None = Field(
        default=None, description="Explicit path to the caddy binary"
    )
    helper_binary: str = Field(
        default="dns-sd", min_length=1, description="Name advertisement helper"
    )

    control_host: str = Field(default="127.0.0.1", description="Control plane host")
    control_port: int = Field(default=2023, ge=1, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("root")
    @classmethod
    def expand_root(cls, v: Path) -> Path:
        """Expand ``~`` so every derived path is absolute."""
        return v.expanduser()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {sorted(LOG_LEVELS)}")
        return level

    @property
    def config_path(self) -> Path:
        return self.root / self.config_filename

    @property
    def caddyfile_path(self) -> Path:
        return self.root / self.caddyfile_name

    @property
    def log_path(self) -> Path:
        return self.root / self.log_filename

    @property
    def control_url(self) -> str:
        return f"http://{self.control_host}:{self.control_port}"

    @classmethod
    def from_env(cls, **overrides: Any) -> "DotLocalSettings":
        """Build settings from ``DOTLOCAL_*`` environment variables.

        Keyword overrides whose value is not None win over the environment.
        """
        values: dict[str, Any] = {}
        for env_name, field_name in _ENV_FIELDS.items():
            env_value = os.environ.get(env_name)
            if env_value:
                values[field_name] = env_value

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
