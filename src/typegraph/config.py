"""
Configuration loading for typegraph servers.

Settings come from typegraph.yaml, with TYPEGRAPH_* environment variables
taking precedence:

    host: 127.0.0.1
    port: 8000
    path: /graph
    ui: true
    cors_origins:
      - http://localhost:3000
    request_timeout: 30
    log_level: INFO
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional

import yaml

DEFAULT_CONFIG_PATH = "typegraph.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _as_bool(value: Any) -> bool:
    # YAML and env values may arrive as "false" or "no"
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


@dataclass
class Settings:
    """Server and executor settings."""
    host: str = "127.0.0.1"
    port: int = 8000
    path: str = "/graph"
    ui: bool = False
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )
    request_timeout: Optional[float] = None
    log_level: str = "INFO"

    def __post_init__(self):
        """Normalize path to a single leading slash and no trailing slash."""
        self.path = "/" + self.path.strip("/")

    def sub_path(self, name: str) -> str:
        """Path of an endpoint mounted below the graph endpoint."""
        return f"{self.path.rstrip('/')}/{name}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Create settings from a dictionary (e.g. parsed YAML)."""
        defaults = cls()
        timeout = data.get("request_timeout", defaults.request_timeout)
        return cls(
            host=data.get("host", defaults.host),
            port=int(data.get("port", defaults.port)),
            path=data.get("path", defaults.path),
            ui=_as_bool(data.get("ui", defaults.ui)),
            cors_origins=list(data.get("cors_origins", defaults.cors_origins)),
            request_timeout=float(timeout) if timeout is not None else None,
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
        )

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Return a copy with TYPEGRAPH_* environment overrides applied."""
        env = os.environ if environ is None else environ
        data = self.to_dict()

        if "TYPEGRAPH_HOST" in env:
            data["host"] = env["TYPEGRAPH_HOST"]
        if "TYPEGRAPH_PORT" in env:
            data["port"] = int(env["TYPEGRAPH_PORT"])
        if "TYPEGRAPH_PATH" in env:
            data["path"] = env["TYPEGRAPH_PATH"]
        if "TYPEGRAPH_UI" in env:
            data["ui"] = _as_bool(env["TYPEGRAPH_UI"])
        if "TYPEGRAPH_REQUEST_TIMEOUT" in env:
            raw = env["TYPEGRAPH_REQUEST_TIMEOUT"].strip()
            data["request_timeout"] = float(raw) if raw else None
        if "TYPEGRAPH_LOG_LEVEL" in env:
            data["log_level"] = env["TYPEGRAPH_LOG_LEVEL"]

        return Settings.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary for YAML serialization."""
        return {
            "host": self.host,
            "port": self.port,
            "path": self.path,
            "ui": self.ui,
            "cors_origins": list(self.cors_origins),
            "request_timeout": self.request_timeout,
            "log_level": self.log_level,
        }

    def save(self, path: Path | str = DEFAULT_CONFIG_PATH) -> None:
        """Save settings to a YAML file."""
        path = Path(path)
        content = yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
        path.write_text(content)


def load_settings(
    path: Path | str = DEFAULT_CONFIG_PATH,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Load settings from YAML (if the file exists) and apply env overrides.

    A missing file yields the defaults.
    """
    path = Path(path)
    data: dict[str, Any] = {}
    if path.exists():
        data = yaml.safe_load(path.read_text()) or {}
    return Settings.from_dict(data).with_env(environ)
