"""Gallery server configuration.

Loads settings from a single YAML file, ``gallery.settings.yaml`` in the
working directory by default. Set ``GALLERY_SETTINGS`` to point elsewhere.
Every key is optional; a missing file means all defaults.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("gallery.settings.yaml")
SETTINGS_ENV_VAR = "GALLERY_SETTINGS"

_LOG_LEVELS = {"critical", "error", "warning", "info", "debug"}


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host:            str = "0.0.0.0"
    port:            int = 5000
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])


class StorageSettings(BaseModel):
    """Where uploads live and the URL prefix they are served under."""
    upload_dir: str = "uploads"
    url_prefix: str = "/uploads"

    @field_validator("url_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = "/" + value.strip("/")
        if value == "/":
            raise ValueError("url_prefix must not be the site root")
        return value


class LoggingSettings(BaseModel):
    level: str = "info"

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.lower()
        if value not in _LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return value


class AppConfig(BaseModel):
    server:  ServerSettings  = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def _settings_path(settings_path: Optional[Union[str, Path]]) -> Path:
    if settings_path is not None:
        return Path(settings_path)
    return Path(os.environ.get(SETTINGS_ENV_VAR, SETTINGS_FILE))


def load_config(settings_path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load settings into a fresh *AppConfig*.

    A relative ``storage.upload_dir`` is resolved against the directory that
    holds the settings file; absolute paths are kept unchanged.
    """
    path = _settings_path(settings_path)
    config = AppConfig(**_load_yaml(path))

    upload_dir = Path(config.storage.upload_dir)
    if not upload_dir.is_absolute():
        config.storage.upload_dir = str(path.resolve().parent / upload_dir)

    logger.info(
        "Settings loaded (server=%s:%s, upload_dir=%s)",
        config.server.host,
        config.server.port,
        config.storage.upload_dir,
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached config (for testing)."""
    global _config
    _config = None
