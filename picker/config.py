"""Configuration helpers for the comment picker."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

_DEFAULT_HOST = "0.0.0.0"
_DEFAULT_PORT = 8080
_DEFAULT_LOG_LEVEL = "INFO"
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _int_from_env(name: str) -> int | None:
    """Return an integer parsed from the environment or ``None`` when absent."""

    raw = os.getenv(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logging.warning("Environment variable %s=%r is not a valid integer", name, raw)
        return None


def _bool_from_env(name: str, *, default: bool) -> bool:
    """Return a boolean parsed from the environment with forgiving semantics."""

    raw = os.getenv(name)
    if raw is None:
        return default

    normalized = raw.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False

    logging.warning("Environment variable %s=%r is not a recognized boolean", name, raw)
    return default


@dataclass(frozen=True)
class PickerConfig:
    """Immutable configuration values loaded from environment variables."""

    api_key: str | None
    host: str = _DEFAULT_HOST
    port: int = _DEFAULT_PORT
    log_level: str = _DEFAULT_LOG_LEVEL
    debug: bool = False

    @property
    def resolved_log_level(self) -> int:
        """Return the numeric logging level, honouring ``debug``."""

        if self.debug:
            return logging.DEBUG
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def load_config() -> PickerConfig:
    """Load configuration from the environment and provide sane defaults."""

    load_dotenv()

    # The key is not validated here; a missing or bad key surfaces as an
    # upstream request failure.
    api_key = os.getenv("YOUTUBE_API_KEY")

    port = _int_from_env("PORT")
    if port is None:
        port = _DEFAULT_PORT
    elif not 0 < port < 65536:
        logging.warning("PORT=%s is out of range; using %s", port, _DEFAULT_PORT)
        port = _DEFAULT_PORT

    return PickerConfig(
        api_key=api_key,
        host=os.getenv("HOST", _DEFAULT_HOST),
        port=port,
        log_level=os.getenv("LOG_LEVEL", _DEFAULT_LOG_LEVEL),
        debug=_bool_from_env("DEBUG", default=False),
    )


__all__ = ["PickerConfig", "load_config", "_bool_from_env", "_int_from_env"]
