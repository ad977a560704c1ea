from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - TASKLIST_CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - TASKLIST_LOG_LEVEL: logging level name (default: INFO)
    - TASKLIST_MAX_TEXT_LENGTH: longest task text accepted by the API (default: 200)
    """

    cors_allow_origins: List[str]
    log_level: int
    max_text_length: int


DEFAULT_MAX_TEXT_LENGTH = 200


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _parse_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _parse_positive_int(value: str, default: int) -> int:
    try:
        n = int(value.strip())
    except ValueError:
        return default
    return n if n > 0 else default


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    origins = _parse_origins(_get_env("TASKLIST_CORS_ALLOW_ORIGINS", "*"))
    log_level = _parse_level(_get_env("TASKLIST_LOG_LEVEL", "INFO"))
    max_len = _parse_positive_int(
        _get_env("TASKLIST_MAX_TEXT_LENGTH", str(DEFAULT_MAX_TEXT_LENGTH)),
        DEFAULT_MAX_TEXT_LENGTH,
    )

    return Settings(
        cors_allow_origins=origins,
        log_level=log_level,
        max_text_length=max_len,
    )
