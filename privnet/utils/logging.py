from __future__ import annotations

import logging
import os
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"
_LEVEL_ENV_VAR = "PRIVNET_LOG_LEVEL"
_DEBUG_FLAG = "PRIVNET_DEBUG"
_TRANSPORT_LOGGER = "urllib3"


def _coerce_level(value: Optional[str], fallback: int) -> int:
    text = (value or "").strip()
    if not text:
        return fallback
    if text.isdigit():
        return int(text)
    candidate = getattr(logging, text.upper(), None)
    if isinstance(candidate, int):
        return candidate
    return fallback


def env_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_env_level() -> Optional[int]:
    value = os.getenv(_LEVEL_ENV_VAR)
    if value:
        return _coerce_level(value, logging.INFO)
    if env_truthy(os.getenv(_DEBUG_FLAG)):
        return logging.DEBUG
    return None


def configure_root(default_level: int | str = logging.INFO) -> int:
    """
    Configure the root logger with a compact format.

    Environment overrides:
      - PRIVNET_LOG_LEVEL: explicit log level (name or number)
      - PRIVNET_DEBUG: truthy -> DEBUG (request lines from the HTTP executor)

    When the environment forces DEBUG, urllib3 connection logging is enabled too.
    """
    fallback = (
        _coerce_level(default_level, logging.INFO)
        if isinstance(default_level, str)
        else int(default_level)
    )
    effective = _resolve_env_level() or fallback

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=effective, format=_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)
    root.setLevel(effective)
    if env_requests_debug():
        # Connection-pool chatter (new connections, raw status lines).
        logging.getLogger(_TRANSPORT_LOGGER).setLevel(logging.DEBUG)
    return effective


def level_name(level: int) -> str:
    """Return logging level name for diagnostics."""
    return logging.getLevelName(level)


def env_requests_debug() -> bool:
    """Return True if environment variables force DEBUG logging."""
    env_level = _resolve_env_level()
    if env_level is None:
        return False
    return env_level <= logging.DEBUG
