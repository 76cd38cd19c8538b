"""Environment-backed client settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from privnet.adapters.http_client import DEFAULT_BASE_URL, DEFAULT_USER_AGENT, HttpConfig

ENV_API_KEY = "PRIVNET_API_KEY"
ENV_BASE_URL = "PRIVNET_BASE_URL"
ENV_TIMEOUT_S = "PRIVNET_TIMEOUT_S"


@dataclass
class ClientSettings:
    """Typed runtime settings for building a network client."""

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    request_timeout_s: float = 10
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientSettings":
        """Read ``PRIVNET_*`` variables; blank or invalid values keep defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            api_key=(env.get(ENV_API_KEY) or "").strip(),
            base_url=(env.get(ENV_BASE_URL) or "").strip() or defaults.base_url,
            request_timeout_s=_positive_float(env.get(ENV_TIMEOUT_S), defaults.request_timeout_s),
        )

    def http_config(self) -> HttpConfig:
        return HttpConfig(
            base_url=self.base_url,
            request_timeout_s=self.request_timeout_s,
            user_agent=self.user_agent,
        )


def _positive_float(raw: Optional[str], fallback: float) -> float:
    try:
        value = float(str(raw or "").strip())
    except ValueError:
        return fallback
    return value if value > 0 else fallback


__all__ = ["ClientSettings"]
