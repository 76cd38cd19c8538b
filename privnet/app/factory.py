from __future__ import annotations

from typing import Optional

import requests

from privnet.adapters.http_client import ApiSession
from privnet.adapters.network_rest import NetworkRestAdapter
from privnet.adapters.network_rest_mock import NetworkRestMock
from privnet.domain.ports import NetworkPort
from privnet.utils.settings import ClientSettings


def build_network_port(
    settings: Optional[ClientSettings] = None,
    *,
    offline: bool = False,
    session: Optional[requests.Session] = None,
) -> NetworkPort:
    """Wire a ``NetworkPort`` from settings.

    ``offline`` returns the in-memory mock; otherwise an ``ApiSession`` is
    injected into ``NetworkRestAdapter``. ``session`` lets callers share one
    connection pool between several adapters.
    """
    if offline:
        return NetworkRestMock()
    cfg = settings or ClientSettings.from_env()
    executor = ApiSession(cfg.api_key or None, cfg.http_config(), session=session)
    return NetworkRestAdapter(executor)


__all__ = ["build_network_port"]
