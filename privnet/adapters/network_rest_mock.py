from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from itertools import count
from typing import Dict, List, Optional, Set

from privnet.adapters.api_errors import ApiCancelledError, ApiClientError
from privnet.adapters.network_rest import (
    CREATE_PATH,
    DESTROY_PATH,
    LIST_PATH,
    KEY_DESCRIPTION,
    KEY_NETWORK_ID,
    KEY_REGION_ID,
    KEY_V4_SUBNET,
    KEY_V4_SUBNET_MASK,
    build_create_form,
    require_value,
)
from privnet.domain.context import RequestContext
from privnet.domain.network import Network
from privnet.domain.ports import NetworkId, NetworkPort, RegionId


@dataclass
class NetworkRestMock(NetworkPort):
    """Offline substitute for ``NetworkRestAdapter`` with deterministic ids.

    Validation goes through the same form builder as the real adapter, so a
    malformed CIDR block fails here exactly as it would before a real call.
    """

    first_id: int = 1
    _networks: Dict[NetworkId, Network] = field(default_factory=dict, init=False)
    _attached: Set[NetworkId] = field(default_factory=set, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self._ids = count(self.first_id)

    # ---------- NetworkPort ----------

    def create(
        self,
        region_id: RegionId,
        description: str = "",
        cidr_block: str = "",
        *,
        context: Optional[RequestContext] = None,
    ) -> Network:
        form = build_create_form(region_id, description, cidr_block)
        _check(context, f"POST {CREATE_PATH}")
        with self._lock:
            network_id = f"net{next(self._ids):08x}"
            network = Network(
                network_id=network_id,
                region_id=form[KEY_REGION_ID][0],
                description=form.get(KEY_DESCRIPTION, [""])[0],
                v4_subnet=form.get(KEY_V4_SUBNET, [""])[0],
                v4_subnet_mask=int(form.get(KEY_V4_SUBNET_MASK, ["0"])[0]),
                date_created=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            )
            self._networks[network_id] = network
        return network

    def destroy(
        self, network_id: NetworkId, *, context: Optional[RequestContext] = None
    ) -> None:
        require_value(KEY_NETWORK_ID, network_id)
        ctx = f"POST {DESTROY_PATH}"
        _check(context, ctx)
        with self._lock:
            if network_id not in self._networks:
                raise ApiClientError(
                    f"{ctx}: Invalid {KEY_NETWORK_ID} (HTTP 412)",
                    status=412,
                    payload=f"Invalid {KEY_NETWORK_ID}",
                    context=ctx,
                )
            if network_id in self._attached:
                raise ApiClientError(
                    f"{ctx}: Network is attached to one or more servers (HTTP 412)",
                    status=412,
                    payload="Network is attached to one or more servers",
                    context=ctx,
                )
            del self._networks[network_id]

    def get_list(self, *, context: Optional[RequestContext] = None) -> List[Network]:
        _check(context, f"GET {LIST_PATH}")
        with self._lock:
            return list(self._networks.values())

    # ---------- test helpers ----------

    def attach(self, network_id: NetworkId) -> None:
        """Mark a network as enabled on an instance so destroy is refused."""
        with self._lock:
            self._attached.add(network_id)

    def detach(self, network_id: NetworkId) -> None:
        with self._lock:
            self._attached.discard(network_id)


def _check(context: Optional[RequestContext], ctx: str) -> None:
    if context is not None and context.done:
        raise ApiCancelledError(f"{ctx}: {context.reason}", reason=context.reason, context=ctx)


__all__ = ["NetworkRestMock"]
