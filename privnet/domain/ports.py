from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union

from privnet.domain.context import RequestContext
from privnet.domain.network import Network

NetworkId = str
RegionId = str
FormValues = Dict[str, List[str]]
FormInput = Mapping[str, Union[str, Sequence[str]]]


@dataclass(frozen=True)
class ApiRequest:
    """Prepared provider call: method, versioned path and form values."""

    method: str
    path: str
    form: FormValues = field(default_factory=dict)


# ---- Ports (Hexagonal boundaries) ----
class RequestExecutor(Protocol):
    """Authenticated HTTP transport used by resource adapters.

    ``do`` returns the decoded JSON body, or ``None`` when ``decode`` is false.
    Transport, status and decode failures are raised as ``ApiError`` subclasses.
    """

    def new_request(
        self, method: str, path: str, form: Optional[FormInput] = None
    ) -> ApiRequest: ...
    def do(
        self,
        request: ApiRequest,
        *,
        context: Optional[RequestContext] = None,
        decode: bool = True,
    ) -> Any: ...


class NetworkPort(Protocol):
    """Create/destroy/list operations for private networks."""

    def create(
        self,
        region_id: RegionId,
        description: str = "",
        cidr_block: str = "",
        *,
        context: Optional[RequestContext] = None,
    ) -> Network: ...
    def destroy(
        self, network_id: NetworkId, *, context: Optional[RequestContext] = None
    ) -> None: ...
    def get_list(self, *, context: Optional[RequestContext] = None) -> List[Network]: ...
