"""REST adapter implementing ``NetworkPort`` against the v1 network endpoints."""

from __future__ import annotations

import ipaddress
from typing import Any, Dict, List, Mapping, Optional

from privnet.adapters.api_errors import ApiDecodeError
from privnet.domain.context import RequestContext
from privnet.domain.errors import InvalidInputError
from privnet.domain.network import Network
from privnet.domain.ports import FormValues, NetworkId, NetworkPort, RegionId, RequestExecutor

CREATE_PATH = "/v1/network/create"
DESTROY_PATH = "/v1/network/destroy"
LIST_PATH = "/v1/network/list"

# Wire keys are fixed by the provider; casing matters.
KEY_NETWORK_ID = "NETWORKID"
KEY_REGION_ID = "DCID"
KEY_DESCRIPTION = "description"
KEY_V4_SUBNET = "v4_subnet"
KEY_V4_SUBNET_MASK = "v4_subnet_mask"
KEY_DATE_CREATED = "date_created"


class NetworkRestAdapter(NetworkPort):
    """HTTP adapter for ``/v1/network/*`` endpoints.

    Endpoints:
      - POST /v1/network/create   form: DCID, [description], [v4_subnet], [v4_subnet_mask]
              -> {"NETWORKID": "...", ...}
      - POST /v1/network/destroy  form: NETWORKID -> body ignored
      - GET  /v1/network/list     -> {"<id>": {"NETWORKID": "<id>", ...}, ...}
    """

    def __init__(self, executor: RequestExecutor) -> None:
        self.executor = executor

    def create(
        self,
        region_id: RegionId,
        description: str = "",
        cidr_block: str = "",
        *,
        context: Optional[RequestContext] = None,
    ) -> Network:
        """Create a private network in ``region_id``.

        A network is only usable from instances in the region it was created in.
        """
        form = build_create_form(region_id, description, cidr_block)
        request = self.executor.new_request("POST", CREATE_PATH, form)
        payload = self.executor.do(request, context=context)
        return network_from_wire(payload, ctx=f"POST {CREATE_PATH}")

    def destroy(
        self, network_id: NetworkId, *, context: Optional[RequestContext] = None
    ) -> None:
        """Destroy a private network.

        The provider rejects this while the network is still enabled on any
        instance; that rejection is raised unchanged.
        """
        network_id = require_value(KEY_NETWORK_ID, network_id)
        request = self.executor.new_request(
            "POST", DESTROY_PATH, {KEY_NETWORK_ID: [network_id]}
        )
        self.executor.do(request, context=context, decode=False)

    def get_list(self, *, context: Optional[RequestContext] = None) -> List[Network]:
        """List every private network on the account, in no particular order."""
        request = self.executor.new_request("GET", LIST_PATH)
        payload = self.executor.do(request, context=context)
        return networks_from_wire_map(payload, ctx=f"GET {LIST_PATH}")


# ----------------------------------------------------------------------
# Request construction
# ----------------------------------------------------------------------
def build_create_form(region_id: str, description: str = "", cidr_block: str = "") -> FormValues:
    """Assemble create parameters; raises ``InvalidInputError`` before any I/O."""
    form: FormValues = {KEY_REGION_ID: [require_value(KEY_REGION_ID, region_id)]}

    if cidr_block:
        subnet = parse_cidr(cidr_block)
        v4_subnet = ipv4_form(subnet.network_address)
        if v4_subnet is not None:
            form[KEY_V4_SUBNET] = [v4_subnet]
        # Mask is sent even when the address has no IPv4 form.
        form[KEY_V4_SUBNET_MASK] = [str(subnet.prefixlen)]

    if description:
        form[KEY_DESCRIPTION] = [description]
    return form


def parse_cidr(cidr_block: str) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    """Parse CIDR notation, masking host bits (``10.1.2.3/24`` -> ``10.1.2.0/24``).

    Only ``address/prefixlen`` with a decimal prefix is accepted; netmask or
    hostmask suffixes and surrounding whitespace are malformed input.
    """
    address, sep, prefix = cidr_block.rpartition("/")
    if not sep or not address or not (prefix.isascii() and prefix.isdigit()):
        raise InvalidInputError("cidr_block", cidr_block, f"invalid CIDR address: {cidr_block}")
    try:
        return ipaddress.ip_network(cidr_block, strict=False)
    except ValueError as exc:
        raise InvalidInputError(
            "cidr_block", cidr_block, f"invalid CIDR address: {cidr_block}"
        ) from exc


def ipv4_form(address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> Optional[str]:
    """Return the dotted-quad form of ``address``, or ``None`` if it has none."""
    if isinstance(address, ipaddress.IPv4Address):
        return str(address)
    mapped = address.ipv4_mapped
    return str(mapped) if mapped is not None else None


def require_value(field: str, value: str) -> str:
    """Reject blank values; the caller's value goes on the wire unchanged."""
    if not str(value or "").strip():
        raise InvalidInputError(field, value, f"{field} must be a non-empty string")
    return value


# ----------------------------------------------------------------------
# Response normalisation
# ----------------------------------------------------------------------
def network_to_wire(network: Network) -> Dict[str, Any]:
    """Encode ``network`` with the provider's JSON field names."""
    return {
        KEY_NETWORK_ID: network.network_id,
        KEY_REGION_ID: network.region_id,
        KEY_DESCRIPTION: network.description,
        KEY_V4_SUBNET: network.v4_subnet,
        KEY_V4_SUBNET_MASK: network.v4_subnet_mask,
        KEY_DATE_CREATED: network.date_created,
    }


def network_from_wire(payload: Any, *, ctx: str = "network") -> Network:
    """Decode one wire record into a ``Network``."""
    if not isinstance(payload, Mapping):
        raise ApiDecodeError(f"{ctx}: expected object response", payload=payload, context=ctx)
    network_id = _wire_str(payload, KEY_NETWORK_ID, ctx)
    if not network_id:
        raise ApiDecodeError(f"{ctx}: {KEY_NETWORK_ID} missing", payload=payload, context=ctx)
    return Network(
        network_id=network_id,
        region_id=_wire_str(payload, KEY_REGION_ID, ctx),
        description=_wire_str(payload, KEY_DESCRIPTION, ctx),
        v4_subnet=_wire_str(payload, KEY_V4_SUBNET, ctx),
        v4_subnet_mask=_wire_int(payload, KEY_V4_SUBNET_MASK, ctx),
        date_created=_wire_str(payload, KEY_DATE_CREATED, ctx),
    )


def networks_from_wire_map(payload: Any, *, ctx: str = "network list") -> List[Network]:
    """Flatten the list endpoint's ``{key: record}`` mapping into a list.

    The keys are provider-internal and discarded. An empty JSON array (the
    provider's spelling of "no networks") and ``null`` yield ``[]`` like ``{}``.
    """
    if payload is None or payload == []:
        return []
    if not isinstance(payload, Mapping):
        raise ApiDecodeError(
            f"{ctx}: expected object keyed by network id", payload=payload, context=ctx
        )
    return [network_from_wire(record, ctx=ctx) for record in payload.values()]


def _wire_str(payload: Mapping[str, Any], key: str, ctx: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if isinstance(value, (dict, list, bool)):
        raise ApiDecodeError(f"{ctx}: {key} must be a string", payload=payload, context=ctx)
    return str(value)


def _wire_int(payload: Mapping[str, Any], key: str, ctx: str) -> int:
    value = payload.get(key)
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ApiDecodeError(f"{ctx}: {key} must be an integer", payload=payload, context=ctx)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ApiDecodeError(
            f"{ctx}: {key} must be an integer", payload=payload, context=ctx
        ) from exc


__all__ = [
    "CREATE_PATH",
    "DESTROY_PATH",
    "LIST_PATH",
    "NetworkRestAdapter",
    "build_create_form",
    "network_from_wire",
    "network_to_wire",
    "networks_from_wire_map",
    "parse_cidr",
    "require_value",
]
