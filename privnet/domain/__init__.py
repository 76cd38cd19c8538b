"""Domain package exports for value objects, ports and errors."""

from .context import RequestContext
from .errors import InvalidInputError
from .network import Network
from .ports import ApiRequest, FormValues, NetworkId, NetworkPort, RegionId, RequestExecutor

__all__ = [
    "ApiRequest",
    "FormValues",
    "InvalidInputError",
    "Network",
    "NetworkId",
    "NetworkPort",
    "RegionId",
    "RequestContext",
    "RequestExecutor",
]
