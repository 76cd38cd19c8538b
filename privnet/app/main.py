"""Command-line entry point: ``privnet list|create|destroy``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from privnet.adapters.api_errors import ApiError
from privnet.adapters.network_rest import network_to_wire
from privnet.app.factory import build_network_port
from privnet.domain.context import RequestContext
from privnet.domain.errors import InvalidInputError
from privnet.domain.ports import NetworkPort
from privnet.utils import logging as logging_utils
from privnet.utils.settings import ClientSettings

_log = logging.getLogger("privnet.cli")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="privnet", description="Manage private networks.")
    parser.add_argument("--offline", action="store_true", help="use the in-memory mock")
    parser.add_argument("--timeout", type=float, default=None, help="overall deadline in seconds")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="list networks on the account")

    create = sub.add_parser("create", help="create a network")
    create.add_argument("--region", required=True, help="region id (DCID)")
    create.add_argument("--description", default="")
    create.add_argument("--cidr", default="", help="IPv4 subnet, e.g. 10.0.0.0/24")

    destroy = sub.add_parser("destroy", help="destroy a detached network")
    destroy.add_argument("network_id")
    return parser.parse_args(argv)


def run(port: NetworkPort, args: argparse.Namespace) -> object:
    """Execute one subcommand and return a JSON-serialisable result."""
    context = RequestContext(timeout_s=args.timeout) if args.timeout else None
    if args.command == "list":
        return [network_to_wire(net) for net in port.get_list(context=context)]
    if args.command == "create":
        network = port.create(
            args.region, args.description, args.cidr, context=context
        )
        return network_to_wire(network)
    if args.command == "destroy":
        port.destroy(args.network_id, context=context)
        return {"destroyed": args.network_id}
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    level = logging_utils.configure_root(args.log_level)
    _log.debug("log level %s", logging_utils.level_name(level))
    port = build_network_port(ClientSettings.from_env(), offline=args.offline)
    try:
        result = run(port, args)
    except InvalidInputError as exc:
        print(f"invalid input: {exc}", file=sys.stderr)
        return 2
    except ApiError as exc:
        _log.debug("request failed", exc_info=True)
        print(f"request failed: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
