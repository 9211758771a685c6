#!/usr/bin/env python3
"""
Node service administration from the command line.

Usage:
    node-bridge status                                  # service health
    node-bridge call health                             # GET by default
    node-bridge call ai/process --method=POST --data='{"prompt": "hi"}'
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from .bridge import BridgeClient
from ..exceptions import InvalidEndpoint
from ..utils.config import BridgeSettings
from ..utils.logging_config import setup_logging


def _print_data(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_status(bridge: BridgeClient, args: argparse.Namespace) -> int:
    result = asyncio.run(bridge.call_service("health", method="GET"))
    if result["success"]:
        print("Success: Node service is running")
        _print_data(result["data"])
        return 0
    print(f"Error: Node service is not responding: {result['error']}", file=sys.stderr)
    return 1


def cmd_call(bridge: BridgeClient, args: argparse.Namespace) -> int:
    data = None
    if args.data:
        try:
            data = json.loads(args.data)
        except ValueError as e:
            print(f"Error: --data is not valid JSON: {e}", file=sys.stderr)
            return 1

    try:
        result = asyncio.run(bridge.call_service(args.endpoint, data, args.method.upper()))
    except InvalidEndpoint as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result["success"]:
        print("Success: Service call successful")
        _print_data(result["data"])
        return 0
    print(f"Error: Service call failed: {result['error']}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="node-bridge", description="Node service bridge CLI")
    parser.add_argument("--log-level", default=None, help="Logging level (default from settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    status = sub.add_parser("status", help="Check Node service status")
    status.set_defaults(func=cmd_status)

    call = sub.add_parser("call", help="Call a Node service endpoint")
    call.add_argument("endpoint", help="Endpoint path, e.g. ai/process")
    call.add_argument("--method", default="GET", help="HTTP method (default GET)")
    call.add_argument("--data", default=None, help="JSON body for non-GET calls")
    call.set_defaults(func=cmd_call)

    return parser


def main(argv: Optional[List[str]] = None, bridge: Optional[BridgeClient] = None) -> int:
    args = build_parser().parse_args(argv)
    if bridge is None:
        settings = BridgeSettings()
        setup_logging(args.log_level or settings.LOG_LEVEL)
        bridge = BridgeClient(settings)
    return args.func(bridge, args)


if __name__ == "__main__":
    sys.exit(main())
