"""xTrade bot registry CLI.

Offline mode edits the local state file directly; online mode talks to a
running registry server. Both expose the same commands.

Usage examples:
  xtrade add-bot --name TraderBot --exchange Binance
  xtrade list-bots --exchange Binance --page 1 --limit 20
  xtrade --state /tmp/state.json add-listener <bot_id> --service TradingView
  xtrade --url http://localhost:7762 list-listeners <bot_id> --service Telegram
  xtrade clear-all listeners
  xtrade server --host 0.0.0.0 --port 7762
"""

from __future__ import annotations

import argparse
import json
import math
import sys
from typing import Any, List, Optional

from pydantic import BaseModel

from cli import commands
from core.clients.registry_client import RemoteRegistryClient
from core.errors import RegistryError
from core.logging import level_for_verbosity, log, setup_logging
from core.registry import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, LocalRegistryClient, RegistryFacade
from core.settings.config import settings

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def _finite_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: '{value}'") from None
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"must be a finite number: '{value}'")
    return number


def _add_bot_fields(parser: argparse.ArgumentParser, required: bool = False) -> None:
    parser.add_argument("--name", required=required, help="Bot display name")
    parser.add_argument("--exchange", required=required, help="Exchange / venue name")
    parser.add_argument("--api-key", help="Exchange API key")
    parser.add_argument("--api-secret", help="Exchange API secret")
    parser.add_argument("--rest-endpoint", help="REST endpoint URL")
    parser.add_argument("--rpc-endpoint", help="RPC endpoint URL")
    parser.add_argument("--webhook-secret", help="Secret expected on incoming webhooks")
    parser.add_argument("--trading-fee", type=_finite_float, help="Trading fee (e.g. 0.1)")
    parser.add_argument("--private-key", help="Wallet private key")
    parser.add_argument("--contract-address", help="Contract address")


def _add_bot_filters(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--bot-id", help="Match bot id")
    parser.add_argument("--name", help="Match name")
    parser.add_argument("--exchange", help="Match exchange")
    parser.add_argument("--api-key", help="Match API key")
    parser.add_argument("--rest-endpoint", help="Match REST endpoint")
    parser.add_argument("--rpc-endpoint", help="Match RPC endpoint")
    parser.add_argument("--trading-fee", type=_finite_float, help="Match trading fee")
    parser.add_argument("--private-key", help="Match private key")
    parser.add_argument("--contract-address", help="Match contract address")


def _add_listener_filters(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--listener-id", help="Match listener id")
    parser.add_argument("--service", help="Match service")


def _add_pagination(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--page", type=int, default=DEFAULT_PAGE, help=f"Page number (default: {DEFAULT_PAGE})")
    parser.add_argument(
        "--limit", type=int, default=DEFAULT_PAGE_LIMIT, help=f"Page size (default: {DEFAULT_PAGE_LIMIT})"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="xtrade", description="Manage trading bots and their webhook listeners")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv, -vvv)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--state", help=f"Registry state file for offline mode (default: {settings.state_file})")
    mode.add_argument("--url", help="Registry server URL; selects online mode")
    mode.add_argument("--online", action="store_true", help=f"Online mode against API_URL ({settings.api_url})")

    sub = parser.add_subparsers(dest="command", metavar="<command>")
    sub.required = True

    # Bots
    p = sub.add_parser("add-bot", help="Register a new bot")
    p.add_argument("--bot-id", help="Explicit bot id (generated when omitted)")
    _add_bot_fields(p, required=True)
    p.set_defaults(handler=commands.add_bot)

    p = sub.add_parser("list-bots", help="List bots matching all given filters")
    _add_bot_filters(p)
    _add_pagination(p)
    p.set_defaults(handler=commands.list_bots)

    p = sub.add_parser("get-bot", help="Show one bot")
    p.add_argument("bot_id")
    p.set_defaults(handler=commands.get_bot)

    p = sub.add_parser("update-bot", help="Update the given fields of a bot")
    p.add_argument("bot_id")
    _add_bot_fields(p)
    p.set_defaults(handler=commands.update_bot)

    p = sub.add_parser("delete-bot", help="Delete a bot and all of its listeners")
    p.add_argument("bot_id")
    p.set_defaults(handler=commands.delete_bot)

    # Listeners
    p = sub.add_parser("add-listener", help="Add a webhook listener to a bot")
    p.add_argument("bot_id")
    p.add_argument("--service", required=True, help="Alert source (TradingView, Telegram, Discord, Slack, ...)")
    p.add_argument("--listener-id", help="Explicit listener id (generated when omitted)")
    p.add_argument("--secret", help="Shared secret expected on incoming alerts")
    p.add_argument("--msg", help="Message template (defaults to the service template)")
    p.set_defaults(handler=commands.add_listener)

    p = sub.add_parser("list-listeners", help="List a bot's listeners matching all given filters")
    p.add_argument("bot_id")
    _add_listener_filters(p)
    _add_pagination(p)
    p.set_defaults(handler=commands.list_listeners)

    p = sub.add_parser("get-listener", help="Show one listener")
    p.add_argument("bot_id")
    p.add_argument("listener_id")
    p.set_defaults(handler=commands.get_listener)

    p = sub.add_parser("update-listener", help="Update the given fields of a listener")
    p.add_argument("bot_id")
    p.add_argument("listener_id")
    p.add_argument("--service", help="Alert source")
    p.add_argument("--secret", help="Shared secret")
    p.add_argument("--msg", help="Message template")
    p.set_defaults(handler=commands.update_listener)

    p = sub.add_parser("delete-listener", help="Delete one listener")
    p.add_argument("bot_id")
    p.add_argument("listener_id")
    p.set_defaults(handler=commands.delete_listener)

    p = sub.add_parser("delete-listeners", help="Delete a bot's listeners matching all given filters")
    p.add_argument("bot_id")
    _add_listener_filters(p)
    p.set_defaults(handler=commands.delete_listeners)

    # Administrative
    p = sub.add_parser("clear-all", help="Remove every bot or every listener (offline only)")
    p.add_argument("target", choices=["bots", "listeners"])
    p.set_defaults(handler=commands.clear_all)

    p = sub.add_parser("server", help="Run the registry HTTP API")
    p.add_argument("--host", help=f"Bind address (default: {settings.api_host})")
    p.add_argument("--port", type=int, help=f"Bind port (default: {settings.api_port})")
    p.add_argument("--state", dest="server_state", help="Registry state file (default: --state or STATE_FILE)")
    p.set_defaults(handler=None)

    return parser


def _server_url(args: argparse.Namespace) -> Optional[str]:
    if args.url:
        return args.url
    if args.online:
        return settings.api_url
    return None


def open_facade(args: argparse.Namespace) -> RegistryFacade:
    url = _server_url(args)
    if url:
        log.debug(f"Online mode: {url}")
        return RemoteRegistryClient(base_url=url, timeout=settings.request_timeout)
    state = args.state or settings.state_file
    log.debug(f"Offline mode: {state}")
    return LocalRegistryClient.open(state)


def _render(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_render(item) for item in result]
    return result


def run_server(args: argparse.Namespace) -> int:
    import uvicorn

    from api.main import create_app

    state = args.server_state or args.state or settings.state_file
    host = args.host or settings.api_host
    port = args.port or settings.api_port
    log.info(f"Starting registry API on {host}:{port} (state: {state})")
    uvicorn.run(create_app(state), host=host, port=port, log_config=None)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level_for_verbosity(args.verbose), fallback="WARNING")

    if args.command == "server":
        return run_server(args)

    if args.command == "clear-all" and _server_url(args):
        print("Error: clear-all is only available in offline mode.", file=sys.stderr)
        return EXIT_USAGE

    try:
        with open_facade(args) as registry:
            result = args.handler(registry, args)
    except RegistryError as exc:
        log.debug(f"{args.command} failed ({exc.kind}): {exc.message}")
        print(f"Error: {exc.message}", file=sys.stderr)
        return EXIT_ERROR

    print(json.dumps(_render(result), indent=2, ensure_ascii=False))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
