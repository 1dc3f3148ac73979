"""CLI command handlers.

Each handler turns parsed arguments into one registry call and returns what
should be printed. Handlers only see the ``RegistryFacade`` interface, so the
same code runs against the local state file and a remote server.
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, Iterable

from core.models import (
    BotFilter,
    BotInsertArgs,
    BotPatch,
    ListenerFilter,
    ListenerInsertArgs,
    ListenerPatch,
)
from core.registry import LocalRegistryClient, RegistryFacade

BOT_FIELDS = (
    "name",
    "exchange",
    "api_key",
    "api_secret",
    "rest_endpoint",
    "rpc_endpoint",
    "webhook_secret",
    "trading_fee",
    "private_key",
    "contract_address",
)
BOT_FILTER_FIELDS = tuple(BotFilter.model_fields)
LISTENER_FIELDS = ("service", "secret", "msg")
LISTENER_FILTER_FIELDS = tuple(ListenerFilter.model_fields)


def _supplied(args: argparse.Namespace, fields: Iterable[str]) -> Dict[str, Any]:
    values = {field: getattr(args, field, None) for field in fields}
    return {field: value for field, value in values.items() if value is not None}


# Bots
def add_bot(registry: RegistryFacade, args: argparse.Namespace):
    return registry.create_bot(BotInsertArgs(bot_id=args.bot_id, **_supplied(args, BOT_FIELDS)))


def list_bots(registry: RegistryFacade, args: argparse.Namespace):
    filters = BotFilter(**_supplied(args, BOT_FILTER_FIELDS))
    return registry.list_bots(filters, page=args.page, limit=args.limit)


def get_bot(registry: RegistryFacade, args: argparse.Namespace):
    return registry.get_bot(args.bot_id)


def update_bot(registry: RegistryFacade, args: argparse.Namespace):
    return registry.update_bot(args.bot_id, BotPatch(**_supplied(args, BOT_FIELDS)))


def delete_bot(registry: RegistryFacade, args: argparse.Namespace):
    return registry.delete_bot(args.bot_id)


# Listeners
def add_listener(registry: RegistryFacade, args: argparse.Namespace):
    listener = ListenerInsertArgs(listener_id=args.listener_id, **_supplied(args, LISTENER_FIELDS))
    return registry.add_listener(args.bot_id, listener)


def list_listeners(registry: RegistryFacade, args: argparse.Namespace):
    filters = ListenerFilter(**_supplied(args, LISTENER_FILTER_FIELDS))
    return registry.list_listeners(args.bot_id, filters, page=args.page, limit=args.limit)


def get_listener(registry: RegistryFacade, args: argparse.Namespace):
    return registry.get_listener(args.bot_id, args.listener_id)


def update_listener(registry: RegistryFacade, args: argparse.Namespace):
    patch = ListenerPatch(**_supplied(args, LISTENER_FIELDS))
    return registry.update_listener(args.bot_id, args.listener_id, patch)


def delete_listener(registry: RegistryFacade, args: argparse.Namespace):
    return registry.delete_listener(args.bot_id, args.listener_id)


def delete_listeners(registry: RegistryFacade, args: argparse.Namespace):
    filters = ListenerFilter(**_supplied(args, LISTENER_FILTER_FIELDS))
    return registry.delete_listeners(args.bot_id, filters)


# Administrative
def clear_all(registry: LocalRegistryClient, args: argparse.Namespace):
    if args.target == "bots":
        registry.clear_bots()
    else:
        registry.clear_listeners()
    return {"cleared": args.target}
