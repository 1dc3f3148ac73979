"""
Bot Registry.

In-memory CRUD and filter engine over the bot/listener entity model. This is
where every business rule lives; front ends only translate arguments in and
views out.

Every mutation is a single transaction: it is staged on a copy of the live
document, the copy is persisted, and only then does the copy become live. A
failed write therefore leaves memory and disk as they were and the error
reaches the caller.
"""
from __future__ import annotations

import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from core.errors import AlreadyExistsError, NotFoundError, ValidationError
from core.logging import log
from core.models import (
    Bot,
    BotFilter,
    BotInsertArgs,
    BotPatch,
    BotView,
    Listener,
    ListenerFilter,
    ListenerInsertArgs,
    ListenerPatch,
    ListenerView,
    RegistryDocument,
)
from core.registry.store import load_registry, save_registry
from core.registry.templates import default_message


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} cannot be empty.")
    return value


def _require_id(value: str, field: str) -> str:
    # ids are single URL path segments
    _require_text(value, field)
    if "/" in value or value in (".", ".."):
        raise ValidationError(f"{field} must be a single path segment (no '/', not '.' or '..').")
    return value


class BotRegistry:
    """
    Registry of bots and their listeners, persisted to a single JSON file.

    Not thread-safe on its own; concurrent callers go through
    ``LocalRegistryClient``, which serializes access with a lock.

    Example:
        >>> registry = BotRegistry.open("state.json")
        >>> bot = registry.create_bot(BotInsertArgs(name="TraderBot", exchange="Binance"))
        >>> registry.add_listener(bot.bot_id, ListenerInsertArgs(service="TradingView"))
    """

    def __init__(self, document: RegistryDocument, path: Union[str, os.PathLike]):
        self._document = document
        self._path = Path(path)

    @classmethod
    def open(cls, path: Union[str, os.PathLike]) -> "BotRegistry":
        """Load the registry at ``path``, initializing it when absent."""
        return cls(load_registry(path), path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def bot_count(self) -> int:
        return len(self._document.bots)

    def __len__(self) -> int:
        return len(self._document.bots)

    def __contains__(self, bot_id: str) -> bool:
        return bot_id in self._document.bots

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def _transaction(self) -> Iterator[RegistryDocument]:
        staged = self._document.model_copy(deep=True)
        yield staged
        save_registry(staged, self._path)
        self._document = staged

    @staticmethod
    def _bot_in(document: RegistryDocument, bot_id: str) -> Bot:
        _require_text(bot_id, "Bot ID")
        bot = document.bots.get(bot_id)
        if bot is None:
            raise NotFoundError(f"Bot with ID '{bot_id}' not found.")
        return bot

    @staticmethod
    def _listener_in(bot: Bot, listener_id: str) -> Listener:
        _require_text(listener_id, "Listener ID")
        listener = bot.listeners.get(listener_id)
        if listener is None:
            raise NotFoundError(f"Listener with ID '{listener_id}' not found in bot '{bot.bot_id}'.")
        return listener

    # =========================================================================
    # Bots
    # =========================================================================

    def create_bot(self, args: BotInsertArgs) -> BotView:
        """Insert a new bot.

        Raises:
            ValidationError: name or exchange empty, or an explicit bot_id that is
                empty or not a single path segment
            AlreadyExistsError: bot_id already registered
        """
        _require_text(args.name, "Bot name")
        _require_text(args.exchange, "Exchange")
        bot_id = str(uuid.uuid4()) if args.bot_id is None else _require_id(args.bot_id, "Bot ID")
        if bot_id in self._document.bots:
            raise AlreadyExistsError(f"A bot with ID `{bot_id}` already exists.")

        bot = Bot(**args.model_dump(exclude={"bot_id"}), bot_id=bot_id)
        with self._transaction() as staged:
            staged.bots[bot_id] = bot

        log.info(f"Bot created: {bot_id} ({bot.name} on {bot.exchange})")
        return BotView.from_record(bot)

    def list_bots(self, filters: Optional[BotFilter] = None) -> List[BotView]:
        """Return every bot matching ``filters``; no match is ``NotFoundError``."""
        filters = filters or BotFilter()
        matches = [
            BotView.from_record(bot)
            for bot in self._document.bots.values()
            if filters.matches_bot(bot)
        ]
        if not matches:
            raise NotFoundError("No bots found.")
        return matches

    def get_bot(self, bot_id: str) -> BotView:
        return BotView.from_record(self._bot_in(self._document, bot_id))

    def update_bot(self, bot_id: str, patch: BotPatch) -> BotView:
        """Merge the supplied fields of ``patch`` onto the bot; absent fields are kept."""
        if patch.name is not None:
            _require_text(patch.name, "Bot name")
        if patch.exchange is not None:
            _require_text(patch.exchange, "Exchange")
        self._bot_in(self._document, bot_id)

        with self._transaction() as staged:
            updated = patch.apply(staged.bots[bot_id])
            staged.bots[bot_id] = updated

        log.info(f"Bot updated: {bot_id} fields={sorted(patch.changes())}")
        return BotView.from_record(updated)

    def delete_bot(self, bot_id: str) -> BotView:
        """Remove a bot together with all of its listeners."""
        self._bot_in(self._document, bot_id)
        with self._transaction() as staged:
            removed = staged.bots.pop(bot_id)

        log.info(f"Bot deleted: {bot_id} ({len(removed.listeners)} listeners)")
        return BotView.from_record(removed)

    def clear_bots(self) -> None:
        with self._transaction() as staged:
            staged.bots.clear()
        log.info("Cleared all bots")

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_listener(self, bot_id: str, args: ListenerInsertArgs) -> ListenerView:
        """Add a listener to an existing bot.

        ``msg`` defaults to the service template and ``secret`` to an empty
        string. An explicit ``listener_id`` already used in the bot is
        rejected with ``AlreadyExistsError``.
        """
        _require_text(args.service, "Service")
        bot = self._bot_in(self._document, bot_id)
        if args.listener_id is None:
            listener_id = str(uuid.uuid4())
        else:
            listener_id = _require_id(args.listener_id, "Listener ID")
        if listener_id in bot.listeners:
            raise AlreadyExistsError(f"A listener with ID `{listener_id}` already exists in bot '{bot_id}'.")

        listener = Listener(
            service=args.service,
            secret=args.secret or "",
            msg=args.msg if args.msg is not None else default_message(args.service, bot_id),
        )
        with self._transaction() as staged:
            staged.bots[bot_id].listeners[listener_id] = listener

        log.info(f"Listener added: {listener_id} ({listener.service}) to bot {bot_id}")
        return ListenerView.from_record(bot_id, listener_id, listener)

    def list_listeners(self, bot_id: str, filters: Optional[ListenerFilter] = None) -> List[ListenerView]:
        """Return the bot's listeners matching ``filters``; no match is ``NotFoundError``."""
        bot = self._bot_in(self._document, bot_id)
        filters = filters or ListenerFilter()
        matches = [
            ListenerView.from_record(bot_id, listener_id, listener)
            for listener_id, listener in bot.listeners.items()
            if filters.matches_listener(listener_id, listener)
        ]
        if not matches:
            raise NotFoundError("No matching listeners found.")
        return matches

    def get_listener(self, bot_id: str, listener_id: str) -> ListenerView:
        bot = self._bot_in(self._document, bot_id)
        return ListenerView.from_record(bot_id, listener_id, self._listener_in(bot, listener_id))

    def update_listener(self, bot_id: str, listener_id: str, patch: ListenerPatch) -> ListenerView:
        if patch.service is not None:
            _require_text(patch.service, "Service")
        self._listener_in(self._bot_in(self._document, bot_id), listener_id)

        with self._transaction() as staged:
            listeners = staged.bots[bot_id].listeners
            updated = patch.apply(listeners[listener_id])
            listeners[listener_id] = updated

        log.info(f"Listener updated: {listener_id} in bot {bot_id} fields={sorted(patch.changes())}")
        return ListenerView.from_record(bot_id, listener_id, updated)

    def delete_listener(self, bot_id: str, listener_id: str) -> ListenerView:
        self._listener_in(self._bot_in(self._document, bot_id), listener_id)
        with self._transaction() as staged:
            removed = staged.bots[bot_id].listeners.pop(listener_id)

        log.info(f"Listener deleted: {listener_id} from bot {bot_id}")
        return ListenerView.from_record(bot_id, listener_id, removed)

    def delete_listeners(self, bot_id: str, filters: Optional[ListenerFilter] = None) -> List[ListenerView]:
        """Remove every listener of the bot matching ``filters`` and persist once."""
        filters = filters or ListenerFilter()
        bot = self._bot_in(self._document, bot_id)
        doomed = [
            listener_id
            for listener_id, listener in bot.listeners.items()
            if filters.matches_listener(listener_id, listener)
        ]
        if not doomed:
            raise NotFoundError("No matching listeners found.")

        with self._transaction() as staged:
            listeners = staged.bots[bot_id].listeners
            removed = [
                ListenerView.from_record(bot_id, listener_id, listeners.pop(listener_id))
                for listener_id in doomed
            ]

        log.info(f"Deleted {len(removed)} listeners from bot {bot_id}")
        return removed

    def clear_listeners(self) -> None:
        with self._transaction() as staged:
            for bot in staged.bots.values():
                bot.listeners.clear()
        log.info("Cleared all listeners")
