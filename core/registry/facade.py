"""
Access facade for the bot registry.

``RegistryFacade`` is the operation set every front end programs against. Two
implementations exist:

- ``LocalRegistryClient``: in-process, used by the HTTP server and the offline
  CLI. Every call runs under one lock around a shared ``BotRegistry``.
- ``RemoteRegistryClient`` (``core.clients.registry_client``): HTTP, used by the
  online CLI.

For the same arguments against the same state both return the same views and
raise the same ``RegistryError`` subclasses.
"""
from __future__ import annotations

import os
import threading
from abc import ABC, abstractmethod
from typing import List, Optional, Union

from core.models import (
    BotFilter,
    BotInsertArgs,
    BotPatch,
    BotView,
    ListenerFilter,
    ListenerInsertArgs,
    ListenerPatch,
    ListenerView,
)
from core.registry.engine import BotRegistry
from core.registry.pagination import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, check_page, paginate


class RegistryFacade(ABC):
    """Abstract operation set shared by the direct and remote facades."""

    # Bots
    @abstractmethod
    def create_bot(self, args: BotInsertArgs) -> BotView:
        pass

    @abstractmethod
    def list_bots(
        self,
        filters: Optional[BotFilter] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[BotView]:
        pass

    @abstractmethod
    def get_bot(self, bot_id: str) -> BotView:
        pass

    @abstractmethod
    def update_bot(self, bot_id: str, patch: BotPatch) -> BotView:
        pass

    @abstractmethod
    def delete_bot(self, bot_id: str) -> BotView:
        pass

    # Listeners
    @abstractmethod
    def add_listener(self, bot_id: str, args: ListenerInsertArgs) -> ListenerView:
        pass

    @abstractmethod
    def list_listeners(
        self,
        bot_id: str,
        filters: Optional[ListenerFilter] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[ListenerView]:
        pass

    @abstractmethod
    def get_listener(self, bot_id: str, listener_id: str) -> ListenerView:
        pass

    @abstractmethod
    def update_listener(self, bot_id: str, listener_id: str, patch: ListenerPatch) -> ListenerView:
        pass

    @abstractmethod
    def delete_listener(self, bot_id: str, listener_id: str) -> ListenerView:
        pass

    @abstractmethod
    def delete_listeners(self, bot_id: str, filters: Optional[ListenerFilter] = None) -> List[ListenerView]:
        pass

    def close(self) -> None:
        """Release held resources; nothing to do by default."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class LocalRegistryClient(RegistryFacade):
    """
    Direct facade: serializes every call on a shared ``BotRegistry``.

    The lock is held across validation, mutation and persistence, so a second
    caller never observes a half-applied operation.
    """

    def __init__(self, registry: BotRegistry):
        self._registry = registry
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: Union[str, os.PathLike]) -> "LocalRegistryClient":
        return cls(BotRegistry.open(path))

    @property
    def registry(self) -> BotRegistry:
        return self._registry

    def create_bot(self, args: BotInsertArgs) -> BotView:
        with self._lock:
            return self._registry.create_bot(args)

    def list_bots(
        self,
        filters: Optional[BotFilter] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[BotView]:
        check_page(page, limit)
        with self._lock:
            bots = self._registry.list_bots(filters)
        return paginate(bots, page, limit)

    def get_bot(self, bot_id: str) -> BotView:
        with self._lock:
            return self._registry.get_bot(bot_id)

    def update_bot(self, bot_id: str, patch: BotPatch) -> BotView:
        with self._lock:
            return self._registry.update_bot(bot_id, patch)

    def delete_bot(self, bot_id: str) -> BotView:
        with self._lock:
            return self._registry.delete_bot(bot_id)

    def add_listener(self, bot_id: str, args: ListenerInsertArgs) -> ListenerView:
        with self._lock:
            return self._registry.add_listener(bot_id, args)

    def list_listeners(
        self,
        bot_id: str,
        filters: Optional[ListenerFilter] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> List[ListenerView]:
        check_page(page, limit)
        with self._lock:
            listeners = self._registry.list_listeners(bot_id, filters)
        return paginate(listeners, page, limit)

    def get_listener(self, bot_id: str, listener_id: str) -> ListenerView:
        with self._lock:
            return self._registry.get_listener(bot_id, listener_id)

    def update_listener(self, bot_id: str, listener_id: str, patch: ListenerPatch) -> ListenerView:
        with self._lock:
            return self._registry.update_listener(bot_id, listener_id, patch)

    def delete_listener(self, bot_id: str, listener_id: str) -> ListenerView:
        with self._lock:
            return self._registry.delete_listener(bot_id, listener_id)

    def delete_listeners(self, bot_id: str, filters: Optional[ListenerFilter] = None) -> List[ListenerView]:
        with self._lock:
            return self._registry.delete_listeners(bot_id, filters)

    # Administrative, direct facade only
    def clear_bots(self) -> None:
        with self._lock:
            self._registry.clear_bots()

    def clear_listeners(self) -> None:
        with self._lock:
            self._registry.clear_listeners()
