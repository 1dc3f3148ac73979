"""
Registry entity models.
"""
from core.models.registry import (
    SENSITIVE_BOT_FIELDS,
    SENSITIVE_LISTENER_FIELDS,
    Bot,
    BotFilter,
    BotInsertArgs,
    BotPatch,
    BotView,
    Filter,
    Listener,
    ListenerFilter,
    ListenerInsertArgs,
    ListenerPatch,
    ListenerView,
    Patch,
    RegistryDocument,
)

__all__ = [
    "SENSITIVE_BOT_FIELDS",
    "SENSITIVE_LISTENER_FIELDS",
    "Bot",
    "BotFilter",
    "BotInsertArgs",
    "BotPatch",
    "BotView",
    "Filter",
    "Listener",
    "ListenerFilter",
    "ListenerInsertArgs",
    "ListenerPatch",
    "ListenerView",
    "Patch",
    "RegistryDocument",
]
