"""
Core package for the xTrade bot registry.

Holds the entity model, the registry engine and its persistence, the HTTP
client used by online mode, settings and logging. ``settings`` and ``log`` are
resolved lazily to avoid circular imports between config and logging.
"""

__all__ = [
    "settings",
    "log",
]


def __getattr__(name):
    if name == "settings":
        from core.settings.config import settings
        return settings
    if name == "log":
        from core.logging import log
        return log
    raise AttributeError(f"module 'core' has no attribute {name!r}")
