"""
Bot/listener registry: persistence, core operations and the direct facade.
"""
from core.registry.engine import BotRegistry
from core.registry.facade import LocalRegistryClient, RegistryFacade
from core.registry.pagination import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, check_page, paginate
from core.registry.store import load_registry, save_registry
from core.registry.templates import default_message

__all__ = [
    "BotRegistry",
    "LocalRegistryClient",
    "RegistryFacade",
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_LIMIT",
    "check_page",
    "paginate",
    "load_registry",
    "save_registry",
    "default_message",
]
