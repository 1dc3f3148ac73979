"""Bot registry router bindings."""

from __future__ import annotations

from collections.abc import Sequence

from api.router_registry.base import RouterBinding
from api.routers import bots, listeners


def get_registry_router_bindings() -> Sequence[RouterBinding]:
    return (
        RouterBinding(bots.router, prefix="/bots", tags=("Bots",)),
        RouterBinding(listeners.router, prefix="/bots", tags=("Listeners",)),
    )
