"""Registry service wiring for the API.

One ``LocalRegistryClient`` is opened per application and stored on
``app.state``; handlers receive it through the ``get_registry_service``
dependency.
"""

from __future__ import annotations

from fastapi import FastAPI, Request

from core.logging import log
from core.registry import LocalRegistryClient


def open_registry_service(app: FastAPI) -> LocalRegistryClient:
    """Return the app's registry, opening the state file on first use."""
    service = getattr(app.state, "registry", None)
    if service is None:
        state_file = app.state.state_file
        log.info(f"Opening registry state file {state_file}")
        service = LocalRegistryClient.open(state_file)
        app.state.registry = service
        log.info(f"Registry loaded: {service.registry.bot_count} bots")
    return service


async def get_registry_service(request: Request) -> LocalRegistryClient:
    return open_registry_service(request.app)
