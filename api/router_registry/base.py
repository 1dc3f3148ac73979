"""Router registry primitives."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import APIRouter, FastAPI


@dataclass(frozen=True)
class RouterBinding:
    """Where a router is mounted on the registry API and how it is tagged."""

    router: APIRouter
    prefix: str = ""
    tags: tuple[str, ...] = ()

    def include(self, app: FastAPI) -> None:
        app.include_router(self.router, prefix=self.prefix, tags=list(self.tags))
