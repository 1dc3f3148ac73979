"""
xTrade Bot Registry - HTTP API
Exposes bot and listener configuration over REST with a JSON envelope
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models.registry import ApiResponse, HealthResponse
from api.router_registry import get_router_bindings
from api.services.registry_service import open_registry_service
from core.errors import ERROR_KIND_HEADER, InternalError, RegistryError, ValidationError, error_from_wire
from core.logging import log
from core.settings.config import settings


def _error_response(error: RegistryError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=ApiResponse.failure(error.message).model_dump(),
        headers={ERROR_KIND_HEADER: error.kind},
    )


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed ({exc.kind}): {exc.message}")
    else:
        log.info(f"{request.method} {request.url.path} rejected ({exc.kind}): {exc.message}")
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    )
    return await registry_error_handler(request, ValidationError(f"Invalid request: {details}"))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error = error_from_wire(exc.status_code, str(exc.detail))
    error.status_code = exc.status_code
    return _error_response(error)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error_response(InternalError(f"Internal server error: {exc}"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup.
    Opens the registry so a corrupt state file is reported at boot.
    """
    log.info(f"Application startup: loading registry from {app.state.state_file}")
    open_registry_service(app)
    yield
    log.info("Application shutdown")


def create_app(state_file: Optional[Union[str, os.PathLike]] = None) -> FastAPI:
    """Build the registry API bound to ``state_file`` (default: ``STATE_FILE``)."""
    app = FastAPI(
        title=settings.app_name,
        description="Configuration registry for trading bots and their webhook listeners",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.state_file = Path(state_file) if state_file is not None else settings.state_path
    app.state.registry = None

    app.add_exception_handler(RegistryError, registry_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.api_route("/health", methods=["GET", "HEAD"], response_model=HealthResponse)
    async def health_check():
        """Health check endpoint"""
        return HealthResponse(
            service=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
        )

    for binding in get_router_bindings():
        binding.include(app)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from core.logging import setup_logging

    setup_logging()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)
