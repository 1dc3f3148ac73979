"""
Error taxonomy for the bot/listener registry.

Every error raised by the registry, its persistence layer and its facades is a
``RegistryError``. Each class carries a ``kind`` (stable string used on the
wire) and the HTTP ``status_code`` the API answers with.
"""
from __future__ import annotations

from typing import Dict, Optional, Type


class RegistryError(Exception):
    """Base exception for registry operations."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str = "") -> None:
        self.message = message or self.__class__.__doc__ or self.kind
        super().__init__(self.message)


class ValidationError(RegistryError):
    """Malformed or missing required input."""

    kind = "validation"
    status_code = 400


class NotFoundError(RegistryError):
    """Referenced bot or listener does not exist."""

    kind = "not_found"
    status_code = 404


class AlreadyExistsError(RegistryError):
    """Attempted creation with a colliding identifier."""

    kind = "already_exists"
    status_code = 409


class PersistenceError(RegistryError):
    """Registry storage failure."""

    kind = "persistence"
    status_code = 500


class StorageIOError(PersistenceError):
    """Registry file cannot be opened, read or written."""

    kind = "storage_io"


class StorageEncodeError(PersistenceError):
    """Registry state cannot be serialized."""

    kind = "storage_encode"


class ParseError(PersistenceError):
    """Registry file exists but does not hold a valid registry document."""

    kind = "parse"


class InternalError(RegistryError):
    """Invariant violation that should never occur."""

    kind = "internal"
    status_code = 500


class TransportError(RegistryError):
    """Remote registry could not be reached or answered unusably."""

    kind = "transport"
    status_code = 502


class ConnectionFailedError(TransportError):
    """Connection to the remote registry failed."""

    kind = "connection_failed"


class TransportTimeoutError(TransportError):
    """Remote registry did not answer in time."""

    kind = "timeout"
    status_code = 504


class MalformedResponseError(TransportError):
    """Remote registry answered with an unreadable response."""

    kind = "malformed_response"


ERROR_KIND_HEADER = "X-Error-Kind"

_ERRORS_BY_KIND: Dict[str, Type[RegistryError]] = {
    cls.kind: cls
    for cls in (
        ValidationError,
        NotFoundError,
        AlreadyExistsError,
        PersistenceError,
        StorageIOError,
        StorageEncodeError,
        ParseError,
        InternalError,
        TransportError,
        ConnectionFailedError,
        TransportTimeoutError,
        MalformedResponseError,
    )
}

_ERRORS_BY_STATUS: Dict[int, Type[RegistryError]] = {
    400: ValidationError,
    404: NotFoundError,
    409: AlreadyExistsError,
    422: ValidationError,
    500: InternalError,
    502: TransportError,
    504: TransportTimeoutError,
}


def error_from_wire(status_code: int, message: str, kind: Optional[str] = None) -> RegistryError:
    """Rebuild a typed registry error from an HTTP error response.

    The ``kind`` header wins when it names a known error; otherwise the status
    code decides, and anything unmapped becomes an ``InternalError``.
    """
    cls = _ERRORS_BY_KIND.get(kind or "") or _ERRORS_BY_STATUS.get(status_code, InternalError)
    return cls(message or f"Request failed with HTTP {status_code}")
