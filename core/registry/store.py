"""
Persistence adapter: registry document <-> JSON file.

Knows nothing about HTTP or the CLI. Failures are mapped into the registry
error taxonomy so callers can tell a filesystem problem (``StorageIOError``)
from an encoding defect (``StorageEncodeError``) or a corrupt file
(``ParseError``).
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Union

from pydantic import ValidationError as SchemaError
from pydantic_core import PydanticSerializationError

from core.errors import ParseError, StorageEncodeError, StorageIOError
from core.logging import log
from core.models import RegistryDocument

PathLike = Union[str, os.PathLike]


def load_registry(path: PathLike) -> RegistryDocument:
    """Read the registry at ``path``.

    A missing file is first-run initialization: an empty registry is written
    back and returned. An existing file with invalid content raises
    ``ParseError``; it is never replaced by an empty registry.
    """
    path = Path(path)
    if not path.exists():
        log.info(f"Registry file {path} not found; initializing empty registry")
        document = RegistryDocument()
        save_registry(document, path)
        return document

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StorageIOError(f"Failed to read registry file {path}: {exc}") from exc

    try:
        document = RegistryDocument.model_validate_json(raw)
    except SchemaError as exc:
        raise ParseError(f"Registry file {path} is not a valid registry document: {exc}") from exc

    log.debug(f"Loaded {len(document.bots)} bots from {path}")
    return document


def save_registry(document: RegistryDocument, path: PathLike) -> None:
    """Serialize ``document`` and atomically replace the file at ``path``."""
    path = Path(path)
    try:
        payload = document.model_dump_json(indent=2)
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        raise StorageEncodeError(f"Failed to serialize registry: {exc}") from exc

    tmp_path = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        with open(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
        Path(tmp_path).replace(path)
    except OSError as exc:
        if tmp_path is not None:
            Path(tmp_path).unlink(missing_ok=True)
        raise StorageIOError(f"Failed to write registry file {path}: {exc}") from exc

    log.debug(f"Saved {len(document.bots)} bots to {path}")
