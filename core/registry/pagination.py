"""Pagination shared by every list front end."""
from __future__ import annotations

from typing import List, Sequence, TypeVar

from core.errors import ValidationError

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10


def check_page(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError("Page number must be greater than or equal to 1.")
    if limit < 1:
        raise ValidationError("Limit must be greater than or equal to 1.")


def paginate(items: Sequence[T], page: int = DEFAULT_PAGE, limit: int = DEFAULT_PAGE_LIMIT) -> List[T]:
    """Slice ``items`` to the 1-based ``page`` of size ``limit``.

    A page past the end yields an empty list.
    """
    check_page(page, limit)
    start = (page - 1) * limit
    return list(items[start:start + limit])
