"""In-memory pagination of an already ordered result set."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page_number: int
    page_size: int
    total_count: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page_number > 1


def paginate(items: Sequence[T], page_number: int, page_size: int) -> Page[T]:
    """Slice `items` into page `page_number` of `page_size` entries.

    A page past the end yields an empty slice rather than an error. The
    input order is kept as is.
    """
    if page_number < 1:
        raise ValueError("page_number must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    total_count = len(items)
    start = (page_number - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page_number=page_number,
        page_size=page_size,
        total_count=total_count,
        total_pages=math.ceil(total_count / page_size),
    )
