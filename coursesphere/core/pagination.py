"""Fixed-size pagination over an already filtered list."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages(total_items: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    return math.ceil(total_items / page_size)


def clamp_page(page: int, pages: int) -> int:
    """Clamp a requested page into ``[1, pages]`` (page 1 when there are none)."""
    return min(max(page, 1), max(pages, 1))


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    pages = total_pages(len(items), page_size)
    page = clamp_page(page, pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_items=len(items),
        total_pages=pages,
    )
