"""Filter + page state for a list view."""

from __future__ import annotations

from typing import Callable, Generic, Sequence, TypeVar

from coursesphere.core.pagination import Page, clamp_page, paginate, total_pages

T = TypeVar("T")
F = TypeVar("F")


class FilteredListing(Generic[T, F]):
    """Holds a fetched collection, the active filter and the current page.

    The page goes back to 1 whenever the filter changes, and page requests
    outside the available range are clamped.
    """

    def __init__(
        self,
        items: Sequence[T],
        apply_filter: Callable[[Sequence[T], F], list[T]],
        initial_filter: F,
        page_size: int,
    ):
        self._items = list(items)
        self._apply_filter = apply_filter
        self._filter = initial_filter
        self._page = 1
        self.page_size = page_size

    @property
    def filter(self) -> F:
        return self._filter

    @property
    def page(self) -> int:
        return self._page

    @property
    def items(self) -> list[T]:
        return list(self._items)

    def filtered(self) -> list[T]:
        return self._apply_filter(self._items, self._filter)

    def set_items(self, items: Sequence[T]) -> None:
        self._items = list(items)
        self._page = clamp_page(self._page, self.total_pages)

    def set_filter(self, new_filter: F) -> None:
        if new_filter != self._filter:
            self._filter = new_filter
            self._page = 1

    def set_page(self, page: int) -> int:
        self._page = clamp_page(page, self.total_pages)
        return self._page

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.filtered()), self.page_size)

    def current(self) -> Page[T]:
        return paginate(self.filtered(), self._page, self.page_size)
