"""Guard state updates against views that were torn down mid-request."""

from __future__ import annotations

from typing import Awaitable, Callable, Optional, TypeVar

from coursesphere.core.exceptions import ViewClosed
from coursesphere.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ViewScope:
    """Liveness flag for a view.

    Results that arrive after ``close()`` are discarded instead of being
    applied to stale state.
    """

    def __init__(self, name: str = "view"):
        self.name = name
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def close(self) -> None:
        self._alive = False

    def __enter__(self) -> "ViewScope":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await and return the result, raising ``ViewClosed`` if the view died meanwhile."""
        if not self._alive:
            # Nothing to wait for: close the coroutine instead of leaking it.
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            raise ViewClosed(f"{self.name} is closed")
        result = await awaitable
        if not self._alive:
            logger.info("discarding result for closed view", view=self.name)
            raise ViewClosed(f"{self.name} closed before the result arrived")
        return result

    async def apply(self, awaitable: Awaitable[T], on_result: Callable[[T], None]) -> bool:
        """Await and hand the result to ``on_result`` only while the view is alive."""
        try:
            result = await self.run(awaitable)
        except ViewClosed:
            return False
        on_result(result)
        return True


def ensure_scope(scope: Optional[ViewScope], name: str) -> ViewScope:
    return scope if scope is not None else ViewScope(name)
