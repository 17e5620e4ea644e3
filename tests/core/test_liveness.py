"""Tests for discarding results that arrive after a view is closed."""

import asyncio

import pytest

from coursesphere.core.exceptions import ViewClosed
from coursesphere.core.liveness import ViewScope


async def _value(value, delay=0):
    await asyncio.sleep(delay)
    return value


class TestViewScope:
    def test_apply_while_alive(self):
        """Results reach the view while it is alive."""
        scope = ViewScope("test")
        seen = []

        applied = asyncio.run(scope.apply(_value(42), seen.append))

        assert applied is True
        assert seen == [42]

    def test_result_discarded_when_closed_during_request(self):
        """A result arriving after close is dropped."""
        scope = ViewScope("test")
        seen = []

        async def scenario():
            task = asyncio.create_task(scope.apply(_value(42, delay=0.01), seen.append))
            await asyncio.sleep(0)
            scope.close()
            return await task

        applied = asyncio.run(scenario())

        assert applied is False
        assert seen == []

    def test_run_raises_when_already_closed(self):
        """Running on a closed scope raises ViewClosed."""
        scope = ViewScope("test")
        scope.close()

        with pytest.raises(ViewClosed):
            asyncio.run(scope.run(_value(1)))

    def test_context_manager_closes(self):
        """Leaving the with block closes the scope."""
        with ViewScope("test") as scope:
            assert scope.alive

        assert not scope.alive
