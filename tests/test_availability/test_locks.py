"""Tests for the per-property lock registry."""

import asyncio

from app.availability.locks import PropertyLockRegistry


class TestPropertyLockRegistry:
    async def test_same_key_is_serialised(self):
        locks = PropertyLockRegistry()
        events: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold("prop-1"):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert events == ["a-in", "a-out", "b-in", "b-out"]

    async def test_different_keys_do_not_contend(self):
        locks = PropertyLockRegistry()
        async with locks.hold("prop-1"):
            assert locks.is_locked("prop-1")

            async def other() -> str:
                async with locks.hold("prop-2"):
                    return "done"

            assert await asyncio.wait_for(other(), timeout=1) == "done"

    async def test_entries_are_dropped_when_released(self):
        locks = PropertyLockRegistry()
        async with locks.hold("prop-1"):
            assert len(locks) == 1
        assert len(locks) == 0
        assert not locks.is_locked("prop-1")

    async def test_lock_released_on_error(self):
        locks = PropertyLockRegistry()
        try:
            async with locks.hold("prop-1"):
                raise ValueError("boom")
        except ValueError:
            pass
        assert len(locks) == 0

        async with locks.hold("prop-1"):
            assert locks.is_locked("prop-1")
