import asyncio

import pytest

from dolarvzla.services.board import SnapshotBoard


class ScriptedResolver:
    """Resolver returning (delay, snapshot) pairs in order."""

    def __init__(self, script):
        self.script = list(script)
        self.calls = 0

    async def resolve(self):
        delay, snapshot = self.script[min(self.calls, len(self.script) - 1)]
        self.calls += 1
        if delay:
            await asyncio.sleep(delay)
        return snapshot


@pytest.mark.asyncio
async def test_refresh_replaces_current(snapshot_factory):
    first = snapshot_factory(label="Fuente: DolarVzla")
    second = snapshot_factory(usd="37.00", label="Fuente: DolarApi")
    board = SnapshotBoard(ScriptedResolver([(0, first), (0, second)]))

    assert board.current is None
    assert await board.refresh() is first
    assert await board.refresh() is second
    assert board.current is second


@pytest.mark.asyncio
async def test_latest_resolves_only_when_empty(snapshot):
    resolver = ScriptedResolver([(0, snapshot)])
    board = SnapshotBoard(resolver)

    assert await board.latest() is snapshot
    assert await board.latest() is snapshot
    assert resolver.calls == 1


@pytest.mark.asyncio
async def test_overlapping_refreshes_last_finisher_wins(snapshot_factory):
    slow = snapshot_factory(label="slow")
    fast = snapshot_factory(label="fast")
    board = SnapshotBoard(ScriptedResolver([(0.05, slow), (0, fast)]))

    await asyncio.gather(board.refresh(), board.refresh())

    assert board.current is slow


@pytest.mark.asyncio
async def test_start_and_stop_loop(snapshot):
    resolver = ScriptedResolver([(0, snapshot)])
    board = SnapshotBoard(resolver, interval_sec=3600)

    board.start()
    board.start()  # second start is a no-op
    for _ in range(5):
        await asyncio.sleep(0)

    assert board.running
    assert resolver.calls == 1
    assert board.current is snapshot

    await board.stop()
    assert not board.running
    await board.stop()
