"""
Holder for the latest MarketSnapshot plus the periodic refresh loop.

Refreshes triggered by the timer and by users may overlap; nothing is
cancelled and whichever run finishes last becomes `current`.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..models import MarketSnapshot
from ..settings import settings
from .resolution import RateResolver, build_resolver

logger = logging.getLogger(__name__)


class SnapshotBoard:
    def __init__(self, resolver: RateResolver, interval_sec: int = 300):
        self.resolver = resolver
        self.interval_sec = interval_sec
        self.current: Optional[MarketSnapshot] = None
        self._task: Optional[asyncio.Task] = None

    async def refresh(self) -> MarketSnapshot:
        snapshot = await self.resolver.resolve()
        self.current = snapshot
        return snapshot

    async def latest(self) -> MarketSnapshot:
        if self.current is None:
            return await self.refresh()
        return self.current

    async def _loop(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self.interval_sec)

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        logger.info(f"snapshot refresh every {self.interval_sec}s")
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()


# Global board instance
board = SnapshotBoard(build_resolver(settings), settings.REFRESH_INTERVAL_SEC)


def get_board() -> SnapshotBoard:
    return board
