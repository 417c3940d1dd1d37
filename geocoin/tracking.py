"""Position tracking: feed an external geolocation watch into a session.

The position source is any async iterator of ``LatLng`` (a GPS watch, a
replayed track, a test generator). Positions are applied one at a time; the
session's reaction to each one finishes before the next is read. Stopping the
tracker cancels only the subscription.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import AsyncIterator, Optional

from .logging_utils import log_error, log_session
from .session import GameSession
from .world import LatLng


class PositionTracker:
    """Runs a background task moving ``session`` to every delivered position."""

    def __init__(self, session: GameSession, source: AsyncIterator[LatLng]):
        self.session = session
        self.source = source
        self.positions_applied = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Begin tracking. Must be called from a running event loop."""
        if self.running:
            raise RuntimeError("Position tracking is already running")
        self._task = asyncio.create_task(self._follow())
        return self._task

    async def stop(self) -> None:
        """Cancel tracking and wait for the subscription to wind down."""
        task = self._task
        if task is None:
            return
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._task = None

    async def wait(self) -> None:
        """Wait until the source is exhausted (or tracking is stopped)."""
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def _follow(self) -> None:
        try:
            async for position in self.source:
                await self.session.move_to(position)
                self.positions_applied += 1
        except asyncio.CancelledError:
            if self.session.verbose:
                log_session(f"  Stopped after {self.positions_applied} position(s)", scope="Tracking")
            raise
        except Exception as exc:
            log_error(f"Position source failed: {exc}", scope="Tracking")
            raise
