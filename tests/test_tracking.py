"""Tests for feeding an external position source into a session."""

import asyncio

import pytest

from geocoin import GameSession, PositionTracker
from geocoin.world import LatLng


def make_session() -> GameSession:
    return GameSession(
        tile_degrees=1e-4,
        neighborhood_size=1,
        spawn_probability=0.1,
        start_position=LatLng(lat=0.00005, lng=0.00005),
        verbose=False,
    )


@pytest.mark.asyncio
async def test_tracker_applies_positions_in_order():
    session = make_session()
    positions = [LatLng(lat=0.00005 + n * 1e-4, lng=0.00005) for n in range(3)]

    async def source():
        for position in positions:
            yield position

    tracker = PositionTracker(session, source())
    tracker.start()
    await tracker.wait()

    assert tracker.positions_applied == 3
    assert session.path == positions
    assert session.position == positions[-1]
    assert tracker.running is False


@pytest.mark.asyncio
async def test_stop_cancels_subscription():
    session = make_session()
    never = asyncio.Event()

    async def source():
        yield LatLng(lat=0.00005, lng=0.00005)
        await never.wait()
        yield LatLng(lat=1.0, lng=1.0)  # pragma: no cover - never reached

    tracker = PositionTracker(session, source())
    tracker.start()
    for _ in range(100):
        if tracker.positions_applied:
            break
        await asyncio.sleep(0)

    assert tracker.running is True
    await tracker.stop()

    assert tracker.running is False
    assert tracker.positions_applied == 1
    assert len(session.path) == 1


@pytest.mark.asyncio
async def test_start_twice_rejected():
    session = make_session()
    never = asyncio.Event()

    async def source():
        await never.wait()
        yield LatLng(lat=0.0, lng=0.0)  # pragma: no cover - never reached

    tracker = PositionTracker(session, source())
    tracker.start()
    with pytest.raises(RuntimeError):
        tracker.start()
    await tracker.stop()
