"""Tests for the GameSession movement/visibility driver."""

import pytest

from geocoin import GameSession, InMemoryBlobStore, SessionEventType
from geocoin.errors import NotFoundError
from geocoin.geocache import serialize_geocache
from geocoin.schemas import Coin
from geocoin.world import LatLng


def pinned_luck(values, default=0.99):
    return lambda key: values.get(key, default)


# (0,0) and (5,5) spawn; (0,0) holds 3 coins, (5,5) holds 1.
SCENARIO_LUCK = pinned_luck({"0,0": 0.05, "0,0,coins": 0.25, "5,5": 0.05, "5,5,coins": 0.0})


def make_session(**overrides) -> GameSession:
    options = dict(
        tile_degrees=1e-4,
        neighborhood_size=0,
        spawn_probability=0.1,
        max_coins=10,
        start_position=LatLng(lat=0.00005, lng=0.00005),
        luck_fn=SCENARIO_LUCK,
        verbose=False,
    )
    options.update(overrides)
    return GameSession(**options)


def center_of(session: GameSession, i: int, j: int) -> LatLng:
    return session.board.cell_center(session.board.canonical_cell(i, j))


@pytest.mark.asyncio
async def test_spawn_collect_close_reopen():
    session = make_session()
    origin = session.board.canonical_cell(0, 0)

    caches = await session.move_to(center_of(session, 0, 0))
    assert [cache.cell for cache in caches] == [origin]
    assert serialize_geocache(caches[0]) == "0:0#0X0,0:0#1X0,0:0#2X0"

    held = await session.collect(origin, Coin(cell=origin, serial=1))
    assert held.is_collected is True
    assert session.inventory.coins == [Coin(cell=origin, serial=1)]

    # Walk away: the cache is put away into a momento
    await session.move_to(center_of(session, 5, 5))
    assert origin not in session.active_caches
    assert session.momentos.get(origin) == "0:0#0X0,0:0#2X0,0:0#1X1"

    # Come back: identical contents
    caches = await session.move_to(center_of(session, 0, 0))
    assert serialize_geocache(caches[0]) == "0:0#0X0,0:0#2X0,0:0#1X1"
    assert [c.is_collected for c in caches[0]] == [False, False, True]


@pytest.mark.asyncio
async def test_deposit_into_other_cache():
    session = make_session()
    origin = session.board.canonical_cell(0, 0)
    await session.move_to(center_of(session, 0, 0))
    coin = await session.collect(origin, Coin(cell=origin, serial=1))

    caches = await session.move_to(center_of(session, 5, 5))
    target = caches[0]
    deposited = await session.deposit(target.cell, coin)

    assert deposited.is_collected is False
    assert coin not in session.inventory
    assert serialize_geocache(target) == "5:5#0X0,0:0#1X0"


@pytest.mark.asyncio
async def test_transfer_errors_surface_and_leave_state_unchanged():
    session = make_session()
    origin = session.board.canonical_cell(0, 0)
    await session.move_to(center_of(session, 0, 0))
    await session.collect(origin, Coin(cell=origin, serial=1))

    with pytest.raises(NotFoundError):
        await session.collect(origin, Coin(cell=origin, serial=1))
    with pytest.raises(NotFoundError):
        await session.deposit(origin, Coin(cell=origin, serial=0))
    with pytest.raises(KeyError):
        await session.collect(session.board.canonical_cell(5, 5), Coin(cell=origin, serial=0))

    assert len(session.inventory) == 1
    assert serialize_geocache(session.get_cache(origin)) == "0:0#0X0,0:0#2X0,0:0#1X1"


@pytest.mark.asyncio
async def test_malformed_momento_regenerates_cache():
    session = make_session()
    origin = session.board.canonical_cell(0, 0)
    session.momentos.put(origin, "garbage")

    caches = await session.move_to(center_of(session, 0, 0))

    assert serialize_geocache(caches[0]) == "0:0#0X0,0:0#1X0,0:0#2X0"


@pytest.mark.asyncio
async def test_regenerated_cache_leaves_out_held_coins():
    session = make_session()
    origin = session.board.canonical_cell(0, 0)
    await session.move_to(center_of(session, 0, 0))
    await session.collect(origin, Coin(cell=origin, serial=1))
    await session.move_to(center_of(session, 5, 5))

    session.momentos.put(origin, "garbage")
    caches = await session.move_to(center_of(session, 0, 0))

    held = {coin.key for coin in session.inventory}
    assert held == {(0, 0, 1)}
    assert held.isdisjoint(coin.key for coin in caches[0].available_coins)
    assert serialize_geocache(caches[0]) == "0:0#0X0,0:0#2X0"


@pytest.mark.asyncio
async def test_regenerated_cache_leaves_out_coins_deposited_elsewhere():
    session = make_session()
    origin = session.board.canonical_cell(0, 0)
    await session.move_to(center_of(session, 0, 0))
    coin = await session.collect(origin, Coin(cell=origin, serial=1))
    caches = await session.move_to(center_of(session, 5, 5))
    await session.deposit(caches[0].cell, coin)
    await session.move_to(center_of(session, 9, 9))

    session.momentos.put(origin, "0:0#oops")
    caches = await session.move_to(center_of(session, 0, 0))

    assert len(session.inventory) == 0
    assert session.momentos.get(session.board.canonical_cell(5, 5)) == "5:5#0X0,0:0#1X0"
    assert serialize_geocache(caches[0]) == "0:0#0X0,0:0#2X0"


@pytest.mark.asyncio
async def test_path_records_every_position_in_order():
    session = make_session()
    first = center_of(session, 0, 0)
    await session.move_to(first)
    await session.move("north")
    await session.move("east")
    await session.move("south")
    await session.move_to(first)

    cells = [session.board.cell_for_point(p) for p in session.path]
    assert [(c.i, c.j) for c in cells] == [(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)]


@pytest.mark.asyncio
async def test_unknown_direction_rejected():
    session = make_session()
    with pytest.raises(ValueError):
        await session.move("up")


@pytest.mark.asyncio
async def test_spawning_cells_match_luck_with_real_hash():
    session = GameSession(
        tile_degrees=1e-4,
        neighborhood_size=8,
        spawn_probability=0.1,
        start_position=LatLng(lat=36.98949379578401, lng=-122.06277128548504),
        verbose=False,
    )
    caches = await session.move_to(session.start_position)
    again = make_session(
        neighborhood_size=8,
        luck_fn=session.luck_fn,
        start_position=session.start_position,
    )
    caches_again = await again.move_to(again.start_position)

    assert [c.cell.key for c in caches] == [c.cell.key for c in caches_again]
    assert [serialize_geocache(c) for c in caches] == [serialize_geocache(c) for c in caches_again]
    assert len(session.board.cells_near_point(session.position)) == 17 * 17


@pytest.mark.asyncio
async def test_listeners_receive_events():
    events = []
    session = make_session(listeners=[events.append])
    origin = session.board.canonical_cell(0, 0)

    await session.move_to(center_of(session, 0, 0))
    await session.collect(origin, Coin(cell=origin, serial=0))
    await session.move_to(center_of(session, 5, 5))

    kinds = [event.event_type for event in events]
    assert kinds == [
        SessionEventType.CACHE_OPENED,
        SessionEventType.MOVED,
        SessionEventType.COIN_COLLECTED,
        SessionEventType.CACHE_CLOSED,
        SessionEventType.CACHE_OPENED,
        SessionEventType.MOVED,
    ]
    collected = events[2]
    assert collected.cell == origin
    assert collected.coin == Coin(cell=origin, serial=0)
    assert set(collected.model_dump()) == {"event_type", "position", "cell", "coin"}


@pytest.mark.asyncio
async def test_reset_returns_to_fresh_session():
    store = InMemoryBlobStore()
    session = make_session(store=store)
    origin = session.board.canonical_cell(0, 0)
    await session.load()
    await session.collect(origin, Coin(cell=origin, serial=2))
    await session.move_to(center_of(session, 5, 5))

    caches = await session.reset()

    assert len(session.inventory) == 0
    assert len(session.momentos) == 0
    assert session.path == [session.start_position]
    assert serialize_geocache(caches[0]) == "0:0#0X0,0:0#1X0,0:0#2X0"
    assert '"lat"' in store.data["geocoin_player_location"]
    assert store.data["geocoin_inventory"] == "[]"
