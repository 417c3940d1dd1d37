"""Text-mode Geocoin walk demonstrating the session driver.

Runs a scripted walk by default, collecting one coin from every cache it
passes and dropping the oldest held coin into every third cache:

    uv run python examples/walk/run.py --walk nneesswwn

Interactive mode reads commands from stdin:

    uv run python examples/walk/run.py --interactive

Commands: n/s/e/w (move), look, caches, inv, collect <cache#> <coin#>,
deposit <cache#> <inv#>, reset, quit.

Environment variables (see geocoin.config):
- `GEOCOIN_STORAGE_PATH` (default `geocoin_state.json`)
- `GEOCOIN_NEIGHBORHOOD_SIZE`, `GEOCOIN_SPAWN_PROBABILITY`, ...
"""

from __future__ import annotations

import argparse
import asyncio
from typing import List

from geocoin import (
    GameSession,
    Geocache,
    JsonFileBlobStore,
    InMemoryBlobStore,
    NotFoundError,
    SessionEvent,
    render_ascii_window,
)
from geocoin.config import Config

STEP_KEYS = {"n": "north", "s": "south", "e": "east", "w": "west"}


def print_event(event: SessionEvent) -> None:
    if event.coin is not None:
        print(f"  ({event.event_type.value}: coin {event.coin.label} @ cache {event.cell})")


def draw(session: GameSession) -> None:
    counts = {cell: len(cache.available_coins) for cell, cache in session.active_caches.items()}
    print(render_ascii_window(session.board, session.position, counts))


def list_caches(caches: List[Geocache]) -> None:
    if not caches:
        print("No caches nearby.")
    for index, cache in enumerate(caches):
        coins = ", ".join(
            f"{n}:{coin.label}" for n, coin in enumerate(cache.available_coins)
        )
        print(f"[{index}] cache {cache.cell}: {coins or '(empty)'}")


def list_inventory(session: GameSession) -> None:
    if not len(session.inventory):
        print("Inventory is empty.")
    for index, coin in enumerate(session.inventory):
        print(f"[{index}] {coin.label}")


async def scripted_walk(session: GameSession, walk: str) -> None:
    passed = 0
    for step in walk:
        direction = STEP_KEYS.get(step.lower())
        if direction is None:
            print(f"Skipping unknown step {step!r}")
            continue
        caches = await session.move(direction)
        for cache in caches:
            passed += 1
            if passed % 3 == 0 and len(session.inventory):
                await session.deposit(cache.cell, session.inventory.coins[0])
            elif cache.available_coins:
                await session.collect(cache.cell, cache.available_coins[0])
    draw(session)
    print(f"Walked {len(session.path)} positions, holding {len(session.inventory)} coin(s).")


async def interactive(session: GameSession) -> None:
    caches = list(session.active_caches.values())
    draw(session)
    while True:
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        parts = line.strip().lower().split()
        if not parts:
            continue
        command, args = parts[0], parts[1:]
        try:
            if command in ("q", "quit", "exit"):
                break
            elif command in STEP_KEYS:
                caches = await session.move(STEP_KEYS[command])
                draw(session)
            elif command == "look":
                draw(session)
            elif command == "caches":
                list_caches(caches)
            elif command == "inv":
                list_inventory(session)
            elif command == "collect" and len(args) == 2:
                cache = caches[int(args[0])]
                await session.collect(cache.cell, cache.available_coins[int(args[1])])
            elif command == "deposit" and len(args) == 2:
                cache = caches[int(args[0])]
                await session.deposit(cache.cell, session.inventory.coins[int(args[1])])
            elif command == "reset":
                caches = await session.reset()
                draw(session)
            else:
                print("Unknown command.")
        except (IndexError, ValueError) as exc:
            print(f"Bad arguments: {exc}")
        except NotFoundError as exc:
            print(f"Nothing to do: {exc}")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Walk the Geocoin world in a terminal")
    parser.add_argument("--walk", default="nneesswwn", help="Scripted steps (n/s/e/w)")
    parser.add_argument("--interactive", action="store_true", help="Read commands from stdin")
    parser.add_argument("--radius", type=int, default=3, help="Visibility radius in cells")
    parser.add_argument("--memory", action="store_true", help="Do not write the state file")
    parser.add_argument("--verbose", action="store_true", help="Print session activity")
    args = parser.parse_args()

    Config.validate()
    store = InMemoryBlobStore() if args.memory else JsonFileBlobStore(Config.STORAGE_PATH)
    await store.initialize()

    session = GameSession(
        neighborhood_size=args.radius,
        store=store,
        listeners=[print_event],
        verbose=args.verbose,
    )
    await session.load()

    try:
        if args.interactive:
            await interactive(session)
        else:
            await scripted_walk(session, args.walk)
    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(main())
