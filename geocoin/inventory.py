"""
Player inventory and the coin transfer protocol.

The inventory is the only place a coin lives outside a cache. The two transfer
functions below are the only way coins move between the two, which keeps the
exclusive-ownership rule: at any moment a coin is available in exactly one
cache or held in the inventory, never both and never neither.

Usage:
    coin = collect_into_inventory(cache, cache.available_coins[0], inventory)
    deposit_from_inventory(coin, inventory, other_cache)
"""

from __future__ import annotations

import json
from typing import Iterator, List, Optional

from pydantic import TypeAdapter

from .errors import NotFoundError
from .geocache import Geocache
from .schemas import Coin
from .world import Board

_COIN_LIST = TypeAdapter(List[Coin])


class Inventory:
    """Ordered list of coins held by the player."""

    def __init__(self, coins: Optional[List[Coin]] = None):
        self._coins: List[Coin] = list(coins or [])

    def __len__(self) -> int:
        return len(self._coins)

    def __iter__(self) -> Iterator[Coin]:
        return iter(self._coins)

    def __contains__(self, coin: object) -> bool:
        return isinstance(coin, Coin) and any(held.key == coin.key for held in self._coins)

    @property
    def coins(self) -> List[Coin]:
        """Snapshot of held coins in pickup order."""
        return list(self._coins)

    def add(self, coin: Coin) -> None:
        if coin in self:
            raise ValueError(f"Coin {coin.label} is already in the inventory")
        self._coins.append(coin)

    def remove(self, coin: Coin) -> Coin:
        """Remove and return the held coin with ``coin``'s key.

        Raises:
            NotFoundError: If the inventory does not hold it.
        """
        for index, held in enumerate(self._coins):
            if held.key == coin.key:
                return self._coins.pop(index)
        raise NotFoundError(coin_label=coin.label, container="inventory")

    def clear(self) -> None:
        self._coins.clear()

    def to_json(self) -> str:
        """Serialize as ``[{"cell": {"i", "j"}, "serial", "isCollected"}, ...]``."""
        payload = [coin.model_dump(mode="json", by_alias=True) for coin in self._coins]
        return json.dumps(payload)

    @classmethod
    def from_json(cls, text: str, board: Optional[Board] = None) -> "Inventory":
        """Parse a persisted inventory, canonicalizing cells through ``board``.

        Raises:
            pydantic.ValidationError: If the payload is not a list of coins.
        """
        coins = _COIN_LIST.validate_json(text)
        if board is not None:
            coins = [
                coin.model_copy(update={"cell": board.canonicalize(coin.cell)})
                for coin in coins
            ]
        return cls(coins)


def collect_into_inventory(geocache: Geocache, coin: Coin, inventory: Inventory) -> Coin:
    """Collect ``coin`` from ``geocache`` and add it to ``inventory``.

    The cache keeps a collected marker; the inventory receives its own copy so
    later deposits never touch the marker.

    Raises:
        NotFoundError: If the coin is not available in the cache (double collect).
            Neither the cache nor the inventory changes.
    """

    if coin not in geocache:
        raise NotFoundError(coin_label=coin.label, container=f"cache {geocache.cell}")
    if coin in inventory:
        raise ValueError(f"Coin {coin.label} is already in the inventory")

    listed = geocache.collect(coin)
    held = listed.model_copy()
    inventory.add(held)
    return held


def deposit_from_inventory(coin: Coin, inventory: Inventory, geocache: Geocache) -> Coin:
    """Move ``coin`` from ``inventory`` into ``geocache`` as uncollected.

    Raises:
        NotFoundError: If the inventory does not hold the coin (double deposit).
            Neither the cache nor the inventory changes.
    """

    if coin not in inventory:
        raise NotFoundError(coin_label=coin.label, container="inventory")
    if coin in geocache:
        raise ValueError(f"Coin {coin.label} is already available in cache {geocache.cell}")

    held = inventory.remove(coin)
    return geocache.deposit(held)
