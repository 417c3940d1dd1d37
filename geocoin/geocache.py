"""
Geocache engine: coin generation, collect/deposit transitions and momentos.

A geocache is the mutable coin list of one cell. It only exists in memory
while the player is nearby. When the player walks away the cache is put away
as a momento string and rebuilt from it on return, so the momento format must
round-trip exactly.

Momento format:
    records joined by ","; each record is "<i>:<j>#<serial>X<flag>"
    - <i>, <j>: origin cell of the coin (may differ from the cache's cell for
      deposited coins)
    - <serial>: non-negative integer
    - <flag>: "1" collected, "0" uncollected
    The empty coin list serializes to the empty string.

Per-coin lifecycle inside one visit:
    Listed(uncollected) --collect--> Listed(collected, moved to end of list)
    --deposit (same or another cache)--> Listed(uncollected)
Collected entries stay listed as markers until the cache is put away; they are
carried in the momento so a reopened cache shows exactly what the player left.
"""

from __future__ import annotations

import math
import re
from typing import Iterator, List, Optional

from .errors import MalformedSnapshotError, NotFoundError
from .schemas import Coin
from .world import Board, Cell, LuckFunction, coin_count_key, luck

RECORD_SEPARATOR = ","
_RECORD_PATTERN = re.compile(r"^(-?\d+):(-?\d+)#(\d+)X([01])$")


class Geocache:
    """Ordered coin list for one cell."""

    def __init__(self, cell: Cell, coins: Optional[List[Coin]] = None):
        self.cell = cell
        self.coins: List[Coin] = list(coins or [])

    def __len__(self) -> int:
        return len(self.coins)

    def __iter__(self) -> Iterator[Coin]:
        return iter(self.coins)

    def __contains__(self, coin: object) -> bool:
        """Membership means listed *and* still available to collect."""

        if not isinstance(coin, Coin):
            return False
        found = self.find(coin)
        return found is not None and not found.is_collected

    def __repr__(self) -> str:
        return f"Geocache(cell={self.cell}, coins={serialize_geocache(self)!r})"

    @property
    def available_coins(self) -> List[Coin]:
        """Coins that can still be collected, in list order."""

        return [coin for coin in self.coins if not coin.is_collected]

    def find(self, coin: Coin) -> Optional[Coin]:
        """Return the listed coin with the same key as ``coin`` (any flag)."""

        for listed in self.coins:
            if listed.key == coin.key:
                return listed
        return None

    def collect(self, coin: Coin) -> Coin:
        """Mark ``coin`` collected and move it behind the available coins.

        Raises:
            NotFoundError: If no uncollected coin with this key is listed
                (never listed, or already collected).
        """

        listed = self.find(coin)
        if listed is None or listed.is_collected:
            raise NotFoundError(coin_label=coin.label, container=f"cache {self.cell}")

        self.coins.remove(listed)
        listed.is_collected = True
        self.coins.append(listed)
        return listed

    def deposit(self, coin: Coin) -> Coin:
        """Append ``coin`` as uncollected, replacing its collected marker if listed."""

        marker = self.find(coin)
        if marker is not None:
            # A coin with this key can only be listed here as a collected marker;
            # an available duplicate would mean the caller held a coin twice.
            if not marker.is_collected:
                raise ValueError(f"Coin {coin.label} is already available in cache {self.cell}")
            self.coins.remove(marker)

        coin.is_collected = False
        self.coins.append(coin)
        return coin


def generate_geocache(
    cell: Cell,
    *,
    luck_fn: LuckFunction = luck,
    max_coins: int = 10,
) -> Geocache:
    """Mint a fresh cache for ``cell``.

    The coin count ``floor(luck("i,j,coins") * max_coins) + 1`` depends only on
    the cell, so two materializations of an unvisited cell always agree.
    """

    count = math.floor(luck_fn(coin_count_key(cell)) * max_coins) + 1
    coins = [Coin(cell=cell, serial=serial) for serial in range(count)]
    return Geocache(cell, coins)


def serialize_geocache(geocache: Geocache) -> str:
    """Encode the cache's coin list as a momento string."""

    return RECORD_SEPARATOR.join(_format_record(coin) for coin in geocache.coins)


def parse_momento(snapshot: str, board: Optional[Board] = None) -> List[Coin]:
    """Decode a momento string into coins.

    Cells are swapped for the board's canonical instances when ``board`` is
    given.

    Raises:
        MalformedSnapshotError: On any record that does not match the format,
            or when the same coin appears twice.
    """

    if not isinstance(snapshot, str):
        raise MalformedSnapshotError(snapshot=repr(snapshot), reason="snapshot is not a string")
    if snapshot == "":
        return []

    coins: List[Coin] = []
    seen = set()
    for record in snapshot.split(RECORD_SEPARATOR):
        match = _RECORD_PATTERN.match(record)
        if match is None:
            raise MalformedSnapshotError(
                snapshot=snapshot,
                record=record,
                reason="expected '<i>:<j>#<serial>X<0|1>'",
            )

        i, j, serial = int(match.group(1)), int(match.group(2)), int(match.group(3))
        if board is not None:
            cell = board.canonical_cell(i, j)
        else:
            cell = Cell(i=i, j=j)

        coin = Coin(cell=cell, serial=serial, is_collected=match.group(4) == "1")
        if coin.key in seen:
            raise MalformedSnapshotError(snapshot=snapshot, record=record, reason="duplicate coin")
        seen.add(coin.key)
        coins.append(coin)

    # Canonical formatting check: "-0" or "007" would parse but not re-serialize
    # to the same string.
    if RECORD_SEPARATOR.join(_format_record(coin) for coin in coins) != snapshot:
        raise MalformedSnapshotError(snapshot=snapshot, reason="non-canonical number formatting")

    return coins


def restore_geocache(cell: Cell, snapshot: str, board: Optional[Board] = None) -> Geocache:
    """Rebuild the cache for ``cell`` from its momento.

    Raises:
        MalformedSnapshotError: If ``snapshot`` cannot be parsed.
    """

    return Geocache(cell, parse_momento(snapshot, board))


def _format_record(coin: Coin) -> str:
    flag = "1" if coin.is_collected else "0"
    return f"{coin.cell.i}:{coin.cell.j}#{coin.serial}X{flag}"
