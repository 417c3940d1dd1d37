"""Deterministic randomness source for procedural world generation.

``luck`` maps any string key to a reproducible float in ``[0, 1)``. It keeps
no state, so the answer for a key never depends on call order: the same cell
always spawns (or doesn't spawn) a cache, and always starts with the same
number of coins.
"""

from __future__ import annotations

import hashlib
from typing import Callable

from .schemas import Cell

LuckFunction = Callable[[str], float]

# 53 bits keeps the quotient strictly below 1.0 as a float
_SCALE = float(1 << 53)


def luck(key: str) -> float:
    """Return a uniform-ish value in ``[0, 1)`` derived from SHA-256 of ``key``."""

    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return (int.from_bytes(digest[:8], "big") >> 11) / _SCALE


def cell_key(cell: Cell) -> str:
    """Key deciding whether ``cell`` hosts a cache."""

    return cell.key


def coin_count_key(cell: Cell) -> str:
    """Key deciding how many coins a fresh cache in ``cell`` holds."""

    return f"{cell.key},coins"


def cell_spawns_cache(cell: Cell, spawn_probability: float, luck_fn: LuckFunction = luck) -> bool:
    """True if ``cell`` hosts a cache: ``luck("i,j") < spawn_probability``."""

    return luck_fn(cell_key(cell)) < spawn_probability
