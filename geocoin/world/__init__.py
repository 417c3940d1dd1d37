"""World grid for Geocoin: cells, coordinate math and deterministic luck."""

from .schemas import Cell, CellBounds, LatLng
from .board import Board
from .helpers import get_visible_cells, render_ascii_window
from .luck import (
    LuckFunction,
    luck,
    cell_key,
    coin_count_key,
    cell_spawns_cache,
)

__all__ = [
    "Cell",
    "CellBounds",
    "LatLng",
    "Board",
    "LuckFunction",
    "luck",
    "cell_key",
    "coin_count_key",
    "cell_spawns_cache",
    "get_visible_cells",
    "render_ascii_window",
]
