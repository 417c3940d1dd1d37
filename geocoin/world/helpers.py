"""Text rendering helpers for the neighbourhood around the player."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from .board import Board
from .schemas import Cell, LatLng

_DEFAULT_SYMBOLS: Dict[str, str] = {
    "player": "@ ",
    "cache": "$ ",
    "empty_cache": "o ",
    "player_on_cache": "@$",
    "ground": ". ",
}


def get_visible_cells(board: Board, center: LatLng, *, radius: Optional[int] = None) -> Dict[Cell, LatLng]:
    """Return visible cells around ``center`` mapped to their centre point."""

    return {cell: board.cell_center(cell) for cell in board.cells_near_point(center, radius)}


def render_ascii_window(
    board: Board,
    center: LatLng,
    cache_coins: Mapping[Cell, int],
    *,
    radius: Optional[int] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> str:
    """Render the cells around ``center`` as text, north at the top.

    ``cache_coins`` maps each cache cell to its number of available coins;
    caches with none left are drawn with the ``empty_cache`` symbol.
    """

    mapping = {**_DEFAULT_SYMBOLS}
    if symbols:
        mapping.update(symbols)

    if radius is None:
        radius = board.visibility_radius
    radius = max(int(radius), 0)

    player_cell = board.cell_for_point(center)
    lines: List[str] = []
    for di in range(radius, -radius - 1, -1):
        row: List[str] = []
        for dj in range(-radius, radius + 1):
            cell = board.canonical_cell(player_cell.i + di, player_cell.j + dj)
            coins = cache_coins.get(cell)
            if cell is player_cell:
                row.append(mapping["player"] if coins is None else mapping["player_on_cache"])
            elif coins is None:
                row.append(mapping["ground"])
            elif coins > 0:
                row.append(mapping["cache"])
            else:
                row.append(mapping["empty_cache"])
        lines.append("".join(row).rstrip())

    return "\n".join(lines)
