"""Grid model mapping geographic positions onto canonical cells.

The world is an infinite tiling of ``tile_degrees``-wide squares. Cells are
created lazily the first time a position falls into them and are then kept
in a canonical table for the rest of the session, so every lookup for the
same ``(i, j)`` hands back the very same ``Cell`` object.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

from .schemas import Cell, CellBounds, LatLng


class Board:
    """Canonical cell table plus coordinate math for one session.

    The table only grows for the lifetime of the board.
    """

    def __init__(self, tile_degrees: float, visibility_radius: int):
        if tile_degrees <= 0:
            raise ValueError("tile_degrees must be positive")
        self.tile_degrees = tile_degrees
        self.visibility_radius = max(int(visibility_radius), 0)
        # Maps (i, j) -> canonical Cell
        self._known_cells: Dict[Tuple[int, int], Cell] = {}

    @property
    def known_cell_count(self) -> int:
        """Number of cells observed so far."""

        return len(self._known_cells)

    def canonical_cell(self, i: int, j: int) -> Cell:
        """Return the canonical cell for ``(i, j)``, creating it on first use."""

        key = (i, j)
        cell = self._known_cells.get(key)
        if cell is None:
            cell = Cell(i=i, j=j)
            self._known_cells[key] = cell
        return cell

    def canonicalize(self, cell: Cell) -> Cell:
        """Swap an equal-valued cell (e.g. parsed from JSON) for the canonical one."""

        return self.canonical_cell(cell.i, cell.j)

    def cell_for_point(self, point: LatLng) -> Cell:
        """Return the cell containing ``point``."""

        i = math.floor(point.lat / self.tile_degrees)
        j = math.floor(point.lng / self.tile_degrees)
        return self.canonical_cell(i, j)

    def cell_bounds(self, cell: Cell) -> CellBounds:
        """Return the south-west / north-east corners of ``cell``."""

        south_west = LatLng(
            lat=cell.i * self.tile_degrees,
            lng=cell.j * self.tile_degrees,
        )
        north_east = LatLng(
            lat=(cell.i + 1) * self.tile_degrees,
            lng=(cell.j + 1) * self.tile_degrees,
        )
        return CellBounds(south_west=south_west, north_east=north_east)

    def cell_center(self, cell: Cell) -> LatLng:
        """Return the centre of ``cell``."""

        return LatLng(
            lat=(cell.i + 0.5) * self.tile_degrees,
            lng=(cell.j + 0.5) * self.tile_degrees,
        )

    def cells_near_point(self, point: LatLng, radius: Optional[int] = None) -> List[Cell]:
        """Return the ``(2r+1)^2`` cells around ``point`` in row-major order.

        Rows (``di``) ascend first, then columns (``dj``), so downstream
        iteration (spawn checks, cache materialization) is reproducible.
        ``radius`` defaults to the board's visibility radius.
        """

        if radius is None:
            radius = self.visibility_radius
        radius = max(int(radius), 0)

        origin = self.cell_for_point(point)
        cells: List[Cell] = []
        for di in range(-radius, radius + 1):
            for dj in range(-radius, radius + 1):
                cells.append(self.canonical_cell(origin.i + di, origin.j + dj))
        return cells
