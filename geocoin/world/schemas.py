"""Pydantic schemas for the world grid.

``Cell`` is frozen so canonical instances can key dictionaries (the momento
store, the board's active cache map) and survive JSON round trips through the
persisted inventory.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LatLng(BaseModel):
    """A geographic position in degrees."""

    lat: float = Field(..., description="Latitude in degrees")
    lng: float = Field(..., description="Longitude in degrees")

    def offset(self, d_lat: float, d_lng: float) -> "LatLng":
        """Return a new position shifted by the given deltas."""

        return LatLng(lat=self.lat + d_lat, lng=self.lng + d_lng)


class Cell(BaseModel):
    """Discrete grid coordinate (row ``i``, column ``j``) of one tile."""

    model_config = ConfigDict(frozen=True)

    i: int = Field(..., description="Row index: floor(lat / tile_degrees)")
    j: int = Field(..., description="Column index: floor(lng / tile_degrees)")

    @property
    def key(self) -> str:
        """Hash key used by the luck function ("i,j")."""

        return f"{self.i},{self.j}"

    def __str__(self) -> str:
        return f"({self.i}, {self.j})"


class CellBounds(BaseModel):
    """Geographic rectangle covered by a cell."""

    south_west: LatLng
    north_east: LatLng

    def contains(self, position: LatLng) -> bool:
        """True if ``position`` lies inside (south/west edges inclusive)."""

        return (
            self.south_west.lat <= position.lat < self.north_east.lat
            and self.south_west.lng <= position.lng < self.north_east.lng
        )
