"""
Pydantic schemas for Geocoin game state.

Design Philosophy:
- Value types (``Coin``, ``LatLng``, ``Cell``) are pydantic models so persisted
  session state validates on the way back in
- Coin identity is the composite key (origin cell, serial); the collected flag
  is state, not identity
- JSON field names match the persisted inventory format (``isCollected``)
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from geocoin.world import Cell, LatLng


# ============================================================================
# Coins
# ============================================================================

CoinKey = Tuple[int, int, int]


class Coin(BaseModel):
    """A collectible coin minted in ``cell`` with a per-cell ``serial``.

    Equality and hashing use only ``(cell.i, cell.j, serial)``; those fields are
    frozen, only the collected flag changes over a coin's life. Lists of coins
    are searched by this key, never by position, so a coin can be removed from
    an inventory or a cache regardless of where it sits.
    """

    model_config = ConfigDict(populate_by_name=True)

    cell: Cell = Field(..., frozen=True, description="Cell where the coin was generated")
    serial: int = Field(..., ge=0, frozen=True, description="Serial unique within the cell's batch")
    is_collected: bool = Field(
        False,
        alias="isCollected",
        description="True once picked up from the cache it was listed in",
    )

    @property
    def key(self) -> CoinKey:
        return (self.cell.i, self.cell.j, self.serial)

    @property
    def label(self) -> str:
        """Human readable identity, e.g. ``369894:-1220628#3``."""

        return f"{self.cell.i}:{self.cell.j}#{self.serial}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coin):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


# ============================================================================
# Session events (consumed by rendering adapters)
# ============================================================================


class SessionEventType(str, Enum):
    MOVED = "moved"
    CACHE_OPENED = "cache_opened"
    CACHE_CLOSED = "cache_closed"
    COIN_COLLECTED = "coin_collected"
    COIN_DEPOSITED = "coin_deposited"
    RESET = "reset"


class SessionEvent(BaseModel):
    """Notification sent to session listeners after a state change.

    Adapters (map markers, popups, inventory panels) rebuild their widgets from
    these events; the core never holds references to UI elements.
    """

    event_type: SessionEventType
    position: Optional[LatLng] = Field(None, description="Player position after the change")
    cell: Optional[Cell] = Field(None, description="Cache cell involved, if any")
    coin: Optional[Coin] = Field(None, description="Coin involved, if any")
