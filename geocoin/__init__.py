"""
Geocoin - location-based coin collecting on a lazily generated world grid.

Caches of coins appear deterministically near the player based on a hash of
grid-cell coordinates. Cells and caches exist only once observed, and cache
state survives eviction through compact "momento" strings.

No global game state. No storage backend required.
All dependencies injected by the caller.
"""

__version__ = "0.1.0"

# Main session driver
from .session import GameSession, DIRECTIONS
from .tracking import PositionTracker

# Core engine
from .geocache import (
    Geocache,
    generate_geocache,
    restore_geocache,
    serialize_geocache,
    parse_momento,
)
from .momento import MomentoStore
from .inventory import Inventory, collect_into_inventory, deposit_from_inventory

# Persistence interfaces
from .persistence import (
    BlobStore,
    InMemoryBlobStore,
    JsonFileBlobStore,
    SessionStorage,
)

# Errors
from .errors import (
    GeocoinError,
    NotFoundError,
    MalformedSnapshotError,
    StorageUnavailableError,
)

# World grid
from .world import (
    Board,
    Cell,
    CellBounds,
    LatLng,
    luck,
    cell_spawns_cache,
    render_ascii_window,
)

# Core schemas
from .schemas import Coin, SessionEvent, SessionEventType

__all__ = [
    # Main classes
    "GameSession",
    "PositionTracker",
    "DIRECTIONS",
    # Engine
    "Geocache",
    "generate_geocache",
    "restore_geocache",
    "serialize_geocache",
    "parse_momento",
    "MomentoStore",
    "Inventory",
    "collect_into_inventory",
    "deposit_from_inventory",
    # Persistence
    "BlobStore",
    "InMemoryBlobStore",
    "JsonFileBlobStore",
    "SessionStorage",
    # Errors
    "GeocoinError",
    "NotFoundError",
    "MalformedSnapshotError",
    "StorageUnavailableError",
    # World
    "Board",
    "Cell",
    "CellBounds",
    "LatLng",
    "luck",
    "cell_spawns_cache",
    "render_ascii_window",
    # Schemas
    "Coin",
    "SessionEvent",
    "SessionEventType",
]
