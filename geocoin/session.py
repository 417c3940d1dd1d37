"""
Game session: the movement/visibility driver.

Owns every piece of mutable state for one player (board, momento store,
inventory, position, travelled path, active caches) and is passed around
explicitly. There is no module-level game state.

Coordinates one position update:
1. Record the position in the travelled path
2. Ask the board for the cells around the player
3. Keep the cells whose luck roll spawns a cache
4. Put away caches that are no longer nearby (serialize into momentos)
5. Materialize newly visible caches (restore from momento or generate fresh)
6. Persist position + inventory + momentos via the injected blob store
7. Notify listeners (rendering adapters)
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Set

from .config import Config
from .errors import MalformedSnapshotError, NotFoundError, StorageUnavailableError
from .geocache import (
    Geocache,
    generate_geocache,
    parse_momento,
    restore_geocache,
    serialize_geocache,
)
from .inventory import Inventory, collect_into_inventory, deposit_from_inventory
from .logging_utils import log_error, log_player, log_session, log_storage, log_world
from .momento import MomentoStore
from .persistence import BlobStore, SessionStorage
from .schemas import Coin, CoinKey, SessionEvent, SessionEventType
from .world import Board, Cell, LatLng, LuckFunction, cell_spawns_cache, luck

SessionListener = Callable[[SessionEvent], None]

# Step directions in (rows, columns) of tiles; rows grow northwards.
DIRECTIONS: Dict[str, tuple[int, int]] = {
    "north": (1, 0),
    "south": (-1, 0),
    "east": (0, 1),
    "west": (0, -1),
}


class GameSession:
    """
    One player's game state plus the operations that change it.

    Every dependency is injectable. Values left as None fall back to Config.
    Persistence is optional: without a store, or after the store fails, the
    session keeps running in memory.
    """

    def __init__(
        self,
        *,
        tile_degrees: Optional[float] = None,
        neighborhood_size: Optional[int] = None,
        spawn_probability: Optional[float] = None,
        max_coins: Optional[int] = None,
        start_position: Optional[LatLng] = None,
        store: Optional[BlobStore] = None,
        luck_fn: LuckFunction = luck,
        listeners: Optional[List[SessionListener]] = None,
        verbose: Optional[bool] = None,
    ):
        """Initialize a fresh session.

        Args:
            tile_degrees: Tile width in degrees (Config.TILE_DEGREES)
            neighborhood_size: Visibility radius in cells (Config.NEIGHBORHOOD_SIZE)
            spawn_probability: Chance a cell hosts a cache (Config.CACHE_SPAWN_PROBABILITY)
            max_coins: Upper bound on coins in a fresh cache (Config.MAX_COINS_PER_CACHE)
            start_position: Where a fresh session begins (Config.START_LAT/START_LNG)
            store: Blob store for position/inventory/momentos; None = memory only
            luck_fn: Deterministic hash used for spawn and coin count decisions
            listeners: Callables receiving a SessionEvent after each change
            verbose: Print session activity (GEOCOIN_VERBOSE)
        """
        self.board = Board(
            tile_degrees if tile_degrees is not None else Config.TILE_DEGREES,
            neighborhood_size if neighborhood_size is not None else Config.NEIGHBORHOOD_SIZE,
        )
        self.spawn_probability = (
            spawn_probability if spawn_probability is not None else Config.CACHE_SPAWN_PROBABILITY
        )
        self.max_coins = max_coins if max_coins is not None else Config.MAX_COINS_PER_CACHE
        self.start_position = start_position or LatLng(lat=Config.START_LAT, lng=Config.START_LNG)
        self.luck_fn = luck_fn

        self.momentos = MomentoStore()
        self.inventory = Inventory()
        self.position: LatLng = self.start_position
        self.path: List[LatLng] = []
        self.active_caches: Dict[Cell, Geocache] = {}

        self.storage = SessionStorage(store) if store is not None else None
        self.storage_enabled = store is not None
        self.listeners: List[SessionListener] = list(listeners or [])

        if verbose is None:
            verbose = Config.VERBOSE
        self.verbose = verbose

    # ------------------------------------------------------------------
    # World queries
    # ------------------------------------------------------------------

    def spawns(self, cell: Cell) -> bool:
        """True if ``cell`` hosts a cache."""
        return cell_spawns_cache(cell, self.spawn_probability, self.luck_fn)

    def spawning_cells(self, position: Optional[LatLng] = None) -> List[Cell]:
        """Cells around ``position`` (default: player) hosting a cache, row-major."""
        target = position if position is not None else self.position
        return [cell for cell in self.board.cells_near_point(target) if self.spawns(cell)]

    def get_cache(self, cell: Cell) -> Geocache:
        """Return the active cache for ``cell``.

        Raises:
            KeyError: If the cache is not materialized (not near the player).
        """
        cache = self.active_caches.get(self.board.canonicalize(cell))
        if cache is None:
            raise KeyError(f"No active cache at cell {cell}")
        return cache

    # ------------------------------------------------------------------
    # Cache lifecycle
    # ------------------------------------------------------------------

    def open_cache(self, cell: Cell) -> Geocache:
        """Materialize the cache for ``cell`` (no-op if already active).

        Restores from the momento store when the cell was visited before. A
        corrupt momento is logged and replaced by a freshly generated cache so
        one bad snapshot never blocks the rest of the world.
        """
        cell = self.board.canonicalize(cell)
        cache = self.active_caches.get(cell)
        if cache is not None:
            return cache

        snapshot = self.momentos.get(cell)
        if snapshot is None:
            cache = self._generate(cell)
        else:
            try:
                cache = restore_geocache(cell, snapshot, self.board)
                self._log(log_world, f"Restored cache {cell} from momento")
            except MalformedSnapshotError as exc:
                log_error(f"{exc}; regenerating cache {cell}", scope="World")
                cache = self._generate(cell)

        self.active_caches[cell] = cache
        self._emit(SessionEventType.CACHE_OPENED, cell=cell)
        return cache

    def _generate(self, cell: Cell) -> Geocache:
        """Mint a fresh cache for ``cell`` without coins someone already owns.

        A fresh cache normally only happens on a first visit. When a momento
        was lost, the player may still hold coins minted here, or have left
        them in another cache; those stay where they are.
        """
        cache = generate_geocache(cell, luck_fn=self.luck_fn, max_coins=self.max_coins)
        owned = self._owned_coin_keys(cell)
        minted = len(cache.coins)
        cache.coins = [coin for coin in cache.coins if coin.key not in owned]
        if len(cache.coins) < minted:
            log_error(
                f"Skipped {minted - len(cache.coins)} coin(s) of cache {cell} already held elsewhere",
                scope="World",
            )
        self._log(log_world, f"Generated cache {cell} with {len(cache)} coins")
        return cache

    def _owned_coin_keys(self, cell: Cell) -> Set[CoinKey]:
        """Keys of coins minted in ``cell`` that are held outside its own cache."""
        keys = {coin.key for coin in self.inventory.coins if coin.cell == cell}
        for other, cache in self.active_caches.items():
            if other != cell:
                keys.update(coin.key for coin in cache.available_coins if coin.cell == cell)

        needle = f"{cell.i}:{cell.j}#"
        for other in self.momentos:
            if other == cell or other in self.active_caches:
                continue
            snapshot = self.momentos.get(other)
            if snapshot is None or needle not in snapshot:
                continue
            try:
                coins = parse_momento(snapshot)
            except MalformedSnapshotError:
                continue
            keys.update(
                coin.key for coin in coins if coin.cell == cell and not coin.is_collected
            )
        return keys

    def close_cache(self, cell: Cell) -> Optional[str]:
        """Put away the active cache for ``cell``.

        Returns:
            The momento written to the store, or None if the cache was not active.
        """
        cell = self.board.canonicalize(cell)
        cache = self.active_caches.pop(cell, None)
        if cache is None:
            return None

        snapshot = serialize_geocache(cache)
        self.momentos.put(cell, snapshot)
        self._log(log_world, f"Put away cache {cell}: {snapshot!r}")
        self._emit(SessionEventType.CACHE_CLOSED, cell=cell)
        return snapshot

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    async def move_to(self, position: LatLng) -> List[Geocache]:
        """Handle a position update.

        Returns:
            Active caches near the new position, in row-major cell order.
        """
        self.position = position
        self.path.append(position)

        nearby = self.spawning_cells(position)
        nearby_set = set(nearby)

        for cell in list(self.active_caches):
            if cell not in nearby_set:
                self.close_cache(cell)

        caches = [self.open_cache(cell) for cell in nearby]

        self._log(
            log_player,
            f"({position.lat:.6f}, {position.lng:.6f}) → {len(caches)} cache(s) nearby",
            scope="Move",
        )
        await self.save()
        self._emit(SessionEventType.MOVED)
        return caches

    async def move(self, direction: str) -> List[Geocache]:
        """Step one tile ``north``, ``south``, ``east`` or ``west``.

        Raises:
            ValueError: For an unknown direction.
        """
        try:
            d_row, d_col = DIRECTIONS[direction.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown direction {direction!r}; expected one of {', '.join(DIRECTIONS)}"
            ) from None

        step = self.board.tile_degrees
        return await self.move_to(self.position.offset(d_row * step, d_col * step))

    # ------------------------------------------------------------------
    # Coin transfers
    # ------------------------------------------------------------------

    async def collect(self, cell: Cell, coin: Coin) -> Coin:
        """Collect ``coin`` from the active cache at ``cell`` into the inventory.

        Raises:
            KeyError: If no cache is active at ``cell``
            NotFoundError: If the coin is not available in that cache
        """
        cache = self.get_cache(cell)
        try:
            held = collect_into_inventory(cache, coin, self.inventory)
        except NotFoundError as exc:
            log_error(str(exc), scope="Collect")
            raise

        self._log(log_player, f"Coin {held.label} from cache {cache.cell}", scope="Collect")
        await self.save()
        self._emit(SessionEventType.COIN_COLLECTED, cell=cache.cell, coin=held)
        return held

    async def deposit(self, cell: Cell, coin: Coin) -> Coin:
        """Deposit inventory ``coin`` into the active cache at ``cell``.

        Raises:
            KeyError: If no cache is active at ``cell``
            NotFoundError: If the inventory does not hold the coin
        """
        cache = self.get_cache(cell)
        try:
            deposited = deposit_from_inventory(coin, self.inventory, cache)
        except NotFoundError as exc:
            log_error(str(exc), scope="Deposit")
            raise

        self._log(log_player, f"Coin {deposited.label} into cache {cache.cell}", scope="Deposit")
        await self.save()
        # Adapters offer a fresh collect button for the deposited coin on this event.
        self._emit(SessionEventType.COIN_DEPOSITED, cell=cache.cell, coin=deposited)
        return deposited

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load(self) -> List[Geocache]:
        """Restore position, inventory and momentos, then show the world there.

        Missing keys keep the fresh-session defaults. A failing store switches
        the session to memory-only mode.
        """
        if self.storage is not None and self.storage_enabled:
            try:
                position = await self.storage.load_position()
                inventory = await self.storage.load_inventory(self.board)
                momentos = await self.storage.load_momentos(self.board)
            except StorageUnavailableError as exc:
                self._disable_storage(exc)
            else:
                if position is not None:
                    self.position = position
                if inventory is not None:
                    self.inventory = inventory
                for cell, snapshot in momentos.items():
                    self.momentos.put(cell, snapshot)
                self._log(
                    log_storage,
                    f"Loaded session: {len(self.inventory)} coin(s), "
                    f"{len(self.momentos)} cache momento(s)",
                )

        return await self.move_to(self.position)

    async def save(self) -> None:
        """Persist position, inventory and cache momentos (no-op without storage).

        Active caches are included as they currently stand, so a crash never
        loses coins the player already moved.
        """
        if self.storage is None or not self.storage_enabled:
            return

        momentos = {cell: self.momentos.get(cell) for cell in self.momentos}
        for cell, cache in self.active_caches.items():
            momentos[cell] = serialize_geocache(cache)

        try:
            await self.storage.save(self.position, self.inventory, momentos)
        except StorageUnavailableError as exc:
            self._disable_storage(exc)

    async def reset(self) -> List[Geocache]:
        """Throw away all progress and start over at the start position."""
        self.active_caches.clear()
        self.momentos.clear()
        self.inventory.clear()
        self.path.clear()
        self.position = self.start_position

        if self.storage is not None and self.storage_enabled:
            try:
                await self.storage.clear()
            except StorageUnavailableError as exc:
                self._disable_storage(exc)

        self._log(log_session, "Reset to a fresh session")
        self._emit(SessionEventType.RESET)
        return await self.move_to(self.start_position)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _disable_storage(self, exc: StorageUnavailableError) -> None:
        self.storage_enabled = False
        log_error(f"{exc}; continuing without persistence", scope="Storage")

    def _emit(
        self,
        event_type: SessionEventType,
        *,
        cell: Optional[Cell] = None,
        coin: Optional[Coin] = None,
    ) -> None:
        if not self.listeners:
            return
        event = SessionEvent(
            event_type=event_type,
            position=self.position,
            cell=cell,
            coin=coin.model_copy() if coin is not None else None,
        )
        for listener in self.listeners:
            try:
                listener(event)
            except Exception as exc:  # pragma: no cover - listener errors are non-fatal
                log_error(f"{event_type.value} listener failed: {exc}", scope="Listener")

    def _log(self, logger: Callable[..., None], message: str, **kwargs) -> None:
        if self.verbose:
            logger(f"  {message}", **kwargs)
