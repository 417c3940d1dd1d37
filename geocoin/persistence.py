"""
BlobStore interface for pluggable session storage backends.

This module provides the abstract BlobStore interface, two concrete backends and
the SessionStorage helper that reads/writes the player's position and
inventory through any backend. Persistence is OPTIONAL - a session without a
store (or with a broken one) keeps playing in memory.

Core principle: "The game must work without any storage backend."

Included implementations:
1. InMemoryBlobStore - Dict-based storage, data lost on exit (testing, demos)
2. JsonFileBlobStore - One JSON object on disk, human-readable (local play)

Stored keys (see SessionStorage):
- geocoin_player_location: {"lat": .., "lng": ..}
- geocoin_inventory: [{"cell": {"i": .., "j": ..}, "serial": .., "isCollected": ..}, ...]
- geocoin_momentos: {"i,j": "<momento>", ...} (caches put away or open at save time)

Usage pattern:
    store = JsonFileBlobStore("geocoin_state.json")
    await store.initialize()
    storage = SessionStorage(store)
    position = await storage.load_position()
    await storage.save(position, inventory)
    await store.close()
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import StorageUnavailableError
from .inventory import Inventory
from .logging_utils import log_error
from .world import Board, Cell, LatLng

PLAYER_LOCATION_KEY = "geocoin_player_location"
INVENTORY_KEY = "geocoin_inventory"
MOMENTOS_KEY = "geocoin_momentos"

_MOMENTO_MAP = TypeAdapter(Dict[str, str])


class BlobStore(ABC):
    """Abstract key/value store holding opaque strings.

    Async interface rationale:
    - File and browser-like backends do I/O; async keeps the session's event
      loop free while a save is in flight
    - initialize() and close() manage file handles, connections, etc.
    - Async is a no-op for InMemoryBlobStore

    Backends should signal failures with StorageUnavailableError; SessionStorage
    converts anything else a host-supplied backend raises into one.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Prepare the backend (create directories, open connections).

        Raises:
            StorageUnavailableError: If the backend cannot be used
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Return the value stored under ``key``.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageUnavailableError: If the backend fails
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageUnavailableError: If the backend fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Remove ``key``. Removing an absent key is not an error.

        Raises:
            StorageUnavailableError: If the backend fails
        """
        pass

    @abstractmethod
    async def set_many(self, items: Dict[str, str]) -> None:
        """
        Store every pair in ``items`` as one write.

        Either all keys are replaced or, when the backend fails, none are.

        Raises:
            StorageUnavailableError: If the backend fails
        """
        pass

    @abstractmethod
    async def delete_many(self, keys: Iterable[str]) -> None:
        """
        Remove every key in ``keys`` as one write. Absent keys are ignored.

        Raises:
            StorageUnavailableError: If the backend fails
        """
        pass


class InMemoryBlobStore(BlobStore):
    """Dict-backed store. Data survives across sessions sharing the instance."""

    def __init__(self):
        self.data: Dict[str, str] = {}

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        # Data is kept so tests can inspect it and reopen a session on it.
        pass

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)

    async def set_many(self, items: Dict[str, str]) -> None:
        self.data.update(items)

    async def delete_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.data.pop(key, None)


class JsonFileBlobStore(BlobStore):
    """File-based store keeping every key in a single JSON object.

    File layout:
    ```
    {
      "geocoin_player_location": "{\\"lat\\": 36.98, \\"lng\\": -122.06}",
      "geocoin_inventory": "[...]"
    }
    ```

    All file I/O runs in a worker thread (asyncio.to_thread). Writes go to a
    sibling temp file that replaces the store file, so a reader never sees a
    half-written object. OS-level failures (permissions, missing mount,
    corrupt file) surface as StorageUnavailableError.
    """

    def __init__(self, path: Path | str = "geocoin_state.json"):
        self.path = Path(path)

    async def initialize(self) -> None:
        try:
            await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(operation="initialize", underlying=exc) from exc

    async def close(self) -> None:
        # Every write is flushed immediately; nothing to clean up
        return None

    async def get(self, key: str) -> Optional[str]:
        data = await self._read("get")
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        await self.set_many({key: value})

    async def delete(self, key: str) -> None:
        await self.delete_many([key])

    async def set_many(self, items: Dict[str, str]) -> None:
        data = await self._read("set")
        data.update(items)
        await self._write(data, "set")

    async def delete_many(self, keys: Iterable[str]) -> None:
        data = await self._read("delete")
        removed = [key for key in keys if data.pop(key, None) is not None]
        if removed:
            await self._write(data, "delete")

    async def _read(self, operation: str) -> Dict[str, str]:
        def _load() -> object:
            if not self.path.exists():
                return {}
            text = self.path.read_text("utf-8")
            return json.loads(text) if text.strip() else {}

        try:
            payload = await asyncio.to_thread(_load)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageUnavailableError(operation=operation, underlying=exc) from exc

        if not isinstance(payload, dict):
            raise StorageUnavailableError(
                operation=operation,
                underlying=ValueError(f"{self.path} does not contain a JSON object"),
            )
        return payload

    async def _write(self, data: Dict[str, str], operation: str) -> None:
        def _dump() -> None:
            staging = self.path.with_name(self.path.name + ".tmp")
            staging.write_text(json.dumps(data, indent=2), "utf-8")
            os.replace(staging, self.path)

        try:
            await asyncio.to_thread(_dump)
        except OSError as exc:
            raise StorageUnavailableError(operation=operation, underlying=exc) from exc


class SessionStorage:
    """Reads and writes the persisted half of a session through a BlobStore.

    Missing keys mean a fresh session. Values that no longer decode (hand
    edited, older format) are logged and treated as missing rather than
    blocking the game. Any exception raised by the backend is re-raised as
    StorageUnavailableError so the session can decide to stop persisting.

    The session is saved with a single set_many call: position, inventory
    and momentos land together or not at all, so a stored inventory never
    disagrees with the stored caches about who holds a coin.
    """

    def __init__(self, store: BlobStore):
        self.store = store

    async def load_position(self) -> Optional[LatLng]:
        raw = await self._get(PLAYER_LOCATION_KEY)
        if raw is None:
            return None
        try:
            return LatLng.model_validate_json(raw)
        except ValidationError as exc:
            log_error(f"Ignoring unreadable saved position: {exc.error_count()} error(s)", scope="Storage")
            return None

    async def load_inventory(self, board: Optional[Board] = None) -> Optional[Inventory]:
        raw = await self._get(INVENTORY_KEY)
        if raw is None:
            return None
        try:
            return Inventory.from_json(raw, board)
        except ValidationError as exc:
            log_error(f"Ignoring unreadable saved inventory: {exc.error_count()} error(s)", scope="Storage")
            return None

    async def load_momentos(self, board: Board) -> Dict[Cell, str]:
        raw = await self._get(MOMENTOS_KEY)
        if raw is None:
            return {}
        try:
            payload = _MOMENTO_MAP.validate_json(raw)
        except ValidationError as exc:
            log_error(f"Ignoring unreadable saved caches: {exc.error_count()} error(s)", scope="Storage")
            return {}

        momentos: Dict[Cell, str] = {}
        for key, snapshot in payload.items():
            i_text, _, j_text = key.partition(",")
            try:
                cell = board.canonical_cell(int(i_text), int(j_text))
            except ValueError:
                log_error(f"Skipping saved cache with bad cell key {key!r}", scope="Storage")
                continue
            momentos[cell] = snapshot
        return momentos

    async def save(
        self,
        position: LatLng,
        inventory: Inventory,
        momentos: Optional[Dict[Cell, str]] = None,
    ) -> None:
        items = {
            PLAYER_LOCATION_KEY: position.model_dump_json(),
            INVENTORY_KEY: inventory.to_json(),
        }
        if momentos is not None:
            payload = {cell.key: snapshot for cell, snapshot in momentos.items()}
            items[MOMENTOS_KEY] = json.dumps(payload)

        try:
            await self.store.set_many(items)
        except StorageUnavailableError:
            raise
        except Exception as exc:
            raise StorageUnavailableError(operation="set", underlying=exc) from exc

    async def clear(self) -> None:
        try:
            await self.store.delete_many([PLAYER_LOCATION_KEY, INVENTORY_KEY, MOMENTOS_KEY])
        except StorageUnavailableError:
            raise
        except Exception as exc:
            raise StorageUnavailableError(operation="delete", underlying=exc) from exc

    async def _get(self, key: str) -> Optional[str]:
        try:
            return await self.store.get(key)
        except StorageUnavailableError:
            raise
        except Exception as exc:
            raise StorageUnavailableError(operation="get", underlying=exc) from exc
