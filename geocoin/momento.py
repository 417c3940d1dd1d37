"""Momento store: cell -> serialized cache snapshot.

Holds the state of every cache the player has put away this session. Entries
are overwritten on each put and never expire; a session reset clears them.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from .world import Cell


class MomentoStore:
    """Dict-backed mapping from cell to momento string."""

    def __init__(self) -> None:
        self._momentos: Dict[Cell, str] = {}

    def put(self, cell: Cell, snapshot: str) -> None:
        """Store ``snapshot`` for ``cell``, replacing any previous one."""
        self._momentos[cell] = snapshot

    def get(self, cell: Cell) -> Optional[str]:
        """Return the snapshot for ``cell`` or None if it was never put away."""
        return self._momentos.get(cell)

    def __contains__(self, cell: object) -> bool:
        return cell in self._momentos

    def __len__(self) -> int:
        return len(self._momentos)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._momentos)

    def clear(self) -> None:
        self._momentos.clear()
