"""Undo history: an immutable stack of board snapshots."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ..core.board import Board, Cells
from ..core.cell import cell_from_raw, cell_to_raw

Selection = Optional[Tuple[int, int]]


@dataclass(frozen=True)
class MoveSnapshot:
    """Cell values and selection captured just before a move."""
    cells: Cells
    selection: Selection = None

    @classmethod
    def capture(cls, board: Board, selection: Selection) -> MoveSnapshot:
        return cls(board.snapshot(), selection)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "previousPuzzle": [[cell_to_raw(cell) for cell in row] for row in self.cells],
            "previousSelectedCell": list(self.selection) if self.selection else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MoveSnapshot:
        """
        Parse a saved snapshot.

        Raises:
            ValueError: If the entry is not a snapshot.
        """
        try:
            cells = tuple(
                tuple(cell_from_raw(raw) for raw in row) for row in data["previousPuzzle"]
            )
            selection = data.get("previousSelectedCell")
            if selection:
                row, col = (int(v) for v in selection)
                selection = (row, col)
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed history entry: {e}") from e
        return cls(cells, selection or None)


class MoveHistory:
    """
    Strict LIFO stack of move snapshots.

    The history is a value: `push` and `pop` return a new history and leave
    the receiver untouched, so a published session state can never see a
    later move. Popped snapshots are discarded; there is no redo.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Sequence[MoveSnapshot] = ()):
        self._entries: Tuple[MoveSnapshot, ...] = tuple(entries)

    def push(self, snapshot: MoveSnapshot) -> MoveHistory:
        return MoveHistory(self._entries + (snapshot,))

    def pop(self) -> Tuple[Optional[MoveSnapshot], MoveHistory]:
        """
        Remove the most recent snapshot.

        Returns:
            Tuple of (snapshot or None if empty, remaining history).
        """
        if not self._entries:
            return None, self
        return self._entries[-1], MoveHistory(self._entries[:-1])

    def peek(self) -> Optional[MoveSnapshot]:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[MoveSnapshot]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MoveHistory):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"MoveHistory(depth={len(self._entries)})"

    def to_list(self) -> List[Dict[str, Any]]:
        """Serialize oldest first."""
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_list(cls, data: Sequence[Dict[str, Any]]) -> MoveHistory:
        return cls(MoveSnapshot.from_dict(entry) for entry in data)
