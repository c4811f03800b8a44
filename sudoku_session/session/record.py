"""Puzzle records exchanged with the puzzle source and the session store."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import copy
import time

from ..core.board import Board
from ..core.cell import RawCell
from .history import MoveHistory


class Difficulty(Enum):
    """Difficulty buckets used by the puzzle source."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: str) -> Difficulty:
        """Case-insensitive lookup by value or name."""
        if not isinstance(value, str):
            raise ValueError(f"Unknown difficulty: {value!r}")
        for difficulty in cls:
            if value.lower() in (difficulty.value.lower(), difficulty.name.lower()):
                return difficulty
        raise ValueError(f"Unknown difficulty: {value!r}")


@dataclass
class PuzzleRecord:
    """
    A puzzle handed to a session, optionally annotated with progress.

    The JSON form uses the keys of the puzzle source: `initialPuzzle`,
    `puzzle`, `solution`, `puzzleHistory`, `difficulty`, `id`, `createdAt`,
    and, once saved, `elapsedTime`, `mistakes` and `clueNotesGiven`.
    """
    initial_puzzle: List[List[int]]
    solution: List[List[int]]
    difficulty: Difficulty
    id: str
    created_at: int
    puzzle: Optional[List[List[RawCell]]] = None
    move_history: List[Dict[str, Any]] = field(default_factory=list)
    elapsed_time: int = 0
    mistakes: int = 0
    clue_notes_given: bool = False

    @classmethod
    def new(cls, initial_puzzle: List[List[int]], solution: List[List[int]],
            difficulty: Difficulty, created_at: Optional[int] = None) -> PuzzleRecord:
        """Build a fresh record; the id is the timestamp plus the solution digits."""
        if created_at is None:
            created_at = int(time.time() * 1000)
        digits = ''.join(''.join(str(v) for v in row) for row in solution)
        return cls(
            initial_puzzle=[list(row) for row in initial_puzzle],
            solution=[list(row) for row in solution],
            difficulty=difficulty,
            id=f"{created_at}_{digits}",
            created_at=created_at,
        )

    def build_board(self) -> Board:
        """Board with the saved progress, or only the givens for a fresh record."""
        return Board.from_lists(self.initial_puzzle, self.solution, self.puzzle)

    def build_history(self) -> MoveHistory:
        """
        Parse the saved undo history.

        Raises:
            ValueError: If a snapshot is malformed or alters a given.
        """
        history = MoveHistory.from_list(self.move_history)
        board = self.build_board()
        for snapshot in history:
            board.restore(snapshot.cells)
            if snapshot.selection is not None and not all(0 <= v < 9 for v in snapshot.selection):
                raise ValueError(f"Saved selection {snapshot.selection} is outside the grid")
        return history

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-ready record format."""
        return {
            "initialPuzzle": copy.deepcopy(self.initial_puzzle),
            "puzzle": copy.deepcopy(self.puzzle if self.puzzle is not None else self.initial_puzzle),
            "solution": copy.deepcopy(self.solution),
            "puzzleHistory": copy.deepcopy(self.move_history),
            "difficulty": self.difficulty.value,
            "id": self.id,
            "createdAt": self.created_at,
            "elapsedTime": self.elapsed_time,
            "mistakes": self.mistakes,
            "clueNotesGiven": self.clue_notes_given,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PuzzleRecord:
        """
        Parse a record.

        Raises:
            ValueError: If a required key is missing or a value is malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Puzzle record must be a mapping, got {type(data).__name__}")
        try:
            initial = data["initialPuzzle"]
            solution = data["solution"]
            difficulty = Difficulty.parse(data["difficulty"])
        except KeyError as e:
            raise ValueError(f"Puzzle record is missing {e.args[0]!r}") from e

        created_at = int(data.get("createdAt", 0))
        return cls(
            initial_puzzle=initial,
            solution=solution,
            difficulty=difficulty,
            id=str(data.get("id") or f"{created_at}"),
            created_at=created_at,
            puzzle=data.get("puzzle"),
            move_history=list(data.get("puzzleHistory") or []),
            elapsed_time=int(data.get("elapsedTime") or 0),
            mistakes=int(data.get("mistakes") or 0),
            clue_notes_given=bool(data.get("clueNotesGiven", False)),
        )
