"""Single-player Sudoku play sessions: board, notes, undo and a serialized command queue."""

from .config import SessionConfig
from .core import Board, InvariantViolation
from .session import SessionController, PuzzleRecord, Difficulty, Status

__version__ = "1.0.0"

__all__ = [
    "SessionConfig",
    "Board",
    "InvariantViolation",
    "SessionController",
    "PuzzleRecord",
    "Difficulty",
    "Status",
]
