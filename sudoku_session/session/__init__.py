"""Session module: commands, command queue, undo history and controller."""

from .commands import (
    Command, SelectCell, ClearSelection, EnterDigit, Undo, ToggleNotesMode, Clue,
)
from .controller import SessionController
from .history import MoveHistory, MoveSnapshot
from .queue import CommandQueue
from .record import Difficulty, PuzzleRecord
from .state import ClueStage, SessionState, Status

__all__ = [
    "Command",
    "SelectCell",
    "ClearSelection",
    "EnterDigit",
    "Undo",
    "ToggleNotesMode",
    "Clue",
    "SessionController",
    "MoveHistory",
    "MoveSnapshot",
    "CommandQueue",
    "Difficulty",
    "PuzzleRecord",
    "ClueStage",
    "SessionState",
    "Status",
]
