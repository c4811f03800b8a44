"""Core module for the board, cell values, notes and validation."""

from .cell import Cell, Digit, Empty, NoteSet, EMPTY
from .board import Board
from .errors import InvariantViolation
from .notes import eliminate, fill_all_candidates, candidates
from .validator import count_placements, is_puzzle_complete

__all__ = [
    "Cell",
    "Digit",
    "Empty",
    "NoteSet",
    "EMPTY",
    "Board",
    "InvariantViolation",
    "eliminate",
    "fill_all_candidates",
    "candidates",
    "count_placements",
    "is_puzzle_complete",
]
