"""Validation utilities for puzzle grids and in-progress boards."""

from __future__ import annotations
import numpy as np
from typing import Dict, TYPE_CHECKING

from .cell import Digit
from .errors import InvariantViolation

if TYPE_CHECKING:
    from .board import Board

SIZE = 9
BOX_SIZE = 3


def check_coordinates(row: int, col: int) -> None:
    """Raise InvariantViolation unless (row, col) lies on the 9x9 grid."""
    if not (0 <= row < SIZE and 0 <= col < SIZE):
        raise InvariantViolation(f"Cell ({row}, {col}) is outside the grid")


def check_digit(digit: int) -> None:
    """Raise InvariantViolation unless digit is in 1-9."""
    if not 1 <= digit <= SIZE:
        raise InvariantViolation(f"Digit must be 1-{SIZE}, got {digit}")


def validate_grids(puzzle: np.ndarray, solution: np.ndarray) -> None:
    """
    Check that a puzzle and its solution are well-formed.

    Only the data itself is checked: shapes, value ranges and agreement of
    every given with the solution. Solvability is not verified.

    Raises:
        ValueError: If either grid is malformed.
    """
    if puzzle.shape != (SIZE, SIZE):
        raise ValueError(f"Puzzle shape must be ({SIZE}, {SIZE}), got {puzzle.shape}")
    if solution.shape != (SIZE, SIZE):
        raise ValueError(f"Solution shape must be ({SIZE}, {SIZE}), got {solution.shape}")

    if np.any((puzzle < 0) | (puzzle > SIZE)):
        raise ValueError(f"Puzzle values must be 0-{SIZE}")
    if np.any((solution < 1) | (solution > SIZE)):
        raise ValueError(f"Solution values must be 1-{SIZE}")

    givens = puzzle != 0
    if np.any(puzzle[givens] != solution[givens]):
        rows, cols = np.nonzero(givens & (puzzle != solution))
        raise ValueError(
            f"Given at ({rows[0]}, {cols[0]}) disagrees with the solution"
        )


def count_placements(board: Board) -> Dict[int, int]:
    """
    Count correctly placed occurrences of every digit (givens included).

    Returns:
        Mapping digit -> count, with an entry for each of 1-9.
    """
    counts = {d: 0 for d in range(1, SIZE + 1)}
    for row in range(SIZE):
        for col in range(SIZE):
            cell = board.get(row, col)
            if isinstance(cell, Digit) and board.is_correct(row, col):
                counts[cell.value] += 1
    return counts


def is_puzzle_complete(board: Board) -> bool:
    """True iff every cell holds a digit equal to the solution."""
    for row in range(SIZE):
        for col in range(SIZE):
            if not board.is_correct(row, col):
                return False
    return True
