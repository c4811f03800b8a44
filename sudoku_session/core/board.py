"""Board representation for a puzzle in progress."""

from __future__ import annotations
import numpy as np
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .cell import Cell, Digit, NoteSet, EMPTY, RawCell, cell_from_raw, cell_to_raw
from .errors import InvariantViolation
from .validator import (
    SIZE, BOX_SIZE, check_coordinates, validate_grids,
    count_placements, is_puzzle_complete,
)

# Immutable copy of the cell values, used for move-history snapshots.
Cells = Tuple[Tuple[Cell, ...], ...]


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=np.int32)
    array.flags.writeable = False
    return array


class Board:
    """
    A 9x9 puzzle in progress.

    Pairs the current cell values with the original puzzle (whose nonzero
    entries are the givens) and the solution. The puzzle and solution are
    read-only arrays shared between copies of the board; only the cell
    values are copied.
    """

    def __init__(self, puzzle: np.ndarray, solution: np.ndarray,
                 cells: Optional[Sequence[Sequence[Cell]]] = None):
        """
        Initialize a board.

        Args:
            puzzle: 9x9 array of the original puzzle, 0 for empty cells.
            solution: 9x9 array of digits 1-9.
            cells: Optional current cell values. If None, the board starts
                with only the givens filled in.
        """
        puzzle = np.asarray(puzzle)
        solution = np.asarray(solution)
        validate_grids(puzzle, solution)

        self.puzzle = puzzle if not puzzle.flags.writeable else _frozen(puzzle)
        self.solution = solution if not solution.flags.writeable else _frozen(solution)
        self.givens = self.puzzle != 0
        self.givens.flags.writeable = False

        if cells is None:
            self.cells: List[List[Cell]] = [
                [Digit(int(v)) if v else EMPTY for v in row] for row in self.puzzle
            ]
        else:
            if len(cells) != SIZE or any(len(row) != SIZE for row in cells):
                raise ValueError(f"Cells must be {SIZE}x{SIZE}")
            self.cells = [list(row) for row in cells]
            for row, col in zip(*np.nonzero(self.givens)):
                if self.cells[row][col] != Digit(int(self.puzzle[row, col])):
                    raise ValueError(f"Given at ({row}, {col}) was altered")

    def copy(self) -> Board:
        """Create a copy sharing the puzzle and solution arrays."""
        new_board = Board.__new__(Board)
        new_board.puzzle = self.puzzle
        new_board.solution = self.solution
        new_board.givens = self.givens
        new_board.cells = [list(row) for row in self.cells]
        return new_board

    def snapshot(self) -> Cells:
        """Immutable copy of the current cell values."""
        return tuple(tuple(row) for row in self.cells)

    def restore(self, cells: Cells) -> Board:
        """Create a board with this puzzle and solution and the given cells."""
        return Board(self.puzzle, self.solution, cells)

    def get(self, row: int, col: int) -> Cell:
        """Get the cell value at (row, col)."""
        check_coordinates(row, col)
        return self.cells[row][col]

    def set(self, row: int, col: int, value: Cell) -> None:
        """Set the cell value at (row, col). Givens cannot be altered."""
        if self.is_given(row, col):
            raise InvariantViolation(f"Cell ({row}, {col}) is a given")
        self.cells[row][col] = value

    def clear(self, row: int, col: int) -> None:
        """Clear the cell at (row, col)."""
        self.set(row, col, EMPTY)

    def is_given(self, row: int, col: int) -> bool:
        check_coordinates(row, col)
        return bool(self.givens[row, col])

    def solution_at(self, row: int, col: int) -> int:
        check_coordinates(row, col)
        return int(self.solution[row, col])

    def is_correct(self, row: int, col: int) -> bool:
        """True if the cell holds a digit equal to the solution."""
        cell = self.get(row, col)
        return isinstance(cell, Digit) and cell.value == int(self.solution[row, col])

    def is_empty(self, row: int, col: int) -> bool:
        """True if the cell holds no digit (empty or notes only)."""
        return not isinstance(self.get(row, col), Digit)

    def get_row(self, row: int) -> List[Cell]:
        return list(self.cells[row])

    def get_col(self, col: int) -> List[Cell]:
        return [self.cells[r][col] for r in range(SIZE)]

    def box_origin(self, row: int, col: int) -> Tuple[int, int]:
        """Top-left corner of the 3x3 box containing (row, col)."""
        return (row // BOX_SIZE) * BOX_SIZE, (col // BOX_SIZE) * BOX_SIZE

    def get_box(self, row: int, col: int) -> List[Cell]:
        """Get all values in the box containing (row, col)."""
        box_row, box_col = self.box_origin(row, col)
        return [self.cells[r][c]
                for r in range(box_row, box_row + BOX_SIZE)
                for c in range(box_col, box_col + BOX_SIZE)]

    def get_peers(self, row: int, col: int) -> Set[Tuple[int, int]]:
        """
        Get all peer cell positions (those in same row, column, or box).

        Returns:
            Set of (r, c) tuples, excluding (row, col) itself.
        """
        check_coordinates(row, col)
        peers = set()
        for i in range(SIZE):
            peers.add((row, i))
            peers.add((i, col))

        box_row, box_col = self.box_origin(row, col)
        for i in range(BOX_SIZE):
            for j in range(BOX_SIZE):
                peers.add((box_row + i, box_col + j))

        peers.remove((row, col))
        return peers

    def iter_cells(self):
        """Yield (row, col, cell) for every position."""
        for row in range(SIZE):
            for col in range(SIZE):
                yield row, col, self.cells[row][col]

    def count_filled(self) -> int:
        """Count cells holding a digit."""
        return sum(1 for _, _, cell in self.iter_cells() if isinstance(cell, Digit))

    def is_complete(self) -> bool:
        """Check if every cell holds a digit."""
        return self.count_filled() == SIZE * SIZE

    def is_solved(self) -> bool:
        """Check if every cell holds the solution digit."""
        return is_puzzle_complete(self)

    def count_placements(self) -> Dict[int, int]:
        return count_placements(self)

    def to_lists(self) -> List[List[RawCell]]:
        """Serialize the cells: 0 for empty, a digit, or a sorted list of notes."""
        return [[cell_to_raw(cell) for cell in row] for row in self.cells]

    @classmethod
    def from_lists(cls, initial: Sequence[Sequence[int]], solution: Sequence[Sequence[int]],
                   current: Optional[Sequence[Sequence[RawCell]]] = None) -> Board:
        """
        Create a board from nested lists.

        Args:
            initial: Original puzzle, 0 for empty cells.
            solution: Solution digits.
            current: Optional in-progress cells, each 0, a digit or a list
                of notes.
        """
        cells = None
        if current is not None:
            cells = [[cell_from_raw(raw) for raw in row] for row in current]
        return cls(np.array(initial, dtype=np.int32),
                   np.array(solution, dtype=np.int32), cells)

    def to_string(self) -> str:
        """Compact 81-char representation of the digits, 0 for non-digit cells."""
        return ''.join(
            str(cell.value) if isinstance(cell, Digit) else '0'
            for _, _, cell in self.iter_cells()
        )

    @classmethod
    def from_string(cls, puzzle: str, solution: str) -> Board:
        """
        Create a board from 81-char puzzle and solution strings.

        0 or . marks an empty cell in the puzzle.
        """
        return cls(_parse_grid(puzzle), _parse_grid(solution))

    def __str__(self) -> str:
        """Pretty-print the board. Note cells print as '.'."""
        lines = []
        horizontal_sep = '+' + (('-' * (BOX_SIZE * 2 + 1)) + '+') * BOX_SIZE

        for i in range(SIZE):
            if i % BOX_SIZE == 0:
                lines.append(horizontal_sep)

            row_str = '|'
            for j in range(SIZE):
                cell = self.cells[i][j]
                row_str += f' {cell.value}' if isinstance(cell, Digit) else ' .'
                if (j + 1) % BOX_SIZE == 0:
                    row_str += ' |'

            lines.append(row_str)

        lines.append(horizontal_sep)
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"Board(filled={self.count_filled()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return False
        return (self.cells == other.cells
                and np.array_equal(self.puzzle, other.puzzle)
                and np.array_equal(self.solution, other.solution))

    __hash__ = None


def _parse_grid(s: str) -> np.ndarray:
    if len(s) != SIZE * SIZE:
        raise ValueError(f"String length must be {SIZE * SIZE}, got {len(s)}")
    values = []
    for c in s:
        if c in '0.':
            values.append(0)
        elif c.isdigit():
            values.append(int(c))
        else:
            raise ValueError(f"Unexpected character {c!r} in grid string")
    return np.array(values, dtype=np.int32).reshape(SIZE, SIZE)
