"""Candidate notes: elimination after a placement and full-board candidate fill."""

from __future__ import annotations
from typing import List, Set

from .board import Board
from .cell import Digit, NoteSet
from .validator import SIZE, BOX_SIZE, check_coordinates, check_digit

ALL_DIGITS = frozenset(range(1, SIZE + 1))


def eliminate(board: Board, row: int, col: int, digit: int) -> None:
    """
    Remove `digit` from the notes of every peer of (row, col).

    Peers are the other cells of the same row, column and 3x3 box. Cells
    holding a digit or no notes are left untouched. Mutates `board`.
    """
    check_coordinates(row, col)
    check_digit(digit)

    for r, c in board.get_peers(row, col):
        cell = board.cells[r][c]
        if isinstance(cell, NoteSet) and digit in cell:
            board.cells[r][c] = cell.without(digit)


def _used_digits(board: Board):
    """Digits present in each row, column and box, computed in one pass."""
    rows: List[Set[int]] = [set() for _ in range(SIZE)]
    cols: List[Set[int]] = [set() for _ in range(SIZE)]
    boxes: List[Set[int]] = [set() for _ in range(SIZE)]
    for r, c, cell in board.iter_cells():
        if isinstance(cell, Digit):
            rows[r].add(cell.value)
            cols[c].add(cell.value)
            boxes[(r // BOX_SIZE) * BOX_SIZE + c // BOX_SIZE].add(cell.value)
    return rows, cols, boxes


def candidates(board: Board, row: int, col: int) -> frozenset:
    """
    Digits that can still go in (row, col) given the placed digits.

    Returns an empty set if the cell already holds a digit.
    """
    check_coordinates(row, col)
    if isinstance(board.cells[row][col], Digit):
        return frozenset()

    used = set()
    for r, c in board.get_peers(row, col):
        cell = board.cells[r][c]
        if isinstance(cell, Digit):
            used.add(cell.value)
    return ALL_DIGITS - used


def fill_all_candidates(board: Board) -> None:
    """
    Replace the notes of every empty or noted cell with its full candidate set.

    Candidates are 1-9 minus the digits already placed (correctly or not) in
    the cell's row, column and box. An empty note-set is written when no
    candidate remains. Givens and digit cells are not touched. Mutates
    `board`; running it twice gives the same notes.
    """
    rows, cols, boxes = _used_digits(board)

    for r, c, cell in board.iter_cells():
        if isinstance(cell, Digit):
            continue
        used = rows[r] | cols[c] | boxes[(r // BOX_SIZE) * BOX_SIZE + c // BOX_SIZE]
        board.cells[r][c] = NoteSet(ALL_DIGITS - used)
