"""Player commands and their state transitions."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict
import random

from ..core.cell import Digit, NoteSet
from ..core.notes import eliminate, fill_all_candidates
from ..core.validator import check_coordinates, check_digit
from .history import MoveSnapshot
from .state import ClueStage, SessionState


class Command(ABC):
    """
    Abstract base class for all player commands.

    A command is a pure transition: `apply` returns the next state and never
    mutates the one it is given. Commands that cannot take effect (no
    selection, a given cell, nothing to undo) return the state unchanged.
    """

    @abstractmethod
    def apply(self, state: SessionState, rng: random.Random) -> SessionState:
        """
        Apply the command.

        Args:
            state: Current state (not modified).
            rng: Random source for commands that pick a cell.

        Returns:
            The next state, or `state` itself for a no-op.
        """
        pass


def _with_snapshot(state: SessionState):
    """History with the pre-move board and selection pushed."""
    return state.history.push(MoveSnapshot.capture(state.board, state.selection))


def _bump(placements: Dict[int, int], digit: int, delta: int) -> None:
    placements[digit] = placements.get(digit, 0) + delta


@dataclass(frozen=True)
class SelectCell(Command):
    """Move the selection to (row, col)."""
    row: int
    col: int

    def apply(self, state: SessionState, rng: random.Random) -> SessionState:
        check_coordinates(self.row, self.col)
        return state.evolve(selection=(self.row, self.col))


@dataclass(frozen=True)
class ClearSelection(Command):
    """Drop the selection."""

    def apply(self, state: SessionState, rng: random.Random) -> SessionState:
        if state.selection is None:
            return state
        return state.evolve(selection=None)


@dataclass(frozen=True)
class EnterDigit(Command):
    """
    Enter a digit into the selected cell.

    In notes mode the digit is toggled in the cell's notes, and a placed
    digit is replaced by a single note. Otherwise the digit is placed, or
    erased when the cell already holds it. A wrong placement costs a
    mistake; any placement removes the digit from the notes of the cell's
    peers.
    """
    digit: int

    def apply(self, state: SessionState, rng: random.Random) -> SessionState:
        check_digit(self.digit)
        if state.selection is None:
            return state

        row, col = state.selection
        board = state.board
        if board.is_given(row, col):
            return state

        cell = board.get(row, col)
        if state.notes_mode:
            return self._toggle_note(state, row, col, cell)

        history = _with_snapshot(state)
        new_board = board.copy()
        placements = dict(state.placements)
        was_correct = board.is_correct(row, col)

        if cell == Digit(self.digit):
            new_board.clear(row, col)
            if was_correct:
                _bump(placements, self.digit, -1)
            return state.evolve(board=new_board, history=history, placements=placements)

        if was_correct:
            _bump(placements, cell.value, -1)

        new_board.set(row, col, Digit(self.digit))
        mistakes = state.mistakes
        if self.digit != board.solution_at(row, col):
            mistakes += 1
        else:
            _bump(placements, self.digit, 1)
        eliminate(new_board, row, col, self.digit)

        return state.evolve(
            board=new_board, history=history, placements=placements, mistakes=mistakes,
        )

    def _toggle_note(self, state, row, col, cell) -> SessionState:
        placements = state.placements
        if isinstance(cell, Digit):
            # A placed digit is replaced by a single note.
            notes = NoteSet.of([self.digit])
            if state.board.is_correct(row, col):
                placements = dict(placements)
                _bump(placements, cell.value, -1)
        else:
            notes = cell if isinstance(cell, NoteSet) else NoteSet()
            notes = notes.toggle(self.digit)
        new_board = state.board.copy()
        new_board.set(row, col, notes)
        return state.evolve(board=new_board, history=_with_snapshot(state), placements=placements)


@dataclass(frozen=True)
class Undo(Command):
    """Restore the board and selection saved before the most recent move."""

    def apply(self, state: SessionState, rng: random.Random) -> SessionState:
        snapshot, history = state.history.pop()
        if snapshot is None:
            return state

        board = state.board.restore(snapshot.cells)
        return state.evolve(
            board=board,
            selection=snapshot.selection,
            history=history,
            placements=board.count_placements(),
        )


@dataclass(frozen=True)
class ToggleNotesMode(Command):
    """Switch between placing digits and editing notes."""

    def apply(self, state: SessionState, rng: random.Random) -> SessionState:
        return state.evolve(notes_mode=not state.notes_mode)


@dataclass(frozen=True)
class Clue(Command):
    """
    Ask for a hint.

    The first clue of a session fills every open cell with its candidates
    and cannot be undone. Each later clue writes the solution into one
    randomly chosen empty or wrong cell, selects it, and can be undone.
    """

    def apply(self, state: SessionState, rng: random.Random) -> SessionState:
        if state.clue_stage is ClueStage.NOT_HINTED:
            board = state.board.copy()
            fill_all_candidates(board)
            return state.evolve(board=board, clue_stage=ClueStage.NOTES_REVEALED)

        board = state.board
        targets = [
            (row, col) for row, col, _ in board.iter_cells()
            if not board.is_given(row, col) and not board.is_correct(row, col)
        ]
        if not targets:
            return state

        row, col = rng.choice(targets)
        digit = board.solution_at(row, col)

        new_board = board.copy()
        new_board.set(row, col, Digit(digit))
        eliminate(new_board, row, col, digit)
        placements = dict(state.placements)
        _bump(placements, digit, 1)

        return state.evolve(
            board=new_board,
            selection=(row, col),
            history=_with_snapshot(state),
            placements=placements,
        )
