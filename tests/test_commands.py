"""Unit tests for command handlers and the command queue."""

import random

import pytest

from sudoku_session.core.board import Board
from sudoku_session.core.cell import Digit, NoteSet, EMPTY
from sudoku_session.core.errors import InvariantViolation
from sudoku_session.session.commands import (
    SelectCell, ClearSelection, EnterDigit, Undo, ToggleNotesMode, Clue,
)
from sudoku_session.session.queue import CommandQueue
from sudoku_session.session.state import ClueStage, SessionState
from conftest import TEST_SOLUTION, SINGLE_GIVEN


def run(state, *commands, seed=0):
    """Apply commands one after another."""
    rng = random.Random(seed)
    for command in commands:
        state = command.apply(state, rng)
    return state


@pytest.fixture
def state(board):
    return SessionState.initial(board)


class TestSelection:
    """Tests for SelectCell and ClearSelection."""

    def test_select(self, state):
        """Test selection is set unconditionally, givens included."""
        assert run(state, SelectCell(0, 0)).selection == (0, 0)
        assert run(state, SelectCell(8, 8)).selection == (8, 8)

    def test_select_out_of_range(self, state):
        """Test an off-grid selection is an invariant violation."""
        with pytest.raises(InvariantViolation):
            run(state, SelectCell(9, 0))

    def test_selected_cell(self, state):
        """Test the value under the selection."""
        assert state.selected_cell is None
        assert run(state, SelectCell(0, 0)).selected_cell == Digit(5)
        assert run(state, SelectCell(0, 2)).selected_cell == EMPTY

    def test_clear(self, state):
        """Test clearing the selection."""
        assert run(state, SelectCell(1, 1), ClearSelection()).selection is None
        assert run(state, ClearSelection()) is state


class TestEnterDigit:
    """Tests for EnterDigit."""

    def test_correct_digit(self, state):
        """Test a correct digit is placed and counted without a mistake."""
        before = state.placements[4]
        new = run(state, SelectCell(0, 2), EnterDigit(4))

        assert new.board.get(0, 2) == Digit(4)
        assert new.mistakes == 0
        assert new.placements[4] == before + 1
        assert len(new.history) == 1

    def test_wrong_digit(self, state):
        """Test a wrong digit costs exactly one mistake and is not counted."""
        before = dict(state.placements)
        new = run(state, SelectCell(0, 2), EnterDigit(1))

        assert new.board.get(0, 2) == Digit(1)
        assert new.mistakes == 1
        assert new.placements == before

    def test_same_digit_erases(self, state):
        """Test entering the digit already in the cell clears it."""
        placed = run(state, SelectCell(0, 2), EnterDigit(4))
        erased = run(placed, EnterDigit(4))

        assert erased.board.get(0, 2) == EMPTY
        assert erased.placements == state.placements
        assert len(erased.history) == 2

    def test_erasing_wrong_digit_keeps_count(self, state):
        """Test erasing a wrong digit leaves the counter alone."""
        new = run(state, SelectCell(0, 2), EnterDigit(1), EnterDigit(1))
        assert new.board.get(0, 2) == EMPTY
        assert new.placements == state.placements
        assert new.mistakes == 1

    def test_overwrite_correct_digit(self, state):
        """Test replacing a correct digit takes it off the counter."""
        new = run(state, SelectCell(0, 2), EnterDigit(4), EnterDigit(1))
        assert new.placements == state.placements
        assert new.placements == new.board.count_placements()

    def test_no_selection(self, state):
        """Test digit entry without a selection is a no-op."""
        assert run(state, EnterDigit(4)) is state

    def test_given_cell(self, state):
        """Test digit entry on a given is a no-op."""
        selected = run(state, SelectCell(0, 0))
        assert run(selected, EnterDigit(1)) is selected

    def test_digit_out_of_range(self, state):
        """Test digits outside 1-9 are invariant violations."""
        with pytest.raises(InvariantViolation):
            run(state, SelectCell(0, 2), EnterDigit(10))

    def test_placement_eliminates_notes(self, state):
        """Test placing a digit removes it from peer notes."""
        new = run(state, Clue(), SelectCell(0, 2), EnterDigit(4))
        for r, c in new.board.get_peers(0, 2):
            cell = new.board.get(r, c)
            if isinstance(cell, NoteSet):
                assert 4 not in cell

    def test_input_state_untouched(self, state):
        """Test handlers never mutate the state they are given."""
        selected = run(state, SelectCell(0, 2))
        snapshot = selected.board.snapshot()
        run(selected, EnterDigit(4))
        assert selected.board.snapshot() == snapshot
        assert len(selected.history) == 0


class TestNotesMode:
    """Tests for notes mode."""

    def test_toggle_notes(self, state):
        """Test notes are added and removed without touching mistakes or counts."""
        new = run(state, ToggleNotesMode(), SelectCell(0, 2), EnterDigit(1), EnterDigit(2))
        assert new.board.get(0, 2) == NoteSet.of([1, 2])

        new = run(new, EnterDigit(1))
        assert new.board.get(0, 2) == NoteSet.of([2])
        assert new.mistakes == 0
        assert new.placements == state.placements

    def test_mode_toggle_keeps_grid(self, state):
        """Test toggling notes mode twice leaves every placed digit in place."""
        placed = run(state, SelectCell(0, 2), EnterDigit(4))
        toggled = run(placed, ToggleNotesMode(), ToggleNotesMode())

        assert toggled.board.get(0, 2) == Digit(4)
        assert toggled.board == placed.board
        assert not toggled.notes_mode

    def test_note_replaces_digit(self, state):
        """Test a note entered on a placed digit replaces it and uncounts it."""
        placed = run(state, SelectCell(0, 2), EnterDigit(4), ToggleNotesMode())
        noted = run(placed, EnterDigit(7))

        assert noted.board.get(0, 2) == NoteSet.of([7])
        assert noted.placements == state.placements
        assert noted.placements == noted.board.count_placements()
        assert len(noted.history) == len(placed.history) + 1

        undone = run(noted, Undo())
        assert undone.board.get(0, 2) == Digit(4)

    def test_note_replaces_wrong_digit(self, state):
        """Test replacing a wrong digit keeps the counter and the mistake."""
        placed = run(state, SelectCell(0, 2), EnterDigit(1), ToggleNotesMode())
        noted = run(placed, EnterDigit(1))

        assert noted.board.get(0, 2) == NoteSet.of([1])
        assert noted.placements == state.placements
        assert noted.mistakes == 1


class TestUndo:
    """Tests for Undo."""

    def test_empty_history(self, state):
        """Test undo with no history changes nothing."""
        selected = run(state, SelectCell(3, 3), ToggleNotesMode())
        undone = run(selected, Undo())

        assert undone is selected
        assert undone.selection == (3, 3)
        assert undone.notes_mode
        assert undone.mistakes == 0

    def test_restores_board_and_selection(self, state):
        """Test undo restores the board and the selection of the move."""
        moved = run(state, SelectCell(0, 2), EnterDigit(4), SelectCell(5, 5))
        undone = run(moved, Undo())

        assert undone.board.get(0, 2) == EMPTY
        assert undone.selection == (0, 2)
        assert undone.placements == state.placements

    def test_undo_keeps_mistakes(self, state):
        """Test undoing a wrong move does not refund the mistake."""
        undone = run(state, SelectCell(0, 2), EnterDigit(1), Undo())
        assert undone.board.get(0, 2) == EMPTY
        assert undone.mistakes == 1

    def test_undo_one_move_at_a_time(self, state):
        """Test each undo reverts exactly one move."""
        moved = run(state, SelectCell(0, 2), EnterDigit(4), SelectCell(0, 3), EnterDigit(6))
        once = run(moved, Undo())
        assert once.board.get(0, 3) == EMPTY
        assert once.board.get(0, 2) == Digit(4)

        twice = run(once, Undo())
        assert twice.board.get(0, 2) == EMPTY


class TestClue:
    """Tests for Clue."""

    def test_first_clue_reveals_notes(self, state):
        """Test the first clue fills notes for every open cell and is not undoable."""
        new = run(state, Clue())

        assert new.clue_stage is ClueStage.NOTES_REVEALED
        assert new.clue_notes_given
        assert len(new.history) == 0
        for r, c, cell in new.board.iter_cells():
            if not new.board.is_given(r, c):
                assert isinstance(cell, NoteSet)
                assert new.board.solution_at(r, c) in cell

    def test_second_clue_places_digit(self, state):
        """Test a later clue writes one correct digit and selects it."""
        notes = run(state, Clue())
        new = run(notes, Clue())

        assert new.clue_notes_given
        assert new.selection is not None
        row, col = new.selection
        assert not notes.board.is_correct(row, col)
        assert new.board.is_correct(row, col)
        assert new.board.count_filled() == notes.board.count_filled() + 1
        assert new.placements == new.board.count_placements()
        assert len(new.history) == 1

    def test_clue_fixes_wrong_digit(self):
        """Test a wrong digit is a clue target."""
        board = Board.from_string(TEST_SOLUTION[:80] + "0", TEST_SOLUTION)
        state = SessionState.initial(board).evolve(clue_stage=ClueStage.NOTES_REVEALED)
        state = run(state, SelectCell(8, 8), EnterDigit(1), Clue())

        assert state.board.get(8, 8) == Digit(9)
        assert state.selection == (8, 8)

    def test_clue_on_solved_board(self):
        """Test a clue does nothing once everything is correct."""
        board = Board.from_string(TEST_SOLUTION, TEST_SOLUTION)
        state = SessionState.initial(board).evolve(clue_stage=ClueStage.NOTES_REVEALED)
        assert run(state, Clue()) is state

    def test_clue_is_undoable(self, state):
        """Test undo reverts a digit clue but not the revealed notes."""
        notes = run(state, Clue())
        clued = run(notes, Clue())
        undone = run(clued, Undo())

        assert undone.board == notes.board
        assert undone.clue_notes_given


class TestPlacementCounter:
    """The incremental counter always agrees with a full recount."""

    def test_random_play_keeps_counter_consistent(self):
        """Test a long random command sequence."""
        board = Board.from_string(SINGLE_GIVEN, TEST_SOLUTION)
        state = SessionState.initial(board)
        rng = random.Random(1234)

        for _ in range(500):
            roll = rng.random()
            if roll < 0.35:
                command = SelectCell(rng.randrange(9), rng.randrange(9))
            elif roll < 0.75:
                command = EnterDigit(rng.randint(1, 9))
            elif roll < 0.85:
                command = Undo()
            elif roll < 0.93:
                command = ToggleNotesMode()
            else:
                command = Clue()
            state = command.apply(state, rng)
            assert state.placements == state.board.count_placements()


class TestCommandQueue:
    """Tests for CommandQueue."""

    def make_queue(self, board, strict=False):
        holder = {"state": SessionState.initial(board), "published": []}

        def publish(state):
            holder["state"] = state
            holder["published"].append(state)

        queue = CommandQueue(lambda: holder["state"], publish, random.Random(0), strict=strict)
        return queue, holder

    def test_submit_applies_and_publishes(self, board):
        """Test one submit gives one published state."""
        queue, holder = self.make_queue(board)
        queue.submit(SelectCell(0, 2))

        assert holder["state"].selection == (0, 2)
        assert len(holder["published"]) == 1
        assert not queue.is_draining

    def test_batch_publishes_once(self, board):
        """Test a drain folds all pending commands into one publish."""
        queue, holder = self.make_queue(board)
        for command in (SelectCell(0, 2), EnterDigit(4), SelectCell(0, 3), EnterDigit(6)):
            queue.enqueue(command)
        assert len(queue.pending) == 4

        assert queue.drain() == 4
        assert len(holder["published"]) == 1
        assert queue.pending == []

        state = holder["state"]
        assert state.board.get(0, 2) == Digit(4)
        assert state.board.get(0, 3) == Digit(6)
        # One snapshot per move, not per drain
        assert len(state.history) == 2

    def test_undo_within_batch(self, board):
        """Test undo sees snapshots pushed earlier in the same drain."""
        queue, holder = self.make_queue(board)
        for command in (SelectCell(0, 2), EnterDigit(4), SelectCell(0, 3), EnterDigit(6), Undo()):
            queue.enqueue(command)
        queue.drain()

        state = holder["state"]
        assert state.board.get(0, 2) == Digit(4)
        assert state.board.get(0, 3) == EMPTY
        assert len(state.history) == 1

    def test_reentrant_submit_is_queued(self, board):
        """Test commands submitted during a drain run in the same drain, in order."""
        holder = {"state": SessionState.initial(board), "published": []}
        queue = None

        def publish(state):
            holder["state"] = state
            holder["published"].append(state)
            if len(holder["published"]) == 1:
                queue.submit(EnterDigit(4))
                # The running drain has not picked it up yet
                assert queue.pending == [EnterDigit(4)]

        queue = CommandQueue(lambda: holder["state"], publish, random.Random(0))
        queue.submit(SelectCell(0, 2))

        assert holder["state"].board.get(0, 2) == Digit(4)
        assert len(holder["published"]) == 2
        assert queue.pending == []

    def test_drain_while_draining_is_noop(self, board):
        """Test a nested drain returns immediately."""
        queue = None
        nested = []

        def publish(state):
            nested.append(queue.drain())

        queue = CommandQueue(lambda: SessionState.initial(board), publish)
        queue.submit(ToggleNotesMode())
        assert nested == [0]

    def test_invariant_violation_skipped(self, board):
        """Test a bad command is skipped and later commands still run."""
        queue, holder = self.make_queue(board)
        for command in (SelectCell(0, 2), SelectCell(12, 0), EnterDigit(4)):
            queue.enqueue(command)
        queue.drain()

        state = holder["state"]
        assert state.selection == (0, 2)
        assert state.board.get(0, 2) == Digit(4)

    def test_strict_mode_raises(self, board):
        """Test strict mode re-raises and leaves the queue usable."""
        queue, holder = self.make_queue(board, strict=True)
        queue.enqueue(SelectCell(12, 0))
        queue.enqueue(SelectCell(1, 1))

        with pytest.raises(InvariantViolation):
            queue.drain()
        assert holder["published"] == []
        assert queue.pending == []
        assert not queue.is_draining

        queue.submit(SelectCell(1, 1))
        assert holder["state"].selection == (1, 1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
