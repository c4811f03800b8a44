"""Shared fixtures for session tests."""

import pytest

from sudoku_session.config import SessionConfig
from sudoku_session.core.board import Board
from sudoku_session.session import Difficulty, PuzzleRecord, SessionController


# A known puzzle and its solution
TEST_PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)

TEST_SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)

# Only (0, 0) = 5 is given
SINGLE_GIVEN = "5" + "0" * 80

# The solution with (0, 2) = 4 and (8, 0) = 3 left open
NEARLY_SOLVED = TEST_SOLUTION[:2] + "0" + TEST_SOLUTION[3:72] + "0" + TEST_SOLUTION[73:]


class FakeStore:
    """In-memory session store."""

    def __init__(self, data=None):
        self.data = data
        self.saves = 0
        self.clears = 0

    def save(self, record):
        self.data = record
        self.saves += 1

    def load(self):
        return self.data

    def clear(self):
        self.data = None
        self.clears += 1


class FakeStatistics:
    """Collects statistics events."""

    def __init__(self):
        self.events = []

    def completed(self, elapsed_seconds, difficulty):
        self.events.append(("completed", elapsed_seconds, difficulty))

    def lost(self, elapsed_seconds, difficulty):
        self.events.append(("lost", elapsed_seconds, difficulty))

    def abandoned(self, difficulty):
        self.events.append(("abandoned", difficulty))


class BrokenCollaborator:
    """Raises from every method."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise RuntimeError(f"{name} is down")
        return fail


def build_record(puzzle=TEST_PUZZLE, solution=TEST_SOLUTION, difficulty=Difficulty.HARD):
    board = Board.from_string(puzzle, solution)
    return PuzzleRecord.new(board.puzzle.tolist(), board.solution.tolist(),
                            difficulty, created_at=1700000000000)


@pytest.fixture
def board():
    return Board.from_string(TEST_PUZZLE, TEST_SOLUTION)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def statistics():
    return FakeStatistics()


@pytest.fixture
def make_controller(store, statistics):
    """Returns a function building a controller over the fake collaborators."""
    def _make(puzzle=TEST_PUZZLE, solution=TEST_SOLUTION, **config):
        config.setdefault("seed", 7)
        return SessionController(build_record(puzzle, solution), store=store,
                                 statistics=statistics, config=SessionConfig(**config))
    return _make
