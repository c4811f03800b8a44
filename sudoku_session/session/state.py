"""Session state value published by the command queue."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional

from ..core.board import Board
from .history import MoveHistory, Selection


class Status(Enum):
    """Gameplay status of a session."""
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not Status.ACTIVE


class ClueStage(Enum):
    """
    Progress of the two-phase clue action.

    The first clue reveals every candidate on the board; later clues reveal
    one correct digit each.
    """
    NOT_HINTED = "not_hinted"
    NOTES_REVEALED = "notes_revealed"


@dataclass(frozen=True)
class SessionState:
    """
    Everything a presentation layer needs to draw a session.

    Instances are never mutated; command handlers build new ones with
    `evolve`. The board inside a published state is owned by that state
    alone.
    """
    board: Board
    selection: Selection = None
    notes_mode: bool = False
    mistakes: int = 0
    elapsed_seconds: int = 0
    clue_stage: ClueStage = ClueStage.NOT_HINTED
    history: MoveHistory = field(default_factory=MoveHistory)
    # Correct placements per digit, givens included.
    placements: Dict[int, int] = field(default_factory=dict)
    status: Status = Status.ACTIVE
    paused: bool = False

    @classmethod
    def initial(cls, board: Board, elapsed_seconds: int = 0, mistakes: int = 0,
                history: Optional[MoveHistory] = None,
                clue_stage: ClueStage = ClueStage.NOT_HINTED) -> SessionState:
        """Build the state of a new or resumed session."""
        return cls(
            board=board,
            mistakes=max(0, mistakes),
            elapsed_seconds=max(0, elapsed_seconds),
            clue_stage=clue_stage,
            history=history if history is not None else MoveHistory(),
            placements=board.count_placements(),
        )

    def evolve(self, **changes) -> SessionState:
        return replace(self, **changes)

    @property
    def clue_notes_given(self) -> bool:
        return self.clue_stage is ClueStage.NOTES_REVEALED

    @property
    def selected_cell(self):
        """Cell value under the selection, or None."""
        if self.selection is None:
            return None
        return self.board.get(*self.selection)

    def is_digit_exhausted(self, digit: int) -> bool:
        """True once all nine occurrences of `digit` are correctly placed."""
        return self.placements.get(digit, 0) >= 9
