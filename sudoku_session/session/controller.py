"""Session controller: owns the published state and talks to collaborators."""

from __future__ import annotations
from dataclasses import replace
from typing import Callable, Iterable, List, Optional
import logging
import random

from ..config import SessionConfig
from .collaborators import SessionStore, StatisticsRecorder
from .commands import (
    Command, SelectCell, ClearSelection, EnterDigit, Undo, ToggleNotesMode, Clue,
)
from .queue import CommandQueue
from .record import PuzzleRecord
from .state import ClueStage, SessionState, Status

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]


class SessionController:
    """
    A single play session over one puzzle.

    All gameplay goes through a CommandQueue; after each published state the
    controller derives the completion and failure status. Both transitions
    are latched and reported to the statistics recorder exactly once.
    Collaborator calls happen after the new state is published and their
    failures are logged, never raised.
    """

    def __init__(
        self,
        record: PuzzleRecord,
        store: Optional[SessionStore] = None,
        statistics: Optional[StatisticsRecorder] = None,
        config: Optional[SessionConfig] = None,
    ):
        """
        Start or resume a session.

        Args:
            record: Puzzle to play, possibly carrying saved progress.
            store: Where the session is saved on exit.
            statistics: Receives completed/lost/abandoned events.
            config: Session rules (default: SessionConfig()).
        """
        self.record = record
        self.config = config or SessionConfig()
        self._store = store
        self._statistics = statistics
        self._listeners: List[Listener] = []
        self._abandoned = False

        state = SessionState.initial(
            record.build_board(),
            elapsed_seconds=record.elapsed_time,
            mistakes=record.mistakes,
            history=record.build_history(),
            clue_stage=ClueStage.NOTES_REVEALED if record.clue_notes_given else ClueStage.NOT_HINTED,
        )
        # A resumed record that is already over was reported when it ended.
        self._state = state.evolve(status=self._derive_status(state))

        self.queue = CommandQueue(
            load=lambda: self._state,
            publish=self._publish,
            rng=random.Random(self.config.seed),
            strict=self.config.strict,
        )

    @classmethod
    def from_store(
        cls,
        store: SessionStore,
        statistics: Optional[StatisticsRecorder] = None,
        config: Optional[SessionConfig] = None,
    ) -> Optional[SessionController]:
        """
        Resume the session saved in `store`.

        Returns:
            The controller, or None if nothing usable was saved.
        """
        try:
            data = store.load()
        except Exception:
            logger.exception("Loading the saved session failed")
            return None
        if data is None:
            return None

        try:
            record = PuzzleRecord.from_dict(data)
            return cls(record, store=store, statistics=statistics, config=config)
        except (TypeError, ValueError) as e:
            logger.error("Saved session is unusable: %s", e)
            return None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> Status:
        return self._state.status

    @property
    def difficulty(self):
        return self.record.difficulty

    @property
    def is_ticking(self) -> bool:
        """True while the timer should run."""
        return self._state.status is Status.ACTIVE and not self._state.paused

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for published states.

        Returns:
            A callable that unsubscribes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Commands

    def dispatch(self, command: Command) -> None:
        self.queue.submit(command)

    def dispatch_many(self, commands: Iterable[Command]) -> None:
        """Queue several commands and apply them in one drain."""
        for command in commands:
            self.queue.enqueue(command)
        self.queue.drain()

    def select_cell(self, row: int, col: int) -> None:
        self.dispatch(SelectCell(row, col))

    def clear_selection(self) -> None:
        self.dispatch(ClearSelection())

    def enter_digit(self, digit: int) -> None:
        self.dispatch(EnterDigit(digit))

    def undo(self) -> None:
        self.dispatch(Undo())

    def toggle_notes_mode(self) -> None:
        self.dispatch(ToggleNotesMode())

    def clue(self) -> None:
        self.dispatch(Clue())

    def digit_available(self, digit: int) -> bool:
        """False once all nine occurrences of `digit` are correctly placed."""
        return not self._state.is_digit_exhausted(digit)

    # Timer

    def tick(self) -> bool:
        """
        Advance the elapsed time by one second.

        Returns:
            True if the session was ticking.
        """
        if not self.is_ticking:
            return False
        self._publish(self._state.evolve(elapsed_seconds=self._state.elapsed_seconds + 1))
        return True

    def pause(self) -> None:
        if self._state.paused:
            return
        logger.info("Session %s paused at %ss", self.record.id, self._state.elapsed_seconds)
        self._publish(self._state.evolve(paused=True))

    def resume(self) -> None:
        if not self._state.paused:
            return
        logger.info("Session %s resumed", self.record.id)
        self._publish(self._state.evolve(paused=False))

    # Lifecycle

    def restart(self) -> None:
        """Start the same puzzle over: no progress, time, mistakes or history."""
        fresh = replace(self.record, puzzle=None, move_history=[], elapsed_time=0,
                        mistakes=0, clue_notes_given=False)
        self._abandoned = False
        self._publish(SessionState.initial(fresh.build_board()))

    def abandon(self) -> bool:
        """
        Give up on an unfinished session.

        Returns:
            True if an abandoned event was reported.
        """
        if self._abandoned or self._state.status.is_terminal:
            return False
        self._abandoned = True
        logger.info("Session %s abandoned", self.record.id)
        if self._statistics is not None:
            self._call("abandoned event", self._statistics.abandoned, self.difficulty)
        if self._store is not None:
            self._call("clearing the session store", self._store.clear)
        return True

    def to_record(self) -> PuzzleRecord:
        """The puzzle record annotated with the current progress."""
        state = self._state
        return replace(
            self.record,
            puzzle=state.board.to_lists(),
            move_history=state.history.to_list(),
            elapsed_time=state.elapsed_seconds,
            mistakes=state.mistakes,
            clue_notes_given=state.clue_notes_given,
        )

    def save(self) -> bool:
        """Save the session. Returns False if there is no store or saving failed."""
        if self._store is None:
            return False
        return self._call("saving the session", self._store.save, self.to_record().to_dict())

    def exit(self) -> None:
        """Leave the session: save it while active, clear the store once it is over."""
        if self._state.status.is_terminal:
            if self._store is not None:
                self._call("clearing the session store", self._store.clear)
        elif not self._abandoned:
            self.save()

    # Internals

    def _derive_status(self, state: SessionState) -> Status:
        if state.status.is_terminal:
            return state.status
        if state.board.is_solved():
            return Status.COMPLETED
        if state.mistakes >= self.config.max_mistakes:
            return Status.FAILED
        return Status.ACTIVE

    def _publish(self, new_state: SessionState) -> None:
        previous = self._state.status
        status = self._derive_status(new_state)
        if status is not new_state.status:
            new_state = new_state.evolve(status=status)

        self._state = new_state
        for listener in list(self._listeners):
            self._call("state listener", listener, new_state)

        if status is not previous and status.is_terminal:
            self._on_finished(status)

    def _on_finished(self, status: Status) -> None:
        elapsed = self._state.elapsed_seconds
        logger.info("Session %s %s after %ss with %d mistakes",
                    self.record.id, status.value, elapsed, self._state.mistakes)

        if self._statistics is not None:
            if status is Status.COMPLETED:
                self._call("completed event", self._statistics.completed, elapsed, self.difficulty)
            else:
                self._call("lost event", self._statistics.lost, elapsed, self.difficulty)
        if self._store is not None:
            self._call("clearing the session store", self._store.clear)

    def _call(self, what: str, fn, *args) -> bool:
        try:
            fn(*args)
        except Exception:
            logger.exception("%s failed", what.capitalize())
            return False
        return True
