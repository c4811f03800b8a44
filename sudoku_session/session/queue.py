"""Serialized command processing."""

from __future__ import annotations
from collections import deque
from typing import Callable, Deque, List, Optional
import logging
import random

from ..core.errors import InvariantViolation
from .commands import Command
from .state import SessionState

logger = logging.getLogger(__name__)


class CommandQueue:
    """
    Applies player commands in arrival order, one drain at a time.

    Commands are appended to a pending list. A drain loads the current state
    once, folds every pending command over it and publishes the result in a
    single step, so a burst of commands produces one new state. While a drain
    is running, newly submitted commands are only enqueued; the running drain
    picks them up before it returns.
    """

    def __init__(
        self,
        load: Callable[[], SessionState],
        publish: Callable[[SessionState], None],
        rng: Optional[random.Random] = None,
        strict: bool = False,
    ):
        """
        Initialize the queue.

        Args:
            load: Returns the state a drain starts from.
            publish: Receives the folded state at the end of a drain.
            rng: Random source handed to commands.
            strict: Re-raise InvariantViolation from a command instead of
                logging it and skipping the command.
        """
        self._load = load
        self._publish = publish
        self._rng = rng or random.Random()
        self._strict = strict
        self._pending: Deque[Command] = deque()
        self._draining = False

    @property
    def pending(self) -> List[Command]:
        return list(self._pending)

    @property
    def is_draining(self) -> bool:
        return self._draining

    def enqueue(self, command: Command) -> None:
        """Add a command without draining."""
        self._pending.append(command)

    def submit(self, command: Command) -> None:
        """Add a command and drain unless a drain is already running."""
        self.enqueue(command)
        self.drain()

    def drain(self) -> int:
        """
        Apply all pending commands.

        Returns:
            Number of commands applied (0 when called during a drain).
        """
        if self._draining:
            return 0

        self._draining = True
        applied = 0
        try:
            # Publishing may enqueue more commands; keep going until idle.
            while self._pending:
                state = self._load()
                while self._pending:
                    command = self._pending.popleft()
                    state = self._apply(state, command)
                    applied += 1
                self._publish(state)
        except InvariantViolation:
            self._pending.clear()
            raise
        finally:
            self._draining = False
        return applied

    def _apply(self, state: SessionState, command: Command) -> SessionState:
        try:
            new_state = command.apply(state, self._rng)
        except InvariantViolation as e:
            if self._strict:
                raise
            logger.error("Ignoring %r: %s", command, e)
            return state
        logger.debug("Applied %r", command)
        return new_state
