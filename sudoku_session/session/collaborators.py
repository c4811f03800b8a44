"""Interfaces of the collaborators a session talks to."""

from __future__ import annotations
from typing import Any, Dict, Optional, Protocol

from .record import Difficulty


class SessionStore(Protocol):
    """Durable storage for the one in-progress session."""

    def save(self, record: Dict[str, Any]) -> None:
        ...

    def load(self) -> Optional[Dict[str, Any]]:
        ...

    def clear(self) -> None:
        ...


class StatisticsRecorder(Protocol):
    """Aggregate statistics over finished games."""

    def completed(self, elapsed_seconds: int, difficulty: Difficulty) -> None:
        ...

    def lost(self, elapsed_seconds: int, difficulty: Difficulty) -> None:
        ...

    def abandoned(self, difficulty: Difficulty) -> None:
        ...
