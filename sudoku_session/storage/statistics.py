"""Aggregate game statistics kept in a JSON file."""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional
import json
import logging
import os
import time

from ..session.record import Difficulty

logger = logging.getLogger(__name__)


@dataclass
class GameStats:
    """Totals over every finished or abandoned game."""
    total_games_played: int = 0
    # Seconds spent on completed games.
    total_time_played: int = 0
    # None until the first completed game.
    fastest_time: Optional[int] = None
    slowest_time: int = 0
    games_completed: int = 0
    games_abandoned: int = 0
    games_lost: int = 0

    @property
    def win_rate(self) -> float:
        """Percentage of played games that were completed."""
        if self.total_games_played == 0:
            return 0.0
        return 100.0 * self.games_completed / self.total_games_played

    @property
    def average_time(self) -> float:
        if self.games_completed == 0:
            return 0.0
        return self.total_time_played / self.games_completed

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameStats:
        stats = cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        # A zero fastest time can only come from a corrupted file.
        if not stats.fastest_time:
            stats.fastest_time = None
        return stats


@dataclass
class GameRecord:
    """One finished or abandoned game."""
    id: str
    completed_at: int
    # None for abandoned games.
    time_spent: Optional[int]
    completed: bool
    lost: bool
    difficulty: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameRecord:
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def format_time(seconds: int) -> str:
    """Format seconds as M:SS, or H:MM:SS from one hour up."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class JsonStatisticsRecorder:
    """
    Records completed, lost and abandoned games.

    Stats and game records live together in one JSON file that is rewritten
    after every event.
    """

    def __init__(self, path: str, clock: Callable[[], float] = time.time):
        """
        Initialize the recorder.

        Args:
            path: JSON file holding stats and records.
            clock: Returns the current time in seconds.
        """
        self.path = path
        self._clock = clock

    def completed(self, elapsed_seconds: int, difficulty: Difficulty) -> None:
        stats = self.get_stats()
        stats.total_games_played += 1
        stats.total_time_played += elapsed_seconds
        if stats.fastest_time is None:
            stats.fastest_time = elapsed_seconds
        else:
            stats.fastest_time = min(stats.fastest_time, elapsed_seconds)
        stats.slowest_time = max(stats.slowest_time, elapsed_seconds)
        stats.games_completed += 1
        self._append(stats, self._record(elapsed_seconds, difficulty, completed=True))

    def lost(self, elapsed_seconds: int, difficulty: Difficulty) -> None:
        stats = self.get_stats()
        stats.total_games_played += 1
        stats.games_lost += 1
        self._append(stats, self._record(elapsed_seconds, difficulty, lost=True))

    def abandoned(self, difficulty: Difficulty) -> None:
        stats = self.get_stats()
        stats.total_games_played += 1
        stats.games_abandoned += 1
        self._append(stats, self._record(None, difficulty))

    def get_stats(self) -> GameStats:
        return GameStats.from_dict(self._read().get("stats", {}))

    def get_records(self) -> List[GameRecord]:
        return [GameRecord.from_dict(r) for r in self._read().get("records", [])]

    def recent_games(self, limit: int = 10) -> List[GameRecord]:
        """Most recent games first."""
        records = sorted(self.get_records(), key=lambda r: r.completed_at, reverse=True)
        return records[:limit]

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
        logger.info("Statistics cleared")

    def _record(self, time_spent: Optional[int], difficulty: Difficulty,
                completed: bool = False, lost: bool = False) -> GameRecord:
        now = int(self._clock() * 1000)
        return GameRecord(
            id=str(now),
            completed_at=now,
            time_spent=time_spent,
            completed=completed,
            lost=lost,
            difficulty=difficulty.value,
        )

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read statistics from %s: %s", self.path, e)
            return {}

    def _append(self, stats: GameStats, record: GameRecord) -> None:
        records = self._read().get("records", [])
        records.append(record.to_dict())

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({"stats": stats.to_dict(), "records": records}, f, indent=2)
        logger.info("Game recorded: %s", record)
