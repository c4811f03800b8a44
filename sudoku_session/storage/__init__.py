"""File-backed session store and statistics recorder."""

from .json_store import JsonSessionStore
from .statistics import GameRecord, GameStats, JsonStatisticsRecorder, format_time

__all__ = [
    "JsonSessionStore",
    "GameRecord",
    "GameStats",
    "JsonStatisticsRecorder",
    "format_time",
]
