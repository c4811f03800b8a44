"""Session configuration."""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class SessionConfig:
    """Tunable rules of a play session."""
    # Mistakes that end the game.
    max_mistakes: int = 3
    # Wall-clock seconds per timer tick.
    tick_seconds: float = 1.0
    # Seed for the clue cell picker.
    seed: Optional[int] = None
    # Raise invariant violations instead of skipping the command.
    strict: bool = False

    def __post_init__(self):
        if self.max_mistakes < 1:
            raise ValueError(f"max_mistakes must be at least 1, got {self.max_mistakes}")
        if self.tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be positive, got {self.tick_seconds}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SessionConfig:
        """Build a config from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
