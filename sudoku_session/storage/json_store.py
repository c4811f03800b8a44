"""JSON file storage for the in-progress session."""

from __future__ import annotations
from typing import Any, Dict, Optional
import json
import logging
import os

logger = logging.getLogger(__name__)


class JsonSessionStore:
    """
    Keeps one saved session in a JSON file.

    `load` returns None when the file is missing or unreadable; `save` and
    `clear` let OSError propagate to the caller.
    """

    def __init__(self, path: str):
        self.path = path

    def save(self, record: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w") as f:
            json.dump(record, f, indent=2)
        os.replace(tmp_path, self.path)
        logger.debug("Session saved to %s", self.path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not load saved session from %s: %s", self.path, e)
            return None

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
            logger.debug("Session store %s cleared", self.path)
