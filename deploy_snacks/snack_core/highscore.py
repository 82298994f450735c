"""
High Score Storage
==================

Persistence collaborator for the single integer high score. Storage
failures are logged here and never reach the simulation.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol, Union

logger = logging.getLogger(__name__)

DEFAULT_KEY = "deploySnacksHighScore"


class HighScoreStore(Protocol):
    def load(self) -> int:
        ...

    def save(self, score: int) -> None:
        ...


class MemoryHighScoreStore:
    """Keeps the high score in memory only."""

    def __init__(self, initial: int = 0):
        self.value = int(initial)
        self.saves = 0

    def load(self) -> int:
        return self.value

    def save(self, score: int) -> None:
        self.value = int(score)
        self.saves += 1


class JsonHighScoreStore:
    """
    Stores the high score in a small JSON file.

    File format::

        {"deploySnacksHighScore": 120, "saved_at": "2026-01-19T14:30:52"}

    A missing, unreadable or malformed file loads as 0.
    """

    def __init__(self, path: Union[str, Path], key: str = DEFAULT_KEY):
        self._path = Path(path)
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> int:
        if not self._path.exists():
            return 0
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return max(0, int(data.get(self._key, 0)))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not read high score from %s: %s", self._path, e)
            return 0

    def save(self, score: int) -> None:
        data = {
            self._key: int(score),
            "saved_at": datetime.now().isoformat(timespec="seconds"),
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning("Could not save high score to %s: %s", self._path, e)
            return
        logger.info("New high score saved: %d", score)
