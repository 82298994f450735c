"""
Events & Presenter
==================

Sound-cue events and the narrow capability the simulation uses to reach
whatever draws and plays the game. The core never touches display or
audio primitives itself.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Protocol

if TYPE_CHECKING:
    from deploy_snacks.snack_core.state_snapshot import GameSnapshot

logger = logging.getLogger(__name__)


class GameEvent(Enum):
    """Discrete notifications; the value is the cue name."""
    DROP = "drop"
    SUCCESS = "success"
    POWER_UP = "powerup"
    POWER_UP_END = "powerup_end"
    CROW_SPAWN = "crow_spawn"
    CROW_HIT = "crow_hit"
    CROW_ESCAPE = "crow_escape"
    HEALTH_LOST = "health_lost"
    GAME_OVER = "game_over"
    MUSIC_START = "music_start"
    MUSIC_STOP = "music_stop"

    @property
    def cue(self) -> str:
        return self.value


class Presenter(Protocol):
    """
    Render/audio collaborator.

    Implementations must not raise out of these calls; playback or drawing
    failures are theirs to log and swallow.
    """

    def render(self, snapshot: "GameSnapshot") -> None:
        ...

    def play_cue(self, name: str) -> None:
        ...


class NullPresenter:
    """Presenter that ignores everything (headless runs)."""

    def render(self, snapshot: "GameSnapshot") -> None:
        pass

    def play_cue(self, name: str) -> None:
        pass


class RecordingPresenter:
    """Presenter that keeps every cue and the last snapshot."""

    def __init__(self) -> None:
        self.cues: List[str] = []
        self.frames: int = 0
        self.last_snapshot: Optional["GameSnapshot"] = None

    def render(self, snapshot: "GameSnapshot") -> None:
        self.frames += 1
        self.last_snapshot = snapshot

    def play_cue(self, name: str) -> None:
        logger.debug("cue: %s", name)
        self.cues.append(name)

    def count(self, name: str) -> int:
        return self.cues.count(name)

    def clear(self) -> None:
        self.cues.clear()
