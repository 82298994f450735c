"""
Difficulty Controller
=====================

Recomputes line speed, fall speed and crow chance from the score every
frame. The ramp is linear and deliberately has no ceiling.
"""

from __future__ import annotations

from typing import Optional

from deploy_snacks.snack_core.config_loader import GameConfig, get_config
from deploy_snacks.snack_core.entities import DifficultyState
from deploy_snacks.snack_core.session import GameSession


class DifficultyController:
    """Maps score to a DifficultyState via ``progress = score / divisor``."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config

    def compute(self, score: int) -> DifficultyState:
        """Difficulty for a given score."""
        diff = self._config.difficulty
        progress = score / diff.progress_divisor
        return DifficultyState(
            line_speed=diff.base_line_speed + progress * diff.line_speed_per_progress,
            drop_speed=diff.base_drop_speed + progress * diff.drop_speed_per_progress,
            crow_chance=diff.base_crow_chance + progress * diff.crow_chance_per_progress,
            power_up_chance=self._config.power_up.chance,
            progress=progress
        )

    def update(self, session: GameSession) -> DifficultyState:
        """Refresh the session's difficulty and the drop line speed."""
        session.difficulty = self.compute(session.score)
        session.drop_line.speed = session.difficulty.line_speed
        return session.difficulty
