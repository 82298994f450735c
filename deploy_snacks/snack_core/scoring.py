"""
Scoring System
==============

Awards landing points and keeps health inside [0, max_health].
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from deploy_snacks.snack_core.config_loader import GameConfig, get_config
from deploy_snacks.snack_core.entities import FoodItem
from deploy_snacks.snack_core.session import GameSession

logger = logging.getLogger(__name__)


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    food_name: str
    is_power_up: bool

    def __repr__(self) -> str:
        if self.is_power_up:
            return f"ScoreEvent(power_up={self.points})"
        return f"ScoreEvent({self.food_name}={self.points})"


class ScoreTracker:
    """
    Applies score and health changes to a session.

    Regular landings award ``landing_points``; power-up pickups award
    ``power_up_points``. Health changes are clamped to [0, max_health].
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

    def get_landing_score(self, food: FoodItem) -> int:
        """Points for a landed item."""
        if food.is_power_up:
            return self._config.scoring.power_up_points
        return self._config.scoring.landing_points

    def apply_landing(self, session: GameSession, food: FoodItem) -> ScoreEvent:
        """
        Add points for a landed item and return the event.

        Args:
            session: Session to update.
            food: The item that landed.

        Returns:
            ScoreEvent describing the points awarded.
        """
        points = self.get_landing_score(food)
        session.score += points
        return ScoreEvent(
            points=points,
            food_name=food.type_name,
            is_power_up=food.is_power_up
        )

    def lose_health(self, session: GameSession, amount: int = 1) -> int:
        """
        Remove health, never below zero.

        Returns:
            Health actually removed.
        """
        before = session.health
        session.health = max(0, session.health - amount)
        lost = before - session.health
        if lost:
            logger.debug("Health lost! Remaining: %d", session.health)
        return lost

    def gain_health(self, session: GameSession, amount: int = 1) -> int:
        """
        Restore health, never above max_health.

        Returns:
            Health actually restored.
        """
        before = session.health
        session.health = min(session.max_health, session.health + amount)
        return session.health - before
