"""
Game Rules
==========

End-of-session conditions: the tower reaching the win line, or health
running out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from deploy_snacks.snack_core.config_loader import GameConfig, get_config
from deploy_snacks.snack_core.session import GameSession


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    is_win: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, False, "")

    @staticmethod
    def win(reason: str) -> "TerminationResult":
        return TerminationResult(True, True, reason)

    @staticmethod
    def loss(reason: str) -> "TerminationResult":
        return TerminationResult(True, False, reason)


class TerminationRules:
    """
    Handles game termination conditions.

    - Tower height: any piece whose top edge reaches the win line wins
    - Health: zero health loses
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._win_line_y = config.board.win_line_y

    @property
    def win_line_y(self) -> float:
        """Y coordinate a tower top has to reach to win."""
        return self._win_line_y

    def tower_top(self, session: GameSession) -> Optional[float]:
        """Top edge of the highest tower piece, or None for an empty tower."""
        if not session.tower:
            return None
        return min(piece.top for piece in session.tower)

    def check_health(self, session: GameSession) -> TerminationResult:
        if session.health <= 0:
            return TerminationResult.loss("health")
        return TerminationResult.none()

    def check_termination(self, session: GameSession) -> TerminationResult:
        """
        Check all termination conditions.

        Health is checked first, so a frame that both empties health and
        completes the tower counts as a loss.
        """
        result = self.check_health(session)
        if result.terminated:
            return result

        top = self.tower_top(session)
        if top is not None and top <= self._win_line_y:
            return TerminationResult.win("tower_height")

        return TerminationResult.none()
