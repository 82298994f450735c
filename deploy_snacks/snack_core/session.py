"""
Game Session
============

The single owned aggregate of mutable game state. Every subsystem takes
the session explicitly; there is no module-level game state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from deploy_snacks.snack_core.config_loader import GameConfig
from deploy_snacks.snack_core.entities import (
    Crow,
    DifficultyState,
    DropLine,
    FoodItem,
    Particle,
    PowerUpState,
    TowerPiece,
)


class GameState(Enum):
    """Top-level game states."""
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "gameOver"


@dataclass
class GameSession:
    """
    Everything one game owns: counters, timers and entity collections.

    ``reset()`` starts a fresh game and keeps only the high score.
    """
    config: GameConfig
    drop_line: DropLine
    difficulty: DifficultyState
    power_up: PowerUpState
    state: GameState = GameState.MENU
    score: int = 0
    health: int = 0
    max_health: int = 0
    high_score: int = 0
    is_win: bool = False
    clock: float = 0.0
    last_drop_time: Optional[float] = None
    last_tap_time: Optional[float] = None
    next_uid: int = 0
    food_items: List[FoodItem] = field(default_factory=list)
    tower: List[TowerPiece] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)
    crow: Optional[Crow] = None

    @classmethod
    def create(cls, config: GameConfig, high_score: int = 0) -> "GameSession":
        """Build a session in the menu state with baseline values."""
        session = cls(
            config=config,
            drop_line=_baseline_drop_line(config),
            difficulty=baseline_difficulty(config),
            power_up=PowerUpState(duration=config.power_up.duration),
            max_health=config.session.max_health,
            health=config.session.max_health,
            high_score=high_score
        )
        return session

    @property
    def is_playing(self) -> bool:
        return self.state is GameState.PLAYING

    @property
    def is_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    @property
    def has_active_crow(self) -> bool:
        return self.crow is not None and self.crow.active

    def allocate_uid(self) -> int:
        uid = self.next_uid
        self.next_uid += 1
        return uid

    def reset(self) -> None:
        """Reset score, health, difficulty and all entities."""
        self.score = 0
        self.health = self.max_health
        self.is_win = False
        self.difficulty = baseline_difficulty(self.config)
        self.drop_line = _baseline_drop_line(self.config)
        self.power_up.deactivate()
        self.food_items.clear()
        self.tower.clear()
        self.particles.clear()
        self.crow = None
        self.last_drop_time = None
        self.last_tap_time = None
        self.next_uid = 0

    def remaining_drop_cooldown(self, now: Optional[float] = None) -> float:
        """Seconds until the next drop is allowed (0 during rapid fire)."""
        if self.power_up.active or self.last_drop_time is None:
            return 0.0
        if now is None:
            now = self.clock
        elapsed = now - self.last_drop_time
        return max(0.0, self.config.session.drop_cooldown - elapsed)


def baseline_difficulty(config: GameConfig) -> DifficultyState:
    """Difficulty at score 0."""
    diff = config.difficulty
    return DifficultyState(
        line_speed=diff.base_line_speed,
        drop_speed=diff.base_drop_speed,
        crow_chance=diff.base_crow_chance,
        power_up_chance=config.power_up.chance,
        progress=0.0
    )


def _baseline_drop_line(config: GameConfig) -> DropLine:
    return DropLine(
        x=config.board.width / 2,
        y=config.drop_line.y,
        width=config.drop_line.width,
        speed=config.difficulty.base_line_speed,
        direction=1
    )
