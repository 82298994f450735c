"""
Snack Core - The game simulation behind Deploy the Snacks.

This module provides the headless game simulation and all supporting
systems (physics, spawning, crows, particles, difficulty, scoring).

Main exports:
- CoreGame: Game state machine and per-frame tick
- GameSnapshot: Read-only per-tick view for presenters
- GameConfig: Configuration loaded from game_config.yaml
- RecordingPresenter / NullPresenter: Presenters for headless runs
- JsonHighScoreStore: High score persisted to a JSON file
"""

from deploy_snacks.snack_core.config_loader import GameConfig, get_config, load_config
from deploy_snacks.snack_core.food_catalog import FoodType, FoodCatalog, get_catalog
from deploy_snacks.snack_core.game import CoreGame
from deploy_snacks.snack_core.session import GameSession, GameState
from deploy_snacks.snack_core.events import (
    GameEvent,
    NullPresenter,
    Presenter,
    RecordingPresenter,
)
from deploy_snacks.snack_core.highscore import (
    HighScoreStore,
    JsonHighScoreStore,
    MemoryHighScoreStore,
)
from deploy_snacks.snack_core.state_snapshot import GameSnapshot, SnapshotBuilder

__all__ = [
    "GameConfig",
    "get_config",
    "load_config",
    "FoodType",
    "FoodCatalog",
    "get_catalog",
    "CoreGame",
    "GameSession",
    "GameState",
    "GameEvent",
    "NullPresenter",
    "Presenter",
    "RecordingPresenter",
    "HighScoreStore",
    "JsonHighScoreStore",
    "MemoryHighScoreStore",
    "GameSnapshot",
    "SnapshotBuilder",
]
