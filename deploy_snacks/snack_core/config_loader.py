"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import yaml


Color = Tuple[int, int, int]

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "game_config.yaml"
)


@dataclass(frozen=True)
class BoardConfig:
    """Play area geometry, ground platform and win line."""
    width: int                   # Play area width in pixels
    height: int                  # Play area height in pixels
    platform_offset: float       # Platform top is this far above the bottom
    platform_width: float        # Platform span, centred horizontally
    win_line_y: float            # Tower top at or above this wins
    fall_out_margin: float       # Distance below the bottom edge before an item is lost

    @property
    def platform_y(self) -> float:
        """Y coordinate of the platform's top surface."""
        return self.height - self.platform_offset

    @property
    def platform_left(self) -> float:
        return self.width / 2 - self.platform_width / 2

    @property
    def platform_right(self) -> float:
        return self.width / 2 + self.platform_width / 2


@dataclass(frozen=True)
class DropLineConfig:
    """Oscillating drop line geometry."""
    y: float
    width: float
    drop_offset_y: float         # Items spawn this far below the line


@dataclass(frozen=True)
class PhysicsConfig:
    """Integration and stacking parameters."""
    max_dt: float
    landing_tolerance: float
    min_overlap_fraction: float
    power_up_overlap_fraction: float
    center_pull: float
    max_offset_divisor: float
    wobble_rate: float


@dataclass(frozen=True)
class FoodConfig:
    """Configuration for a single droppable item type."""
    id: int
    name: str
    emoji: str
    color: Color
    width: float
    height: float
    wobble: float
    is_power_up: bool = False


@dataclass(frozen=True)
class PowerUpConfig:
    """Rapid-fire power-up item and effect."""
    item: FoodConfig
    chance: float                # Probability a drop is the power-up item
    duration: float              # Seconds the effect lasts


@dataclass(frozen=True)
class CrowConfig:
    """Crow threat parameters."""
    radius: float
    timer: float
    speed_x: float
    max_speed_y: float
    spawn_margin: float
    despawn_margin: float
    min_y: float
    y_range: float
    wing_rate: float
    shake_time: float
    shake_intensity: float


@dataclass(frozen=True)
class DifficultyConfig:
    """Linear difficulty ramp, driven by score."""
    progress_divisor: float
    base_line_speed: float
    line_speed_per_progress: float
    base_drop_speed: float
    drop_speed_per_progress: float
    base_crow_chance: float
    crow_chance_per_progress: float


@dataclass(frozen=True)
class BurstConfig:
    """Shape of one particle burst."""
    count_min: int
    count_max: int
    angle_jitter: float          # Total jitter width in radians
    speed_min: float
    speed_max: float
    upward_bias: float
    size_min: float
    size_max: float
    life: float
    gravity: float
    palette: Tuple[Color, ...] = ()


@dataclass(frozen=True)
class ParticleConfig:
    """Bursts by kind."""
    success: BurstConfig
    powerup: BurstConfig


@dataclass(frozen=True)
class SessionConfig:
    """Per-session limits and input gates."""
    max_health: int
    drop_cooldown: float
    tap_debounce: float


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    landing_points: int
    power_up_points: int


@dataclass(frozen=True)
class SnapshotConfig:
    """Fixed array sizes for the numpy snapshot export."""
    max_food_items: int
    max_tower_pieces: int
    max_particles: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    drop_line: DropLineConfig
    physics: PhysicsConfig
    foods: Tuple[FoodConfig, ...]
    power_up: PowerUpConfig
    crow: CrowConfig
    difficulty: DifficultyConfig
    particles: ParticleConfig
    session: SessionConfig
    scoring: ScoringConfig
    snapshot: SnapshotConfig

    @property
    def num_food_types(self) -> int:
        """Number of regular (non power-up) food types."""
        return len(self.foods)

    def get_food(self, food_id: int) -> FoodConfig:
        """Get food config by ID. The power-up item has the ID after the last food."""
        if 0 <= food_id < len(self.foods):
            return self.foods[food_id]
        if food_id == self.power_up.item.id:
            return self.power_up.item
        raise ValueError(f"Invalid food ID: {food_id}")


def _parse_color(color_data: List) -> Color:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_food(food_data: dict, food_id: int, is_power_up: bool = False) -> FoodConfig:
    """Parse a single food configuration from YAML."""
    return FoodConfig(
        id=food_id,
        name=str(food_data["name"]),
        emoji=str(food_data.get("emoji", "")),
        color=_parse_color(food_data["color"]),
        width=float(food_data["width"]),
        height=float(food_data["height"]),
        wobble=float(food_data.get("wobble", 0.5)),
        is_power_up=is_power_up
    )


def _parse_burst(burst_data: dict) -> BurstConfig:
    """Parse a particle burst description."""
    return BurstConfig(
        count_min=int(burst_data["count_min"]),
        count_max=int(burst_data["count_max"]),
        angle_jitter=float(burst_data.get("angle_jitter", 0.0)),
        speed_min=float(burst_data["speed_min"]),
        speed_max=float(burst_data["speed_max"]),
        upward_bias=float(burst_data.get("upward_bias", 0.0)),
        size_min=float(burst_data["size_min"]),
        size_max=float(burst_data["size_max"]),
        life=float(burst_data["life"]),
        gravity=float(burst_data.get("gravity", 0.0)),
        palette=tuple(_parse_color(c) for c in burst_data.get("palette", []))
    )


def _check_probability(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    board = config.board
    if board.width <= 0 or board.height <= 0:
        raise ValueError(f"Board size must be positive, got {board.width}x{board.height}")
    if not 0 < board.platform_width <= board.width:
        raise ValueError(
            f"platform_width ({board.platform_width}) must be in (0, {board.width}]"
        )
    if not 0 <= board.win_line_y < board.platform_y:
        raise ValueError(
            f"win_line_y ({board.win_line_y}) must lie above the platform ({board.platform_y})"
        )

    if config.drop_line.width <= 0 or config.drop_line.width > board.width:
        raise ValueError(f"drop_line.width must be in (0, {board.width}]")

    if config.physics.max_dt <= 0:
        raise ValueError(f"max_dt must be positive, got {config.physics.max_dt}")
    for name in ("min_overlap_fraction", "power_up_overlap_fraction", "center_pull"):
        value = getattr(config.physics, name)
        if not 0.0 < value <= 1.0:
            raise ValueError(f"physics.{name} must be in (0, 1], got {value}")
    if config.physics.max_offset_divisor <= 0:
        raise ValueError("physics.max_offset_divisor must be positive")

    if not config.foods:
        raise ValueError("At least one food type is required")
    for i, food in enumerate(config.foods):
        if food.id != i:
            raise ValueError(f"Food ID mismatch: expected {i}, got {food.id}")
        if food.width <= 0 or food.height <= 0:
            raise ValueError(f"Food '{food.name}' must have positive size")

    _check_probability("power_up.chance", config.power_up.chance)
    if config.power_up.duration <= 0:
        raise ValueError("power_up.duration must be positive")

    if config.crow.radius <= 0 or config.crow.timer <= 0:
        raise ValueError("crow.radius and crow.timer must be positive")

    if config.difficulty.progress_divisor <= 0:
        raise ValueError("difficulty.progress_divisor must be positive")
    _check_probability("difficulty.base_crow_chance", config.difficulty.base_crow_chance)

    for kind in ("success", "powerup"):
        burst = getattr(config.particles, kind)
        if not 0 < burst.count_min <= burst.count_max:
            raise ValueError(f"particles.{kind} count range is invalid")
        if burst.life <= 0:
            raise ValueError(f"particles.{kind}.life must be positive")
    if not config.particles.powerup.palette:
        raise ValueError("particles.powerup.palette must not be empty")

    if config.session.max_health <= 0:
        raise ValueError("session.max_health must be positive")
    if config.session.drop_cooldown < 0 or config.session.tap_debounce < 0:
        raise ValueError("session timers must not be negative")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"]),
        platform_offset=float(board_data.get("platform_offset", 30)),
        platform_width=float(board_data.get("platform_width", 120)),
        win_line_y=float(board_data["win_line_y"]),
        fall_out_margin=float(board_data.get("fall_out_margin", 50))
    )

    line_data = raw["drop_line"]
    drop_line = DropLineConfig(
        y=float(line_data["y"]),
        width=float(line_data["width"]),
        drop_offset_y=float(line_data.get("drop_offset_y", 20))
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        max_dt=float(physics_data.get("max_dt", 1.0 / 30.0)),
        landing_tolerance=float(physics_data.get("landing_tolerance", 5.0)),
        min_overlap_fraction=float(physics_data["min_overlap_fraction"]),
        power_up_overlap_fraction=float(physics_data["power_up_overlap_fraction"]),
        center_pull=float(physics_data.get("center_pull", 0.5)),
        max_offset_divisor=float(physics_data.get("max_offset_divisor", 3.0)),
        wobble_rate=float(physics_data.get("wobble_rate", 3.0))
    )

    foods = tuple(_parse_food(f, i) for i, f in enumerate(raw["foods"]))

    power_data = raw["power_up"]
    power_up = PowerUpConfig(
        item=_parse_food(power_data, len(foods), is_power_up=True),
        chance=float(power_data["chance"]),
        duration=float(power_data["duration"])
    )

    crow_data = raw["crow"]
    crow = CrowConfig(
        radius=float(crow_data["radius"]),
        timer=float(crow_data["timer"]),
        speed_x=float(crow_data["speed_x"]),
        max_speed_y=float(crow_data.get("max_speed_y", 20)),
        spawn_margin=float(crow_data.get("spawn_margin", 50)),
        despawn_margin=float(crow_data.get("despawn_margin", 100)),
        min_y=float(crow_data.get("min_y", 100)),
        y_range=float(crow_data.get("y_range", 200)),
        wing_rate=float(crow_data.get("wing_rate", 8.0)),
        shake_time=float(crow_data.get("shake_time", 0.5)),
        shake_intensity=float(crow_data.get("shake_intensity", 5.0))
    )

    diff_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        progress_divisor=float(diff_data["progress_divisor"]),
        base_line_speed=float(diff_data["base_line_speed"]),
        line_speed_per_progress=float(diff_data["line_speed_per_progress"]),
        base_drop_speed=float(diff_data["base_drop_speed"]),
        drop_speed_per_progress=float(diff_data["drop_speed_per_progress"]),
        base_crow_chance=float(diff_data["base_crow_chance"]),
        crow_chance_per_progress=float(diff_data["crow_chance_per_progress"])
    )

    particle_data = raw["particles"]
    particles = ParticleConfig(
        success=_parse_burst(particle_data["success"]),
        powerup=_parse_burst(particle_data["powerup"])
    )

    session_data = raw["session"]
    session = SessionConfig(
        max_health=int(session_data["max_health"]),
        drop_cooldown=float(session_data["drop_cooldown"]),
        tap_debounce=float(session_data.get("tap_debounce", 0.3))
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        landing_points=int(scoring_data["landing_points"]),
        power_up_points=int(scoring_data["power_up_points"])
    )

    snapshot_data = raw.get("snapshot", {})
    snapshot = SnapshotConfig(
        max_food_items=int(snapshot_data.get("max_food_items", 32)),
        max_tower_pieces=int(snapshot_data.get("max_tower_pieces", 64)),
        max_particles=int(snapshot_data.get("max_particles", 256))
    )

    config = GameConfig(
        board=board,
        drop_line=drop_line,
        physics=physics,
        foods=foods,
        power_up=power_up,
        crow=crow,
        difficulty=difficulty,
        particles=particles,
        session=session,
        scoring=scoring,
        snapshot=snapshot
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
