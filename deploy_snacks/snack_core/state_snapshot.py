"""
State Snapshot
==============

Read-only view of a session for renderers and headless consumers.
Entity collections are copied into frozen records, so a snapshot never
changes after it is built. ``to_arrays()`` packs the same data into
fixed-size numpy arrays with masks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from deploy_snacks.snack_core.config_loader import GameConfig, SnapshotConfig, get_config
from deploy_snacks.snack_core.session import GameSession, GameState


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class FoodView:
    uid: int
    type_name: str
    emoji: str
    color: Color
    x: float
    y: float
    width: float
    height: float
    wobble_offset: float
    is_power_up: bool


@dataclass(frozen=True)
class PieceView:
    type_name: str
    emoji: str
    color: Color
    x: float
    y: float
    width: float
    height: float
    wobble_offset: float
    shake: float                 # Current shake amplitude in pixels


@dataclass(frozen=True)
class CrowView:
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    timer: float
    wing_time: float


@dataclass(frozen=True)
class ParticleView:
    x: float
    y: float
    color: Color
    size: float
    alpha: float
    kind: str


@dataclass(frozen=True)
class DropLineView:
    x: float
    y: float
    width: float
    direction: int
    speed: float


@dataclass(frozen=True)
class PowerUpView:
    active: bool
    remaining: float
    duration: float

    @property
    def progress(self) -> float:
        if not self.active or self.duration <= 0:
            return 0.0
        return self.remaining / self.duration


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete per-tick game state for rendering.

    Enough to draw a frame without any render-side simulation.
    """
    # Core state
    state: GameState
    score: int
    health: int
    max_health: int
    high_score: int
    is_win: bool
    clock: float

    # Board info
    board_width: float
    board_height: float
    platform_y: float
    platform_left: float
    platform_right: float
    win_line_y: float

    # Entities
    food_items: Tuple[FoodView, ...]
    tower: Tuple[PieceView, ...]
    crow: Optional[CrowView]
    particles: Tuple[ParticleView, ...]
    drop_line: DropLineView
    power_up: PowerUpView

    # Gates and rates
    drop_cooldown_remaining: float
    drop_cooldown: float
    line_speed: float
    drop_speed: float
    crow_chance: float

    # Derived
    tower_top_y: float           # Top edge of the highest piece (platform_y if empty)
    distance_to_win_line: float
    danger_level: float          # 0 = empty tower, 1 = touching the win line

    # Cues emitted since the previous snapshot
    events: Tuple[str, ...] = ()

    # Array sizes of the config the snapshot was built from
    capacity: Optional[SnapshotConfig] = None

    def to_arrays(self, config: Optional[GameConfig] = None) -> Dict[str, np.ndarray]:
        """
        Pack the snapshot into fixed-size numpy arrays.

        Variable-length collections are padded and paired with a boolean mask.
        Sizes come from ``config`` if given, else from the config the
        snapshot was built with.
        """
        if config is not None:
            caps = config.snapshot
        elif self.capacity is not None:
            caps = self.capacity
        else:
            caps = get_config().snapshot
        return _pack_arrays(self, caps)


def _pack_arrays(snapshot: GameSnapshot, caps: SnapshotConfig) -> Dict[str, np.ndarray]:
    food_xywh = np.zeros((caps.max_food_items, 4), dtype=np.float32)
    food_power = np.zeros(caps.max_food_items, dtype=bool)
    food_mask = np.zeros(caps.max_food_items, dtype=bool)
    for i, food in enumerate(snapshot.food_items[:caps.max_food_items]):
        food_xywh[i] = (food.x, food.y, food.width, food.height)
        food_power[i] = food.is_power_up
        food_mask[i] = True

    tower_xywh = np.zeros((caps.max_tower_pieces, 4), dtype=np.float32)
    tower_mask = np.zeros(caps.max_tower_pieces, dtype=bool)
    for i, piece in enumerate(snapshot.tower[:caps.max_tower_pieces]):
        tower_xywh[i] = (piece.x, piece.y, piece.width, piece.height)
        tower_mask[i] = True

    particle_xy = np.zeros((caps.max_particles, 2), dtype=np.float32)
    particle_alpha = np.zeros(caps.max_particles, dtype=np.float32)
    particle_mask = np.zeros(caps.max_particles, dtype=bool)
    for i, particle in enumerate(snapshot.particles[:caps.max_particles]):
        particle_xy[i] = (particle.x, particle.y)
        particle_alpha[i] = particle.alpha
        particle_mask[i] = True

    crow = snapshot.crow
    crow_state = np.zeros(4, dtype=np.float32)
    if crow is not None:
        crow_state[:] = (crow.x, crow.y, crow.radius, crow.timer)

    return {
        "score": np.array(snapshot.score, dtype=np.int64),
        "health": np.array(snapshot.health, dtype=np.int32),
        "drop_line_x": np.array(snapshot.drop_line.x, dtype=np.float32),
        "drop_cooldown_remaining": np.array(snapshot.drop_cooldown_remaining, dtype=np.float32),
        "power_up_remaining": np.array(snapshot.power_up.remaining, dtype=np.float32),
        "tower_top_y": np.array(snapshot.tower_top_y, dtype=np.float32),
        "danger_level": np.array(snapshot.danger_level, dtype=np.float32),
        "food_xywh": food_xywh,
        "food_is_power_up": food_power,
        "food_mask": food_mask,
        "tower_xywh": tower_xywh,
        "tower_mask": tower_mask,
        "particle_xy": particle_xy,
        "particle_alpha": particle_alpha,
        "particle_mask": particle_mask,
        "crow_active": np.array(crow is not None, dtype=bool),
        "crow_state": crow_state,
    }


class SnapshotBuilder:
    """Builds immutable snapshots from a live session."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        board = config.board
        self._board_width = float(board.width)
        self._board_height = float(board.height)
        self._platform_y = board.platform_y
        self._platform_left = board.platform_left
        self._platform_right = board.platform_right
        self._win_line_y = board.win_line_y

    def build(
        self,
        session: GameSession,
        events: Tuple[str, ...] = ()
    ) -> GameSnapshot:
        """Build a snapshot from current session state."""
        food_items = tuple(
            FoodView(
                uid=food.uid,
                type_name=food.type_name,
                emoji=food.emoji,
                color=food.color,
                x=food.x,
                y=food.y,
                width=food.width,
                height=food.height,
                wobble_offset=food.wobble_offset,
                is_power_up=food.is_power_up
            )
            for food in session.food_items
        )

        tower = tuple(
            PieceView(
                type_name=piece.type_name,
                emoji=piece.emoji,
                color=piece.color,
                x=piece.x,
                y=piece.y,
                width=piece.width,
                height=piece.height,
                wobble_offset=piece.wobble_offset,
                shake=piece.current_shake
            )
            for piece in session.tower
        )

        crow = None
        if session.has_active_crow:
            c = session.crow
            crow = CrowView(
                x=c.x, y=c.y, vx=c.vx, vy=c.vy,
                radius=c.radius, timer=c.timer, wing_time=c.wing_time
            )

        particles = tuple(
            ParticleView(
                x=p.x, y=p.y, color=p.color, size=p.size, alpha=p.alpha, kind=p.kind
            )
            for p in session.particles
        )

        line = session.drop_line
        power = session.power_up
        difficulty = session.difficulty

        # Derived tower metrics
        if session.tower:
            tower_top_y = min(piece.top for piece in session.tower)
        else:
            tower_top_y = self._platform_y
        span = self._platform_y - self._win_line_y
        climbed = self._platform_y - tower_top_y
        danger_level = max(0.0, min(1.0, climbed / span)) if span > 0 else 0.0

        return GameSnapshot(
            state=session.state,
            score=session.score,
            health=session.health,
            max_health=session.max_health,
            high_score=session.high_score,
            is_win=session.is_win,
            clock=session.clock,
            board_width=self._board_width,
            board_height=self._board_height,
            platform_y=self._platform_y,
            platform_left=self._platform_left,
            platform_right=self._platform_right,
            win_line_y=self._win_line_y,
            food_items=food_items,
            tower=tower,
            crow=crow,
            particles=particles,
            drop_line=DropLineView(
                x=line.x, y=line.y, width=line.width,
                direction=line.direction, speed=line.speed
            ),
            power_up=PowerUpView(
                active=power.active, remaining=power.remaining, duration=power.duration
            ),
            drop_cooldown_remaining=session.remaining_drop_cooldown(),
            drop_cooldown=self._config.session.drop_cooldown,
            line_speed=difficulty.line_speed,
            drop_speed=difficulty.drop_speed,
            crow_chance=difficulty.crow_chance,
            tower_top_y=tower_top_y,
            distance_to_win_line=max(0.0, tower_top_y - self._win_line_y),
            danger_level=danger_level,
            events=tuple(events),
            capacity=self._config.snapshot
        )
