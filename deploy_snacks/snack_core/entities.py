"""
Entities
========

Plain data definitions for everything that lives in a game session:
falling food, tower pieces, the crow, particles and the timed states.

Positions are centres in play-area pixels with y growing downward.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from deploy_snacks.snack_core.food_catalog import FoodType


Color = Tuple[int, int, int]


@dataclass
class _Box:
    """Axis-aligned rectangle helpers shared by food and tower pieces."""
    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    def horizontal_overlap(self, other: "_Box") -> float:
        """Width of the shared horizontal span (negative when apart)."""
        return min(self.right, other.right) - max(self.left, other.left)


@dataclass
class FoodItem(_Box):
    """An item falling from the drop line."""
    food_type: Optional[FoodType] = None
    fall_speed: float = 0.0
    wobble_time: float = 0.0
    uid: int = 0

    @property
    def type_name(self) -> str:
        return self.food_type.name

    @property
    def color(self) -> Color:
        return self.food_type.color

    @property
    def emoji(self) -> str:
        return self.food_type.emoji

    @property
    def wobble_amount(self) -> float:
        return self.food_type.wobble

    @property
    def is_power_up(self) -> bool:
        return self.food_type.is_power_up

    @property
    def wobble_offset(self) -> float:
        """Horizontal draw offset from the wobble animation."""
        return math.sin(self.wobble_time) * self.wobble_amount


@dataclass
class TowerPiece(_Box):
    """A landed food item, fixed in place except for shake."""
    type_name: str = ""
    color: Color = (0, 0, 0)
    emoji: str = ""
    wobble_offset: float = 0.0
    wobble_speed: float = 0.0
    shake_time: float = 0.0
    shake_intensity: float = 0.0
    shake_duration: float = 0.0

    @property
    def is_shaking(self) -> bool:
        return self.shake_time > 0

    @property
    def current_shake(self) -> float:
        """Shake amplitude, fading linearly to zero."""
        if self.shake_time <= 0 or self.shake_duration <= 0:
            return 0.0
        return self.shake_intensity * (self.shake_time / self.shake_duration)

    def shake(self, duration: float, intensity: float) -> None:
        self.shake_time = duration
        self.shake_duration = duration
        self.shake_intensity = intensity

    def update_shake(self, dt: float) -> None:
        if self.shake_time > 0:
            self.shake_time = max(0.0, self.shake_time - dt)

    @classmethod
    def from_food(
        cls,
        food: FoodItem,
        wobble_offset: float = 0.0,
        wobble_speed: float = 0.0
    ) -> "TowerPiece":
        return cls(
            x=food.x,
            y=food.y,
            width=food.width,
            height=food.height,
            type_name=food.type_name,
            color=food.color,
            emoji=food.emoji,
            wobble_offset=wobble_offset,
            wobble_speed=wobble_speed
        )


@dataclass
class Crow:
    """The crow threat. Tap it before its timer runs out."""
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    timer: float
    wing_time: float = 0.0
    active: bool = True

    def contains(self, px: float, py: float) -> bool:
        """True if a tap at (px, py) hits the crow."""
        return math.hypot(px - self.x, py - self.y) < self.radius


@dataclass
class Particle:
    """A single cosmetic particle with ballistic motion."""
    x: float
    y: float
    vx: float
    vy: float
    color: Color
    size: float
    life: float
    max_life: float
    gravity: float
    kind: str = "success"

    @property
    def alpha(self) -> float:
        """Remaining life fraction, for fading."""
        if self.max_life <= 0:
            return 0.0
        return max(0.0, self.life / self.max_life)

    @property
    def is_dead(self) -> bool:
        return self.life <= 0

    def update(self, dt: float) -> None:
        self.x += self.vx * dt
        self.y += self.vy * dt
        self.vy += self.gravity * dt
        self.life -= dt


@dataclass
class PowerUpState:
    """Rapid-fire effect. Singleton per session."""
    duration: float
    active: bool = False
    remaining: float = 0.0

    @property
    def progress(self) -> float:
        """Fraction of the effect still left (1.0 right after pickup)."""
        if not self.active or self.duration <= 0:
            return 0.0
        return self.remaining / self.duration

    def activate(self) -> None:
        self.active = True
        self.remaining = self.duration

    def deactivate(self) -> None:
        self.active = False
        self.remaining = 0.0

    def update(self, dt: float) -> bool:
        """Count down. Returns True if the effect expired this call."""
        if not self.active:
            return False
        self.remaining -= dt
        if self.remaining <= 0:
            self.deactivate()
            return True
        return False


@dataclass
class DropLine:
    """Bar that bounces between the play-area edges; drops start under it."""
    x: float
    y: float
    width: float
    speed: float
    direction: int = 1

    def update(self, dt: float, area_width: float) -> None:
        self.x += self.direction * self.speed * dt

        half_width = self.width / 2
        if self.x - half_width <= 0:
            self.x = half_width
            self.direction = 1
        elif self.x + half_width >= area_width:
            self.x = area_width - half_width
            self.direction = -1


@dataclass
class DifficultyState:
    """Rates derived from score each frame."""
    line_speed: float
    drop_speed: float
    crow_chance: float
    power_up_chance: float
    progress: float = 0.0
