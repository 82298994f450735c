"""
Physics World
=============

Gravity integration for falling food and collision resolution against the
ground platform and the tower of landed pieces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from deploy_snacks.snack_core.config_loader import GameConfig, get_config
from deploy_snacks.snack_core.entities import FoodItem, TowerPiece
from deploy_snacks.snack_core.session import GameSession

logger = logging.getLogger(__name__)


SURFACE_PLATFORM = "platform"
SURFACE_TOWER = "tower"

_EPSILON = 1e-6


@dataclass
class LandingResult:
    """A food item that came to rest this step."""
    food: FoodItem
    surface: str
    support: Optional[TowerPiece] = None


@dataclass
class PhysicsStepResult:
    """Everything the physics step resolved."""
    dt: float
    landings: List[LandingResult] = field(default_factory=list)
    lost: List[FoodItem] = field(default_factory=list)


def clamp_dt(dt: float, max_dt: float = 1.0 / 30.0) -> float:
    """Clamp a frame delta into [0, max_dt] to bound integration error."""
    if dt != dt or dt <= 0:  # NaN or non-positive
        return 0.0
    return min(dt, max_dt)


class PhysicsWorld:
    """
    Moves food items down and resolves landings.

    Handles:
    - Delta-time clamping
    - Fall and wobble integration
    - Ground platform landings (snap and clamp inside the platform)
    - Stack landings on tower pieces, topmost first
    - Slide-off for items that clip a piece without enough overlap
    - Items lost below the play area or knocked off the tower
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize physics world.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        board = config.board
        self._platform_y = board.platform_y
        self._platform_left = board.platform_left
        self._platform_right = board.platform_right
        self._lost_y = board.height + board.fall_out_margin

    @property
    def platform_y(self) -> float:
        """Y coordinate of the platform's top surface."""
        return self._platform_y

    @property
    def platform_left(self) -> float:
        return self._platform_left

    @property
    def platform_right(self) -> float:
        return self._platform_right

    @property
    def max_dt(self) -> float:
        return self._config.physics.max_dt

    def clamp_dt(self, dt: float) -> float:
        return clamp_dt(dt, self._config.physics.max_dt)

    def step(
        self,
        session: GameSession,
        dt: float,
        on_landing: Optional[Callable[[LandingResult], None]] = None
    ) -> PhysicsStepResult:
        """
        Advance every falling item by one (clamped) timestep.

        Items are resolved lowest first. ``on_landing`` runs as soon as an
        item comes to rest, so a piece it adds to ``session.tower`` is
        already there when the items above it are checked. Landed and lost
        items are removed from ``session.food_items``.

        Args:
            session: Session owning the food items and tower.
            dt: Elapsed time in seconds.
            on_landing: Called with each landing before the next item is checked.

        Returns:
            PhysicsStepResult with landings and lost items.
        """
        dt = self.clamp_dt(dt)
        result = PhysicsStepResult(dt=dt)
        if not session.food_items:
            return result

        wobble_rate = self._config.physics.wobble_rate
        rapid_fire = session.power_up.active

        for food in session.food_items:
            food.y += food.fall_speed * dt
            food.wobble_time += dt * wobble_rate

        done = set()
        for food in sorted(session.food_items, key=lambda f: f.bottom, reverse=True):
            landing = self.check_collision(food, session.tower, rapid_fire)
            blocked = not food.is_power_up and self.overlaps_tower(food, session.tower)

            if landing is not None and not blocked:
                result.landings.append(landing)
                if on_landing is not None:
                    on_landing(landing)
            elif blocked:
                # Squeezed into another piece: no room to rest
                logger.debug("Food %s knocked off the tower at x=%d", food.type_name, round(food.x))
                result.lost.append(food)
            elif food.y > self._lost_y:
                logger.debug(
                    "%s %s fell off screen at x=%d",
                    "Power-up" if food.is_power_up else "Food",
                    food.type_name,
                    round(food.x)
                )
                result.lost.append(food)
            else:
                continue
            done.add(id(food))

        session.food_items[:] = [food for food in session.food_items if id(food) not in done]
        return result

    def overlaps_tower(self, food: FoodItem, tower: List[TowerPiece]) -> bool:
        """True if the item's box cuts into any tower piece (touching edges is fine)."""
        for piece in tower:
            if food.horizontal_overlap(piece) <= _EPSILON:
                continue
            if min(food.bottom, piece.bottom) - max(food.top, piece.top) > _EPSILON:
                return True
        return False

    def check_collision(
        self,
        food: FoodItem,
        tower: List[TowerPiece],
        rapid_fire: bool = False
    ) -> Optional[LandingResult]:
        """
        Test one item against the tower, topmost piece first, then the platform.

        On a hit the item's position is snapped to its resting place. An item
        that clips a piece without enough overlap to stack slides sideways
        off it and keeps falling.

        Args:
            food: The falling item (mutated on landing or sliding).
            tower: Current tower pieces.
            rapid_fire: True while the power-up loosens stacking.

        Returns:
            LandingResult, or None if the item is still falling.
        """
        support = self._land_on_tower(food, tower, rapid_fire)
        if support is not None:
            return LandingResult(food=food, surface=SURFACE_TOWER, support=support)

        if self._land_on_platform(food):
            return LandingResult(food=food, surface=SURFACE_PLATFORM)
        return None

    def _land_on_platform(self, food: FoodItem) -> bool:
        if food.bottom < self._platform_y:
            return False
        if not (food.right > self._platform_left and food.left < self._platform_right):
            return False

        food.y = self._platform_y - food.height / 2

        # Keep the item within platform bounds
        if food.left < self._platform_left:
            food.x = self._platform_left + food.width / 2
        if food.right > self._platform_right:
            food.x = self._platform_right - food.width / 2

        logger.debug("Food landed on platform at x=%d, y=%d", round(food.x), round(food.y))
        return True

    def _land_on_tower(
        self,
        food: FoodItem,
        tower: List[TowerPiece],
        rapid_fire: bool
    ) -> Optional[TowerPiece]:
        physics = self._config.physics
        fraction = (
            physics.power_up_overlap_fraction if rapid_fire
            else physics.min_overlap_fraction
        )

        for piece in sorted(tower, key=lambda p: p.top):
            piece_top = piece.top
            overlap = food.horizontal_overlap(piece)
            if overlap <= _EPSILON or food.bottom < piece_top:
                continue

            # Items that overshoot the tolerance band but are still inside
            # the piece are caught too
            reach = max(piece_top + physics.landing_tolerance, piece.bottom)
            if food.top > reach:
                continue

            min_overlap = min(food.width, piece.width) * fraction
            if overlap <= min_overlap:
                self._slide_off(food, piece)
                continue

            food.y = piece_top - food.height / 2

            if rapid_fire:
                # Rapid fire pulls the item toward the support centre
                food.x += (piece.x - food.x) * physics.center_pull
            else:
                max_offset = (piece.width + food.width) / physics.max_offset_divisor
                if abs(food.x - piece.x) > max_offset:
                    if food.x > piece.x:
                        food.x = piece.x + max_offset
                    else:
                        food.x = piece.x - max_offset

            logger.debug("Food stacked on piece at height %d", round(food.y))
            return piece

        return None

    @staticmethod
    def _slide_off(food: FoodItem, piece: TowerPiece) -> None:
        """Push the item sideways, away from the piece centre, until they no longer overlap."""
        if food.x >= piece.x:
            food.x = piece.right + food.width / 2
        else:
            food.x = piece.left - food.width / 2
        logger.debug("Food %s slid off piece at x=%d", food.type_name, round(food.x))
