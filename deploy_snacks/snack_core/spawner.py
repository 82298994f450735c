"""
Spawner
=======

Drop requests, drop-line movement and the crow threat.

Drop gating:
- A drop within ``drop_cooldown`` seconds of the previous one is ignored.
- Only one item may be in flight at a time.
- Rapid fire lifts both restrictions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from deploy_snacks.snack_core.config_loader import GameConfig, get_config
from deploy_snacks.snack_core.entities import Crow, FoodItem
from deploy_snacks.snack_core.rng import GameRng
from deploy_snacks.snack_core.session import GameSession

logger = logging.getLogger(__name__)


class Spawner:
    """Creates food items under the drop line when the gates allow it."""

    def __init__(self, rng: GameRng, config: Optional[GameConfig] = None):
        """
        Initialize spawner.

        Args:
            rng: Shared random source.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng

    def can_drop(self, session: GameSession, at_time: float) -> bool:
        """True if a drop requested at ``at_time`` would be accepted."""
        if not session.is_playing:
            return False

        rapid_fire = session.power_up.active
        if not rapid_fire and session.last_drop_time is not None:
            if at_time - session.last_drop_time < self._config.session.drop_cooldown:
                logger.debug(
                    "Drop on cooldown - wait %.1f more seconds",
                    session.remaining_drop_cooldown(at_time)
                )
                return False

        if session.food_items and not rapid_fire:
            logger.debug("Drop blocked - %d items still falling", len(session.food_items))
            return False
        return True

    def request_drop(self, session: GameSession, at_time: float) -> Optional[FoodItem]:
        """
        Drop an item under the drop line if the gates allow it.

        Args:
            session: Session to add the item to.
            at_time: Time of the request in seconds.

        Returns:
            The new FoodItem, or None if the request was ignored.
        """
        if not self.can_drop(session, at_time):
            return None

        if not session.power_up.active:
            session.last_drop_time = at_time

        food_type = self._rng.pick_food(session.difficulty.power_up_chance)
        line = session.drop_line
        food = FoodItem(
            x=line.x,
            y=line.y + self._config.drop_line.drop_offset_y,
            width=food_type.width,
            height=food_type.height,
            food_type=food_type,
            fall_speed=session.difficulty.drop_speed,
            uid=session.allocate_uid()
        )
        session.food_items.append(food)

        logger.debug(
            "Dropped %s: %s at x=%d",
            "power-up" if food.is_power_up else "food",
            food.type_name,
            round(food.x)
        )
        return food

    def update_drop_line(self, session: GameSession, dt: float) -> None:
        """Move the drop line, bouncing at the play-area edges."""
        session.drop_line.update(dt, self._config.board.width)


@dataclass
class CrowUpdate:
    """What happened to the crow during one tick."""
    escaped: bool = False
    left_area: bool = False


class CrowController:
    """
    Spawns, moves and resolves the crow.

    At most one crow is active at a time. An untapped crow escapes when its
    timer runs out; the caller charges the health for that.
    """

    def __init__(self, rng: GameRng, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng

    def maybe_spawn(self, session: GameSession) -> Optional[Crow]:
        """Roll ``difficulty.crow_chance`` and spawn a crow if none is active."""
        if session.has_active_crow:
            return None
        if not self._rng.chance(session.difficulty.crow_chance):
            return None
        return self.spawn(session)

    def spawn(self, session: GameSession) -> Crow:
        """Spawn a crow from a random edge, replacing any inactive one."""
        cfg = self._config.crow
        width = self._config.board.width
        from_left = self._rng.chance(0.5)

        crow = Crow(
            x=-cfg.spawn_margin if from_left else width + cfg.spawn_margin,
            y=cfg.min_y + self._rng.random() * cfg.y_range,
            vx=cfg.speed_x if from_left else -cfg.speed_x,
            vy=cfg.max_speed_y * (self._rng.random() - 0.5),
            radius=cfg.radius,
            timer=cfg.timer
        )
        session.crow = crow
        logger.debug("Crow spawned from the %s", "left" if from_left else "right")
        return crow

    def update(self, session: GameSession, dt: float) -> CrowUpdate:
        """
        Move the crow and count its timer down.

        On expiry every tower piece starts shaking and the crow is removed.
        """
        result = CrowUpdate()
        if not session.has_active_crow:
            return result

        cfg = self._config.crow
        crow = session.crow
        crow.x += crow.vx * dt
        crow.y += crow.vy * dt
        crow.wing_time += dt * cfg.wing_rate
        crow.timer -= dt

        if crow.timer <= 0:
            self.shake_tower(session)
            self._remove(session)
            result.escaped = True
            logger.debug("Crow escaped")
            return result

        margin = cfg.despawn_margin
        if crow.x < -margin or crow.x > self._config.board.width + margin:
            self._remove(session)
            result.left_area = True
        return result

    def shake_tower(self, session: GameSession) -> None:
        """Set the shake state on every tower piece."""
        cfg = self._config.crow
        for piece in session.tower:
            piece.shake(cfg.shake_time, cfg.shake_intensity)

    def accept_tap(self, session: GameSession, at_time: float) -> bool:
        """Record a tap unless it falls inside the debounce window."""
        if not session.is_playing:
            return False

        last = session.last_tap_time
        if last is not None and at_time - last < self._config.session.tap_debounce:
            return False
        session.last_tap_time = at_time
        return True

    def tap(self, session: GameSession, x: float, y: float, at_time: float) -> bool:
        """
        Handle a tap at (x, y).

        Taps closer together than ``tap_debounce`` are ignored.

        Returns:
            True if the tap hit (and removed) the active crow.
        """
        if not self.accept_tap(session, at_time):
            return False
        return self.hit(session, x, y)

    def hit(self, session: GameSession, x: float, y: float) -> bool:
        """Remove the active crow if (x, y) is inside its hit radius."""
        if not session.has_active_crow or not session.crow.contains(x, y):
            return False

        self._remove(session)
        logger.debug("Crow hit at (%d, %d)", round(x), round(y))
        return True

    @staticmethod
    def _remove(session: GameSession) -> None:
        """Deactivate the crow and clear it from the session."""
        session.crow.active = False
        session.crow = None
