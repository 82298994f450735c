"""
Particle System
===============

Short-lived cosmetic bursts for landings and power-up pickups.
Particles never feed back into scoring or collision.
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

from deploy_snacks.snack_core.config_loader import BurstConfig, GameConfig, get_config
from deploy_snacks.snack_core.entities import Particle
from deploy_snacks.snack_core.rng import GameRng
from deploy_snacks.snack_core.session import GameSession


KIND_SUCCESS = "success"
KIND_POWERUP = "powerup"


class ParticleSystem:
    """
    Emits radial bursts into a session and integrates them.

    - success: plain particles in the landed item's colour
    - powerup: sparkle particles in random palette colours
    """

    def __init__(self, rng: GameRng, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng

    def _burst_config(self, kind: str) -> BurstConfig:
        if kind == KIND_SUCCESS:
            return self._config.particles.success
        if kind == KIND_POWERUP:
            return self._config.particles.powerup
        raise ValueError(f"Unknown particle kind: {kind!r}")

    def emit(
        self,
        session: GameSession,
        kind: str,
        origin: Tuple[float, float],
        color: Optional[Tuple[int, int, int]] = None
    ) -> List[Particle]:
        """
        Emit one burst at ``origin``.

        Args:
            session: Session receiving the particles.
            kind: "success" or "powerup".
            origin: (x, y) burst centre.
            color: Particle colour. Ignored for power-up bursts, which
                pick from the configured palette.

        Returns:
            The particles that were added.
        """
        burst = self._burst_config(kind)
        rng = self._rng
        x, y = origin
        count = rng.randint(burst.count_min, burst.count_max)

        created: List[Particle] = []
        for i in range(count):
            angle = (2 * math.pi * i) / count + (rng.random() - 0.5) * burst.angle_jitter
            speed = rng.uniform(burst.speed_min, burst.speed_max)

            if kind == KIND_POWERUP or color is None:
                particle_color = rng.choice(burst.palette) if burst.palette else (255, 255, 255)
            else:
                particle_color = color

            created.append(Particle(
                x=x,
                y=y,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed - burst.upward_bias,
                color=particle_color,
                size=rng.uniform(burst.size_min, burst.size_max),
                life=burst.life,
                max_life=burst.life,
                gravity=burst.gravity,
                kind=kind
            ))

        session.particles.extend(created)
        return created

    def update(self, session: GameSession, dt: float) -> None:
        """Integrate all particles and prune the dead ones."""
        for particle in session.particles:
            particle.update(dt)
        session.particles[:] = [p for p in session.particles if not p.is_dead]
