"""
RNG - Seeded Game Randomness
============================

One seeded random source per game, so a session replays identically
from the same seed and the same input timings.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

from deploy_snacks.snack_core.config_loader import GameConfig, get_config
from deploy_snacks.snack_core.food_catalog import FoodCatalog, FoodType, get_catalog

T = TypeVar("T")


class GameRng:
    """
    Random source for food picks, crow spawns and particle jitter.

    A drop is the power-up item with probability ``power_up_chance``,
    otherwise one of the regular foods picked uniformly.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize the random source.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._catalog: FoodCatalog = get_catalog(config)
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def pick_food(self, power_up_chance: Optional[float] = None) -> FoodType:
        """
        Pick the type of the next dropped item.

        Args:
            power_up_chance: Override for the configured power-up probability.

        Returns:
            The power-up item type or a regular food type.
        """
        if power_up_chance is None:
            power_up_chance = self._config.power_up.chance
        if self._rng.random() < power_up_chance:
            return self._catalog.power_up
        index = int(self._rng.random() * len(self._catalog))
        return self._catalog[min(index, len(self._catalog) - 1)]

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self._rng.random() < probability

    def random(self) -> float:
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return low + self._rng.random() * (high - low)

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends included."""
        return self._rng.randint(low, high)

    def choice(self, items: Sequence[T]) -> T:
        return self._rng.choice(items)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the generator.

        Args:
            seed: New random seed. Restarts the current seed if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)
