"""
Food Catalog
============

Provides convenient access to food type definitions loaded from config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from deploy_snacks.snack_core.config_loader import (
    GameConfig,
    FoodConfig,
    get_config
)


@dataclass
class FoodType:
    """
    Runtime representation of a droppable item type.

    Wraps FoodConfig with convenience accessors.
    """
    config: FoodConfig

    @property
    def id(self) -> int:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def emoji(self) -> str:
        return self.config.emoji

    @property
    def color(self) -> Tuple[int, int, int]:
        return self.config.color

    @property
    def width(self) -> float:
        return self.config.width

    @property
    def height(self) -> float:
        return self.config.height

    @property
    def wobble(self) -> float:
        return self.config.wobble

    @property
    def is_power_up(self) -> bool:
        """True for the rapid-fire item."""
        return self.config.is_power_up

    def __repr__(self) -> str:
        return f"FoodType({self.id}: {self.name})"


class FoodCatalog:
    """
    The fixed food catalogue plus the power-up item.

    Regular foods have IDs 0..N-1, the power-up item has ID N.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._foods: Tuple[FoodType, ...] = tuple(
            FoodType(food_config) for food_config in config.foods
        )
        self._power_up = FoodType(config.power_up.item)

    def __len__(self) -> int:
        """Number of regular food types."""
        return len(self._foods)

    def __getitem__(self, food_id: int) -> FoodType:
        """Get a food type (or the power-up) by ID."""
        if 0 <= food_id < len(self._foods):
            return self._foods[food_id]
        if food_id == self._power_up.id:
            return self._power_up
        raise IndexError(f"Food ID {food_id} out of range [0, {len(self._foods)}]")

    def __iter__(self):
        """Iterate over regular food types."""
        return iter(self._foods)

    @property
    def foods(self) -> Tuple[FoodType, ...]:
        """Regular food types in order."""
        return self._foods

    @property
    def power_up(self) -> FoodType:
        """The rapid-fire item type."""
        return self._power_up

    @property
    def power_up_id(self) -> int:
        return self._power_up.id

    def is_power_up(self, food_id: int) -> bool:
        """Check if a food ID is the power-up item."""
        return food_id == self._power_up.id

    def get_by_name(self, name: str) -> Optional[FoodType]:
        """Get food type by name (case-insensitive), power-up included."""
        name_lower = name.lower()
        for food_type in self._foods + (self._power_up,):
            if food_type.name.lower() == name_lower:
                return food_type
        return None


# Module-level singleton
_cached_catalog: Optional[FoodCatalog] = None


def get_catalog(config: Optional[GameConfig] = None) -> FoodCatalog:
    """
    Get the food catalog singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        FoodCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or config is not None:
        _cached_catalog = FoodCatalog(config)
    return _cached_catalog
