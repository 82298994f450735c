"""
Deploy the Snacks
=================

Simulation core for a food-stacking arcade game. The player drops snacks
from an oscillating drop line onto a tower that grows from a small ground
platform, while tapping away crows that would otherwise shake the tower.

- snack_core: entities, physics, spawning, difficulty, particles and the
  game state machine.

All tunable parameters live in game_config.yaml.
"""
