"""
Shared fixtures.

``quiet_config`` switches off random crows and power-ups so that tests
driving the full tick loop only see the events they set up themselves.
"""

from dataclasses import replace

import pytest

from deploy_snacks.snack_core.config_loader import load_config
from deploy_snacks.snack_core.events import RecordingPresenter
from deploy_snacks.snack_core.game import CoreGame


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def quiet_config(config):
    return replace(
        config,
        difficulty=replace(config.difficulty, base_crow_chance=0.0, crow_chance_per_progress=0.0),
        power_up=replace(config.power_up, chance=0.0)
    )


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def game(quiet_config, presenter):
    return CoreGame(config=quiet_config, seed=42, presenter=presenter)
