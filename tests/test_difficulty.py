"""
Tests for the score-driven difficulty ramp.
"""

import pytest

from deploy_snacks.snack_core.difficulty import DifficultyController
from deploy_snacks.snack_core.session import GameSession


@pytest.fixture
def controller(config):
    return DifficultyController(config)


class TestDifficultyRamp:
    """Test difficulty as a function of score."""

    def test_baseline(self, controller):
        diff = controller.compute(0)
        assert diff.progress == 0.0
        assert diff.line_speed == 100
        assert diff.drop_speed == 200
        assert diff.crow_chance == pytest.approx(0.002)

    def test_one_progress_step(self, controller):
        diff = controller.compute(200)
        assert diff.progress == pytest.approx(1.0)
        assert diff.line_speed == pytest.approx(200)
        assert diff.drop_speed == pytest.approx(250)
        assert diff.crow_chance == pytest.approx(0.005)

    def test_no_ceiling(self, controller):
        diff = controller.compute(2000)
        assert diff.line_speed == pytest.approx(1100)
        assert diff.drop_speed == pytest.approx(700)
        assert diff.crow_chance == pytest.approx(0.032)

    def test_power_up_chance_constant(self, controller, config):
        assert controller.compute(0).power_up_chance == config.power_up.chance
        assert controller.compute(5000).power_up_chance == config.power_up.chance

    def test_update_sets_line_speed(self, controller, config):
        session = GameSession.create(config)
        session.score = 100

        controller.update(session)

        assert session.difficulty.line_speed == pytest.approx(150)
        assert session.drop_line.speed == pytest.approx(150)

    def test_new_drops_use_current_speed(self, game):
        game.start(at_time=0.0)
        game.session.score = 400
        game.step(1.0 / 60.0)

        food = game.request_drop(1.0)
        assert food.fall_speed == pytest.approx(300)
