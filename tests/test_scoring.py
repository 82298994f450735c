"""
Tests for landing points and health bookkeeping.
"""

import logging

import pytest

from deploy_snacks.snack_core.entities import FoodItem
from deploy_snacks.snack_core.food_catalog import FoodCatalog
from deploy_snacks.snack_core.scoring import ScoreEvent, ScoreTracker
from deploy_snacks.snack_core.session import GameSession


@pytest.fixture
def tracker(config):
    return ScoreTracker(config)


@pytest.fixture
def session(config):
    return GameSession.create(config)


@pytest.fixture
def catalog(config):
    return FoodCatalog(config)


def landed(food_type):
    return FoodItem(x=400, y=557.5, width=food_type.width, height=food_type.height, food_type=food_type)


class TestLandingPoints:
    """Test points awarded per landing."""

    def test_food_landing(self, tracker, session, catalog):
        event = tracker.apply_landing(session, landed(catalog.get_by_name("taco")))

        assert event.points == 10
        assert event.food_name == "taco"
        assert not event.is_power_up
        assert session.score == 10
        assert repr(event) == "ScoreEvent(taco=10)"

    def test_power_up_landing(self, tracker, session, catalog):
        event = tracker.apply_landing(session, landed(catalog.power_up))

        assert event.points == 50
        assert event.is_power_up
        assert session.score == 50
        assert repr(event) == "ScoreEvent(power_up=50)"

    def test_points_accumulate(self, tracker, session, catalog):
        for name in ("burger", "pizza", "donut"):
            tracker.apply_landing(session, landed(catalog.get_by_name(name)))
        assert session.score == 30

    def test_event_logged_on_landing(self, game, caplog):
        caplog.set_level(logging.DEBUG, logger="deploy_snacks.snack_core.game")
        game.start(at_time=0.0)
        food = game.request_drop(0.0)
        food.y = 555

        game.step(1.0 / 30.0)

        assert game.score == 10
        assert repr(ScoreEvent(10, food.type_name, False)) in caplog.text


class TestHealth:
    """Test health clamping."""

    def test_lose_never_below_zero(self, tracker, session):
        session.health = 1

        assert tracker.lose_health(session, 3) == 1
        assert session.health == 0
        assert tracker.lose_health(session) == 0

    def test_gain_capped_at_max(self, tracker, session):
        session.health = 2

        assert tracker.gain_health(session, 5) == 1
        assert session.health == session.max_health
        assert tracker.gain_health(session) == 0
