"""
Tests for drop gating and the drop line.
"""

import pytest

from deploy_snacks.snack_core.entities import DropLine
from deploy_snacks.snack_core.rng import GameRng
from deploy_snacks.snack_core.session import GameSession, GameState
from deploy_snacks.snack_core.spawner import Spawner


@pytest.fixture
def spawner(quiet_config):
    return Spawner(GameRng(quiet_config, seed=5), quiet_config)


@pytest.fixture
def session(quiet_config):
    session = GameSession.create(quiet_config)
    session.state = GameState.PLAYING
    return session


class TestDropRequests:
    """Test drop placement and gating."""

    def test_drop_under_line(self, spawner, session):
        food = spawner.request_drop(session, 0.0)

        assert food is not None
        assert food.x == 400
        assert food.y == 50 + 20
        assert food.fall_speed == 200
        assert not food.is_power_up
        assert session.food_items == [food]
        assert session.last_drop_time == 0.0

    def test_ignored_outside_playing(self, spawner, session):
        session.state = GameState.PAUSED
        assert spawner.request_drop(session, 0.0) is None

        session.state = GameState.MENU
        assert spawner.request_drop(session, 0.0) is None
        assert session.food_items == []

    def test_cooldown(self, spawner, session):
        assert spawner.request_drop(session, 0.0) is not None
        session.food_items.clear()

        assert spawner.request_drop(session, 1.0) is None
        assert spawner.request_drop(session, 1.5) is not None

    def test_one_in_flight(self, spawner, session):
        assert spawner.request_drop(session, 0.0) is not None
        assert spawner.request_drop(session, 5.0) is None
        assert len(session.food_items) == 1

    def test_remaining_cooldown(self, spawner, session):
        spawner.request_drop(session, 2.0)
        assert session.remaining_drop_cooldown(2.5) == pytest.approx(1.0)
        assert session.remaining_drop_cooldown(10.0) == 0.0

    def test_unique_uids(self, spawner, session):
        session.power_up.activate()
        uids = {spawner.request_drop(session, t * 0.01).uid for t in range(10)}
        assert len(uids) == 10


class TestRapidFire:
    """Test drops while the power-up is active."""

    def test_two_drops_within_100ms(self, spawner, session):
        session.power_up.activate()

        first = spawner.request_drop(session, 10.0)
        second = spawner.request_drop(session, 10.1)

        assert first is not None
        assert second is not None
        assert len(session.food_items) == 2

    def test_does_not_record_drop_time(self, spawner, session):
        session.power_up.activate()
        spawner.request_drop(session, 10.0)
        assert session.last_drop_time is None
        assert session.remaining_drop_cooldown(10.0) == 0.0

    def test_forced_power_up_chance(self, spawner, session):
        session.difficulty.power_up_chance = 1.0
        food = spawner.request_drop(session, 0.0)
        assert food.is_power_up
        assert food.type_name == "rapidFire"


class TestDropLine:
    """Test drop line movement."""

    def test_moves_with_speed(self, spawner, session):
        spawner.update_drop_line(session, 0.1)
        assert session.drop_line.x == pytest.approx(400 + 100 * 0.1)

    def test_bounces_at_right_edge(self):
        line = DropLine(x=790, y=50, width=80, speed=100, direction=1)
        line.update(0.1, 800)
        assert line.x == 760
        assert line.direction == -1

    def test_bounces_at_left_edge(self):
        line = DropLine(x=45, y=50, width=80, speed=100, direction=-1)
        line.update(0.1, 800)
        assert line.x == 40
        assert line.direction == 1

    def test_stays_inside_area(self):
        line = DropLine(x=400, y=50, width=80, speed=250, direction=1)
        for _ in range(1000):
            line.update(1.0 / 30.0, 800)
            assert 40 <= line.x <= 760
