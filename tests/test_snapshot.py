"""
Tests for the read-only snapshot and its numpy export.
"""

import dataclasses

import numpy as np
import pytest

from deploy_snacks.snack_core.entities import TowerPiece
from deploy_snacks.snack_core.game import CoreGame
from deploy_snacks.snack_core.session import GameState


class TestSnapshotContents:
    """Test what a snapshot carries."""

    def test_initial_values(self, game):
        snapshot = game.start(at_time=0.0)

        assert snapshot.state is GameState.PLAYING
        assert snapshot.score == 0
        assert snapshot.health == 3
        assert snapshot.max_health == 3
        assert snapshot.board_width == 800
        assert snapshot.platform_y == 570
        assert snapshot.win_line_y == 50
        assert snapshot.tower_top_y == 570
        assert snapshot.danger_level == 0.0
        assert snapshot.crow is None
        assert snapshot.drop_line.x == 400

    def test_events_drained(self, game):
        game.start(at_time=0.0)
        game.request_drop(0.0)

        first = game.snapshot()
        second = game.snapshot()

        assert first.events == ("drop",)
        assert second.events == ()

    def test_frozen(self, game):
        snapshot = game.snapshot()
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.score = 99

    def test_detached_from_session(self, game):
        game.start(at_time=0.0)
        game.request_drop(0.0)
        snapshot = game.snapshot()
        y = snapshot.food_items[0].y

        game.step(1.0 / 30.0)

        assert snapshot.food_items[0].y == y
        assert game.snapshot().food_items[0].y > y

    def test_cooldown_remaining(self, game):
        game.start(at_time=0.0)
        game.request_drop(0.0)
        snapshot = game.tick(0.5)
        assert snapshot.drop_cooldown_remaining == pytest.approx(1.0)
        assert snapshot.drop_cooldown == 1.5

    def test_danger_level(self, game):
        game.start(at_time=0.0)
        # Top edge at 310: halfway between the platform and the win line
        game.session.tower.append(TowerPiece(x=400, y=322.5, width=40, height=25))

        snapshot = game.snapshot()

        assert snapshot.tower_top_y == pytest.approx(310)
        assert snapshot.distance_to_win_line == pytest.approx(260)
        assert snapshot.danger_level == pytest.approx(0.5)

    def test_crow_and_shake(self, game):
        game.start(at_time=0.0)
        game.session.tower.append(TowerPiece(x=400, y=557.5, width=40, height=25))
        crow = game.crows.spawn(game.session)
        game.crows.shake_tower(game.session)

        snapshot = game.snapshot()

        assert snapshot.crow.x == crow.x
        assert snapshot.crow.timer == 3.0
        assert snapshot.tower[0].shake == pytest.approx(5.0)

    def test_power_up_progress(self, game):
        game.start(at_time=0.0)
        game.session.power_up.activate()
        game.step(0.0)
        assert game.snapshot().power_up.progress == pytest.approx(1.0)


class TestSnapshotArrays:
    """Test the fixed-size numpy export."""

    def test_shapes(self, game, quiet_config):
        game.start(at_time=0.0)
        arrays = game.snapshot().to_arrays(quiet_config)

        assert arrays["food_xywh"].shape == (32, 4)
        assert arrays["food_mask"].shape == (32,)
        assert arrays["tower_xywh"].shape == (64, 4)
        assert arrays["particle_xy"].shape == (256, 2)
        assert arrays["crow_state"].shape == (4,)

    def test_masks_follow_entities(self, game, quiet_config):
        game.start(at_time=0.0)
        game.request_drop(0.0)
        game.session.tower.append(TowerPiece(x=400, y=557.5, width=40, height=25))

        arrays = game.snapshot().to_arrays(quiet_config)

        assert arrays["food_mask"].sum() == 1
        assert arrays["tower_mask"].sum() == 1
        np.testing.assert_allclose(arrays["tower_xywh"][0], [400, 557.5, 40, 25])
        assert not arrays["crow_active"]

    def test_crow_packed(self, game, quiet_config):
        game.start(at_time=0.0)
        crow = game.crows.spawn(game.session)

        arrays = game.snapshot().to_arrays(quiet_config)

        assert arrays["crow_active"]
        assert arrays["crow_state"][2] == pytest.approx(crow.radius)

    def test_sizes_follow_game_config(self, quiet_config):
        small = dataclasses.replace(
            quiet_config,
            snapshot=dataclasses.replace(quiet_config.snapshot, max_food_items=4, max_tower_pieces=8)
        )
        game = CoreGame(config=small, seed=1)
        game.start(at_time=0.0)
        snapshot = game.snapshot()

        arrays = snapshot.to_arrays()

        assert snapshot.capacity == small.snapshot
        assert arrays["food_xywh"].shape == (4, 4)
        assert arrays["tower_mask"].shape == (8,)
        assert snapshot.to_arrays(quiet_config)["food_xywh"].shape == (32, 4)
