"""
Tests for falling, platform landings and stacking.
"""

import math

import pytest

from deploy_snacks.snack_core.entities import FoodItem, TowerPiece
from deploy_snacks.snack_core.food_catalog import FoodCatalog
from deploy_snacks.snack_core.physics_world import (
    SURFACE_PLATFORM,
    SURFACE_TOWER,
    PhysicsWorld,
    clamp_dt,
)
from deploy_snacks.snack_core.session import GameSession

DT = 1.0 / 30.0


@pytest.fixture
def catalog(config):
    return FoodCatalog(config)


@pytest.fixture
def physics(config):
    return PhysicsWorld(config)


@pytest.fixture
def session(config):
    return GameSession.create(config)


def make_food(catalog, name, x, y, fall_speed=200.0):
    food_type = catalog.get_by_name(name)
    return FoodItem(
        x=x, y=y,
        width=food_type.width, height=food_type.height,
        food_type=food_type, fall_speed=fall_speed
    )


def make_piece(catalog, name, x, y):
    food_type = catalog.get_by_name(name)
    return TowerPiece(
        x=x, y=y, width=food_type.width, height=food_type.height,
        type_name=food_type.name, color=food_type.color, emoji=food_type.emoji
    )


class TestClampDt:
    """Test delta-time clamping."""

    def test_passthrough(self):
        assert clamp_dt(0.01) == 0.01

    def test_caps_large_delta(self):
        assert clamp_dt(10.0) == pytest.approx(1.0 / 30.0)

    def test_non_positive_and_nan(self):
        assert clamp_dt(0.0) == 0.0
        assert clamp_dt(-1.0) == 0.0
        assert clamp_dt(float("nan")) == 0.0

    def test_world_uses_config(self, physics):
        assert physics.clamp_dt(5.0) == pytest.approx(physics.max_dt)


class TestFalling:
    """Test fall integration."""

    def test_fall_distance(self, physics, session, catalog):
        food = make_food(catalog, "burger", 400, 100)
        session.food_items.append(food)

        physics.step(session, DT)

        assert food.y == pytest.approx(100 + 200 * DT)
        assert session.food_items == [food]

    def test_large_delta_is_clamped(self, physics, session, catalog):
        food = make_food(catalog, "burger", 400, 100)
        session.food_items.append(food)

        result = physics.step(session, 10.0)

        assert result.dt == pytest.approx(DT)
        assert food.y == pytest.approx(100 + 200 * DT)

    def test_wobble_advances(self, physics, session, catalog):
        food = make_food(catalog, "donut", 400, 100)
        session.food_items.append(food)

        physics.step(session, DT)

        assert food.wobble_time == pytest.approx(3.0 * DT)
        assert food.wobble_offset == pytest.approx(math.sin(3.0 * DT) * 0.6)


class TestPlatformLanding:
    """Test landings on the ground platform."""

    def test_lands_on_platform(self, physics, session, catalog):
        food = make_food(catalog, "burger", 400, 555)
        session.food_items.append(food)

        result = physics.step(session, DT)

        assert len(result.landings) == 1
        assert result.landings[0].surface == SURFACE_PLATFORM
        assert food.y == pytest.approx(570 - 12.5)
        assert food.x == 400
        assert session.food_items == []

    def test_clamped_inside_platform(self, physics, session, catalog):
        # Left edge hangs 10px past the platform
        food = make_food(catalog, "burger", 350, 555)
        session.food_items.append(food)

        physics.step(session, DT)

        assert food.x == pytest.approx(340 + 20)

    def test_right_edge_clamp(self, physics, session, catalog):
        food = make_food(catalog, "burger", 455, 555)
        session.food_items.append(food)

        physics.step(session, DT)

        assert food.x == pytest.approx(460 - 20)

    def test_miss_platform_keeps_falling(self, physics, session, catalog):
        food = make_food(catalog, "burger", 100, 555)
        session.food_items.append(food)

        result = physics.step(session, DT)

        assert result.landings == []
        assert session.food_items == [food]


class TestLostItems:
    """Test items falling out of the play area."""

    def test_lost_below_margin(self, physics, session, catalog):
        food = make_food(catalog, "burger", 100, 649)
        session.food_items.append(food)

        result = physics.step(session, DT)

        assert result.lost == [food]
        assert session.food_items == []

    def test_not_lost_inside_margin(self, physics, session, catalog):
        food = make_food(catalog, "burger", 100, 640)
        session.food_items.append(food)

        result = physics.step(session, DT)

        assert result.lost == []
        assert session.food_items == [food]


class TestStacking:
    """Test landings on tower pieces."""

    def test_stacks_on_piece(self, physics, session, catalog):
        base = make_piece(catalog, "burger", 400, 557.5)
        session.tower.append(base)
        food = make_food(catalog, "pizza", 410, 533)
        session.food_items.append(food)

        result = physics.step(session, DT)

        assert len(result.landings) == 1
        landing = result.landings[0]
        assert landing.surface == SURFACE_TOWER
        assert landing.support is base
        assert food.y == pytest.approx(545 - 10)
        assert food.x == pytest.approx(410)

    def test_insufficient_overlap_slides_off(self, physics, session, catalog):
        # Overlap of 17.5px equals half the narrower width, which is not enough
        session.tower.append(make_piece(catalog, "burger", 400, 557.5))
        food = make_food(catalog, "pizza", 420, 533)
        session.food_items.append(food)

        result = physics.step(session, DT)

        assert result.landings == []
        assert session.food_items == [food]
        assert food.x == pytest.approx(420 + 17.5)

    def test_clipped_item_rests_beside_piece(self, physics, session, catalog):
        hotdog = make_piece(catalog, "hotdog", 400, 561)
        session.tower.append(hotdog)
        # 12px of the taco's 30px width hangs over the hotdog
        food = make_food(catalog, "taco", 425.5, 535)
        session.food_items.append(food)

        landings = []
        for _ in range(10):
            landings.extend(physics.step(session, DT).landings)
            if landings:
                break

        assert len(landings) == 1
        assert landings[0].surface == SURFACE_PLATFORM
        assert food.x == pytest.approx(437.5)
        assert food.y == pytest.approx(570 - 11)
        assert food.horizontal_overlap(hotdog) == pytest.approx(0.0)
        assert not physics.overlaps_tower(food, session.tower)

    def test_clipped_item_squeezed_by_platform_edge_is_lost(self, physics, session, catalog):
        session.tower.append(make_piece(catalog, "burger", 430, 557.5))
        food = make_food(catalog, "pizza", 465, 530)
        session.food_items.append(food)

        lost = []
        for _ in range(10):
            result = physics.step(session, DT)
            assert result.landings == []
            lost.extend(result.lost)
            if lost:
                break

        # Clamping inside the platform would push it back into the burger
        assert lost == [food]
        assert session.food_items == []

    def test_fast_item_caught_past_tolerance(self, physics, session, catalog):
        base = make_piece(catalog, "burger", 400, 557.5)
        session.tower.append(base)
        food = make_food(catalog, "donut", 400, 535, fall_speed=900.0)
        session.food_items.append(food)

        result = physics.step(session, DT)

        assert result.landings[0].support is base
        assert food.y == pytest.approx(545 - 12.5)

    def test_landing_visible_to_item_above_in_same_step(self, physics, session, catalog):
        first = make_food(catalog, "hotdog", 400, 555)
        second = make_food(catalog, "hotdog", 400, 555)
        session.food_items.extend([first, second])

        def add_piece(landing):
            session.tower.append(TowerPiece.from_food(landing.food))

        result = physics.step(session, DT, on_landing=add_piece)

        assert [landing.surface for landing in result.landings] == [SURFACE_PLATFORM, SURFACE_TOWER]
        lower, upper = session.tower
        assert lower.bottom == pytest.approx(570)
        assert upper.bottom == pytest.approx(lower.top)
        assert not physics.overlaps_tower(upper, [lower])

    def test_lowest_item_resolved_first(self, physics, session, catalog):
        upper = make_food(catalog, "hotdog", 400, 550)
        lower = make_food(catalog, "hotdog", 400, 555)
        session.food_items.extend([upper, lower])
        order = []

        def add_piece(landing):
            order.append(landing.food)
            session.tower.append(TowerPiece.from_food(landing.food))

        physics.step(session, DT, on_landing=add_piece)

        assert order == [lower, upper]
        assert upper.y == pytest.approx(552 - 9)
        assert session.food_items == []

    def test_rapid_fire_loosens_overlap_and_centres(self, physics, session, catalog):
        session.tower.append(make_piece(catalog, "burger", 400, 557.5))
        session.power_up.activate()
        food = make_food(catalog, "pizza", 420, 533)
        session.food_items.append(food)

        result = physics.step(session, DT)

        assert len(result.landings) == 1
        assert food.x == pytest.approx(410)
        assert food.y == pytest.approx(535)

    def test_topmost_piece_wins(self, physics, session, catalog):
        bottom = make_piece(catalog, "burger", 400, 557.5)
        top = make_piece(catalog, "pizza", 400, 535)
        session.tower.extend([bottom, top])
        food = make_food(catalog, "pizza", 400, 510)
        session.food_items.append(food)

        result = physics.step(session, DT)

        assert result.landings[0].support is top
        assert food.y == pytest.approx(525 - 10)

    def test_max_offset_clamp(self, physics, catalog):
        piece = make_piece(catalog, "burger", 400, 557.5)
        # Wide item resting far to the side of a narrow support
        food = FoodItem(x=465, y=540, width=140, height=20, food_type=catalog.get_by_name("burger"))

        landing = physics.check_collision(food, [piece])

        assert landing is not None
        assert food.x == pytest.approx(400 + (40 + 140) / 3.0)
        assert food.y == pytest.approx(535)
