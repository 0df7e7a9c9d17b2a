"""Tests for terrain-aware locomotion"""

import math

import numpy as np
import pytest

from arena_terrain.config import LocomotionConfig
from arena_terrain.environment import TerrainQuery
from arena_terrain.locomotion import (
    LocomotionController,
    LocomotionState,
    MovementIntent,
    angle_difference,
    lerp_angle,
)

UPHILL = math.pi / 2  # reference angle whose forward is +x, up the cliff fixture
DOWNHILL = -math.pi / 2


@pytest.fixture
def controller():
    return LocomotionController(LocomotionConfig())


def _grounded_state(query, x=0.0, z=0.0, **kwargs):
    return LocomotionState(x=x, y=query.height(x, z), z=z, **kwargs)


def _airborne_state(query, x=0.0, z=0.0, **kwargs):
    return LocomotionState(x=x, y=query.height(x, z) + 5.0, z=z, **kwargs)


def test_world_direction_frame():
    assert LocomotionController.world_direction(MovementIntent(forward=1.0)) == pytest.approx((0.0, 1.0))
    right = LocomotionController.world_direction(MovementIntent(right=1.0, reference_angle=UPHILL))
    assert right == pytest.approx((0.0, 1.0), abs=1e-12)
    diagonal = LocomotionController.world_direction(MovementIntent(forward=1.0, right=1.0))
    assert math.hypot(*diagonal) == pytest.approx(1.0)
    assert LocomotionController.world_direction(MovementIntent()) == (0.0, 0.0)


def test_intent_from_keys():
    intent = MovementIntent.from_keys(forward=True, left=True, sprint=True)
    assert intent.forward == 1.0
    assert intent.right == -1.0
    assert intent.sprint
    assert MovementIntent.from_keys(forward=True, backward=True).forward == 0.0


def test_uphill_blocked_on_cliff(controller, cliff_query):
    """Straight up a 50 degree slope: no movement along the up-slope direction"""
    state = _airborne_state(cliff_query)
    result = controller.step(state, MovementIntent(forward=1.0, reference_angle=UPHILL), cliff_query, 0.1)
    assert result.drive_x == pytest.approx(0.0, abs=1e-9)
    assert result.drive_z == pytest.approx(0.0, abs=1e-9)
    assert result.velocity_x <= 1e-9
    assert state.x <= 1e-9


def test_uphill_blocked_while_grounded(controller, cliff_query):
    state = _grounded_state(cliff_query)
    result = controller.step(state, MovementIntent(forward=1.0, reference_angle=UPHILL), cliff_query, 0.1)
    assert result.drive_x == pytest.approx(0.0, abs=1e-9)
    assert result.sliding
    assert result.velocity_x < 0.0, "Slide pushes downhill"


def test_lateral_movement_allowed_on_cliff(controller, cliff_query):
    state = _airborne_state(cliff_query)
    intent = MovementIntent(right=1.0, reference_angle=UPHILL)  # along +z, the contour
    result = controller.step(state, intent, cliff_query, 0.1)
    assert result.drive_x == pytest.approx(0.0, abs=1e-9)
    assert result.drive_z == pytest.approx(LocomotionConfig().walk_speed)


def test_diagonal_keeps_only_contour_component(controller, cliff_query):
    state = _airborne_state(cliff_query)
    intent = MovementIntent(forward=1.0, right=1.0, reference_angle=UPHILL)
    result = controller.step(state, intent, cliff_query, 0.1)
    assert result.drive_x == pytest.approx(0.0, abs=1e-9)
    assert result.drive_z == pytest.approx(LocomotionConfig().walk_speed / math.sqrt(2))


def test_downhill_allowed_and_faster(controller, cliff_query):
    state = _airborne_state(cliff_query)
    result = controller.step(state, MovementIntent(forward=1.0, reference_angle=DOWNHILL), cliff_query, 0.1)
    cfg = LocomotionConfig()
    assert result.drive_x == pytest.approx(-cfg.walk_speed * cfg.downhill_speed_max)


def test_flat_speeds(controller, flat_query):
    cfg = LocomotionConfig()
    walk = controller.step(_grounded_state(flat_query), MovementIntent(forward=1.0), flat_query, 0.1)
    assert walk.speed == pytest.approx(cfg.walk_speed)
    assert not walk.is_sprinting

    sprint = controller.step(_grounded_state(flat_query), MovementIntent(forward=1.0, sprint=True), flat_query, 0.1)
    assert sprint.speed == pytest.approx(cfg.sprint_speed)
    assert sprint.is_sprinting

    block = controller.step(_grounded_state(flat_query),
                            MovementIntent(forward=1.0, sprint=True, block=True), flat_query, 0.1)
    assert block.speed == pytest.approx(cfg.walk_speed * cfg.block_speed_factor)
    assert block.is_blocking and not block.is_sprinting


def test_no_sprint_without_stamina(controller, flat_query):
    state = _grounded_state(flat_query, stamina=0.0)
    result = controller.step(state, MovementIntent(forward=1.0, sprint=True), flat_query, 0.1)
    assert not result.is_sprinting
    assert result.speed == pytest.approx(LocomotionConfig().walk_speed)


def test_speed_modifier_scales_with_steepness(controller):
    cfg = LocomotionConfig()
    leaning_x = (-math.sin(math.radians(20.0)), math.cos(math.radians(20.0)), 0.0)
    uphill = controller.terrain_speed_modifier(1.0, 0.0, leaning_x, 20.0)
    downhill = controller.terrain_speed_modifier(-1.0, 0.0, leaning_x, 20.0)
    across = controller.terrain_speed_modifier(0.0, 1.0, leaning_x, 20.0)
    assert cfg.uphill_speed_min < uphill < 1.0
    assert 1.0 < downhill < cfg.downhill_speed_max
    assert across == pytest.approx(1.0)
    assert controller.terrain_speed_modifier(1.0, 0.0, (0.0, 1.0, 0.0), 0.0) == 1.0


def test_slide_only_on_steep_grounded_cells(controller, cliff_query, flat_query):
    airborne = controller.step(_airborne_state(cliff_query), MovementIntent(), cliff_query, 0.1)
    assert not airborne.sliding
    assert airborne.speed == 0.0

    grounded = controller.step(_grounded_state(cliff_query), MovementIntent(), cliff_query, 0.1)
    assert grounded.sliding
    assert grounded.velocity_x == pytest.approx(-LocomotionConfig().slide_speed)

    flat = controller.step(_grounded_state(flat_query), MovementIntent(), flat_query, 0.1)
    assert not flat.sliding


def test_sloped_but_walkable_does_not_block(controller, make_terrain):
    grade = math.tan(math.radians(30.0))
    query = TerrainQuery(make_terrain(lambda x, z: grade * x))
    state = _grounded_state(query)
    result = controller.step(state, MovementIntent(forward=1.0, reference_angle=UPHILL), query, 0.1)
    assert result.drive_x > 0.0
    assert not result.sliding


def test_stamina_drain_and_recovery_delay(controller, flat_query):
    cfg = LocomotionConfig()
    state = _grounded_state(flat_query)
    dt = 0.25
    for _ in range(4):  # 1 s sprint
        controller.step(state, MovementIntent(forward=1.0, sprint=True), flat_query, dt)
    assert state.stamina == pytest.approx(cfg.stamina_max - cfg.sprint_stamina_cost, abs=1e-6)
    drained = state.stamina

    for _ in range(6):  # 1.5 s idle, still inside the delay
        controller.step(state, MovementIntent(), flat_query, dt)
    assert state.stamina == pytest.approx(drained)

    for _ in range(6):  # delay expires at 2 s, then 1 s of recovery
        controller.step(state, MovementIntent(), flat_query, dt)
    assert state.stamina == pytest.approx(drained + cfg.stamina_recovery_rate * 1.0, abs=1e-6)


def test_quick_shield_drains_stamina(controller, flat_query):
    state = _grounded_state(flat_query)
    controller.step(state, MovementIntent(quick_shield=True), flat_query, 1.0)
    assert state.stamina == pytest.approx(LocomotionConfig().stamina_max - LocomotionConfig().shield_stamina_cost)
    assert state.is_blocking


def test_stamina_stays_in_bounds(controller, flat_query):
    """Any input sequence keeps stamina inside [0, max]"""
    cfg = LocomotionConfig()
    rng = np.random.default_rng(12)
    state = _grounded_state(flat_query)
    for _ in range(3000):
        intent = MovementIntent(
            forward=float(rng.choice([-1.0, 0.0, 1.0])),
            right=float(rng.choice([-1.0, 0.0, 1.0])),
            reference_angle=float(rng.uniform(-math.pi, math.pi)),
            sprint=bool(rng.random() < 0.6),
            block=bool(rng.random() < 0.1),
            quick_shield=bool(rng.random() < 0.2),
        )
        delta = float(rng.choice([0.001, 0.016, 0.1, 2.5]))
        controller.step(state, intent, flat_query, delta)
        assert 0.0 <= state.stamina <= cfg.stamina_max


def test_backward_keeps_facing(controller, flat_query):
    state = _grounded_state(flat_query, rotation=0.3)
    controller.step(state, MovementIntent(forward=-1.0), flat_query, 0.1)
    assert state.rotation == 0.3
    assert state.z < 0.0, "Still moves backward"


def test_turns_toward_heading(controller, flat_query):
    state = _grounded_state(flat_query)
    controller.step(state, MovementIntent(forward=1.0, reference_angle=UPHILL), flat_query, 0.05)
    assert state.rotation == pytest.approx(UPHILL * LocomotionConfig().rotation_speed * 0.05)

    controller.step(state, MovementIntent(forward=1.0, reference_angle=UPHILL), flat_query, 0.2)
    assert state.rotation == pytest.approx(UPHILL, abs=1e-6)


def test_target_lock_overrides_heading(controller, flat_query):
    state = _grounded_state(flat_query)
    intent = MovementIntent(forward=-1.0, target_bearing=1.0)
    controller.step(state, intent, flat_query, 1.0)
    assert state.rotation == pytest.approx(1.0)


def test_zero_delta_is_noop(controller, flat_query):
    state = _grounded_state(flat_query, x=2.0, stamina=10.0, rotation=0.5)
    result = controller.step(state, MovementIntent(forward=1.0, sprint=True), flat_query, 0.0)
    assert (state.x, state.z, state.stamina, state.rotation) == (2.0, 0.0, 10.0, 0.5)
    assert result.x == 2.0


def test_position_clamped_to_arena(controller, flat_query):
    state = _grounded_state(flat_query, x=15.5)
    controller.step(state, MovementIntent(forward=1.0, reference_angle=UPHILL), flat_query, 1.0)
    assert state.x == 16.0


def test_grounded_signal(controller, flat_query):
    result = controller.step(_grounded_state(flat_query), MovementIntent(), flat_query, 0.1)
    assert result.grounded
    result = controller.step(_airborne_state(flat_query), MovementIntent(), flat_query, 0.1)
    assert not result.grounded


def test_missing_terrain_moves_on_flat_ground(controller):
    query = TerrainQuery()
    state = LocomotionState()
    result = controller.step(state, MovementIntent(forward=1.0), query, 1.0)
    assert result.z == pytest.approx(LocomotionConfig().walk_speed)
    assert result.grounded


def test_angle_helpers():
    assert angle_difference(3.0, -3.0) == pytest.approx(2 * math.pi - 6.0)
    assert angle_difference(0.0, math.pi / 2) == pytest.approx(math.pi / 2)
    assert lerp_angle(3.0, -3.0, 1.0) == pytest.approx(3.0 + 2 * math.pi - 6.0)
    assert lerp_angle(0.0, 1.0, 5.0) == pytest.approx(1.0)
