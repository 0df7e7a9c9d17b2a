"""Tests for fall tracking and damage"""

import pytest

from arena_terrain.config import FallConfig
from arena_terrain.locomotion import (
    FallImpact,
    FallState,
    FallTracker,
    Vitals,
    apply_fall_impact,
    fall_damage,
)


@pytest.mark.parametrize('distance, damage', [
    (0.0, 0),
    (3.0, 0),
    (3.1, 1),
    (6.0, 1),
    (6.1, 2),
    (10.0, 2),
    (10.1, 3),
    (15.0, 3),
    (20.0, 4),
    (25.0, 5),
    (40.0, 8),
])
def test_damage_table(distance, damage):
    assert fall_damage(distance) == damage


def _drop(tracker, state, heights):
    """Feed (y, grounded) pairs and collect impacts"""
    impacts = []
    for y, grounded in heights:
        impact = tracker.update(state, y, grounded)
        if impact is not None:
            impacts.append(impact)
    return impacts


def test_landing_reports_drop_from_apex():
    tracker = FallTracker()
    state = FallState()
    impacts = _drop(tracker, state, [
        (10.0, True),
        (10.5, False),  # jump
        (12.0, False),  # apex
        (8.0, False),
        (2.0, True),
    ])
    assert len(impacts) == 1
    assert impacts[0].fall_distance == pytest.approx(10.0)
    assert impacts[0].damage == 2
    assert impacts[0].stagger_duration_ms == 300
    assert not state.airborne
    assert state.apex == 2.0


def test_small_fall_no_stagger():
    tracker = FallTracker()
    state = FallState()
    impacts = _drop(tracker, state, [(5.0, True), (5.0, False), (0.5, True)])
    assert impacts[0].damage == 1
    assert impacts[0].stagger_duration_ms == 0


def test_single_application_under_grounded_flicker():
    """A grounded flag that toggles around a landing damages only once"""
    tracker = FallTracker()
    state = FallState()
    sequence = [(20.0, True), (20.0, False), (5.0, False), (0.0, True)]
    sequence += [(0.0, False), (0.0, True), (0.05, False), (0.0, True), (0.0, True)]
    impacts = _drop(tracker, state, sequence)
    damaging = [i for i in impacts if i.damage > 0]
    assert len(damaging) == 1
    assert damaging[0].damage == 4


def test_walking_downhill_never_damages():
    tracker = FallTracker()
    state = FallState()
    impacts = _drop(tracker, state, [(30.0 - i, True) for i in range(30)])
    assert impacts == []


def test_first_observation_baselines():
    tracker = FallTracker()
    state = FallState()
    assert tracker.update(state, 50.0, True) is None
    assert state.initialized
    assert state.apex == 50.0


def test_fall_distance_helpers():
    tracker = FallTracker()
    state = FallState()
    tracker.update(state, 10.0, True)
    tracker.update(state, 10.0, False)
    assert tracker.current_fall_distance(state, 6.0) == pytest.approx(4.0)
    assert tracker.would_cause_damage(4.0)
    assert not tracker.would_cause_damage(3.0)

    FallTracker.reset(state)
    assert not state.initialized
    assert tracker.current_fall_distance(state, 0.0) == 0.0


def test_custom_tiers():
    config = FallConfig(safe_distance=1.0, tiers=((2.0, 5),), extra_step=1.0)
    assert fall_damage(1.0, config) == 0
    assert fall_damage(1.5, config) == 5
    assert fall_damage(4.0, config) == 7


def test_apply_impact_health_and_stagger():
    vitals = Vitals()
    assert apply_fall_impact(vitals, FallImpact(fall_distance=10.0, damage=2, stagger_duration_ms=300))
    assert vitals.health == 8
    assert vitals.staggered
    vitals.tick(0.2)
    assert vitals.stagger_remaining_ms == pytest.approx(100.0)
    vitals.tick(0.2)
    assert not vitals.staggered


def test_apply_impact_eliminates_at_zero():
    vitals = Vitals(health=3)
    apply_fall_impact(vitals, FallImpact(fall_distance=30.0, damage=6, stagger_duration_ms=300))
    assert vitals.health == 0
    assert vitals.eliminated
    # eliminated entities ignore further impacts
    assert not apply_fall_impact(vitals, FallImpact(fall_distance=30.0, damage=6, stagger_duration_ms=300))
    assert vitals.health == 0


def test_zero_damage_impact_changes_nothing():
    vitals = Vitals()
    assert not apply_fall_impact(vitals, FallImpact(fall_distance=2.0, damage=0, stagger_duration_ms=0))
    assert vitals.health == vitals.max_health
