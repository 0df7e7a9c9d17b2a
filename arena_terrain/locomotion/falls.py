"""
Fall Tracking Module
====================

Apex tracking while airborne and tiered damage on landing.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..config import FallConfig

logger = logging.getLogger(__name__)


@dataclass
class FallState:
    """Per-entity fall tracking; lazily baselined on first observation"""
    apex: float = 0.0
    airborne: bool = False
    initialized: bool = False


@dataclass
class Vitals:
    """Health and status effects touched by fall impacts"""
    health: float = 10
    max_health: float = 10
    eliminated: bool = False
    stagger_remaining_ms: float = 0.0

    @property
    def staggered(self) -> bool:
        return self.stagger_remaining_ms > 0.0

    def tick(self, delta: float):
        if self.stagger_remaining_ms > 0.0:
            self.stagger_remaining_ms = max(0.0, self.stagger_remaining_ms - delta * 1000.0)


@dataclass(frozen=True)
class FallImpact:
    """Landing outcome forwarded to the health/status collaborator"""
    fall_distance: float
    damage: int
    stagger_duration_ms: int


def fall_damage(fall_distance: float, config: Optional[FallConfig] = None) -> int:
    """
    Damage for a fall (tiered).

    | Fall distance | Damage |
    |---------------|--------|
    | 0-3 units     | 0      |
    | 3-6 units     | 1      |
    | 6-10 units    | 2      |
    | 10-15 units   | 3      |
    | >15 units     | 3 + 1 per 5 additional units |
    """
    cfg = config or FallConfig()
    if fall_distance <= cfg.safe_distance:
        return 0
    for max_distance, damage in cfg.tiers:
        if fall_distance <= max_distance:
            return damage
    last_distance, last_damage = cfg.tiers[-1]
    return last_damage + int(math.floor((fall_distance - last_distance) / cfg.extra_step))


class FallTracker:
    """
    Grounded / Airborne state machine per entity.

    - Grounded -> Airborne: apex starts at the current height
    - Airborne: apex follows the highest height seen
    - Airborne -> Grounded: one FallImpact for the drop from apex
    - Grounded -> Grounded: apex re-baselines to the current height

    Because the apex resets to the landing height, a grounded flag that
    flickers around a landing yields at most one damaging impact.
    """

    def __init__(self, config: Optional[FallConfig] = None):
        self.config = config or FallConfig()

    def update(self, state: FallState, y: float, grounded: bool) -> Optional[FallImpact]:
        """
        Observe one tick.

        Returns:
            FallImpact on a landing transition, otherwise None
        """
        if not state.initialized:
            state.apex = y
            state.airborne = False
            state.initialized = True

        if not grounded:
            if not state.airborne:
                state.apex = y
                state.airborne = True
            elif y > state.apex:
                state.apex = y
            return None

        if state.airborne:
            distance = max(0.0, state.apex - y)
            damage = fall_damage(distance, self.config)
            stagger = self.config.stagger_duration_ms if damage >= self.config.stagger_min_damage else 0
            state.apex = y
            state.airborne = False
            return FallImpact(fall_distance=distance, damage=damage, stagger_duration_ms=stagger)

        state.apex = y
        return None

    def current_fall_distance(self, state: FallState, y: float) -> float:
        """Drop so far while airborne (for UI / effects)"""
        if not state.airborne:
            return 0.0
        return max(0.0, state.apex - y)

    def would_cause_damage(self, fall_distance: float) -> bool:
        return fall_distance > self.config.safe_distance

    @staticmethod
    def reset(state: FallState):
        """Forget tracking (spawn / respawn)"""
        state.apex = 0.0
        state.airborne = False
        state.initialized = False


def apply_fall_impact(vitals: Vitals, impact: FallImpact, entity_id: str = '') -> bool:
    """
    Apply a landing to health and status.

    Health floors at 0 and reaching 0 eliminates. Eliminated entities
    are ignored.

    Returns:
        True if anything changed
    """
    if vitals.eliminated or impact.damage <= 0:
        return False
    vitals.health = max(0, vitals.health - impact.damage)
    if vitals.health <= 0:
        vitals.eliminated = True
    if impact.stagger_duration_ms > 0:
        vitals.stagger_remaining_ms = max(vitals.stagger_remaining_ms, impact.stagger_duration_ms)
    logger.debug("Entity %s fell %.1f units, took %d damage. Health: %s",
                 entity_id, impact.fall_distance, impact.damage, vitals.health)
    return True
