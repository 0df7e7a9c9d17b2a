"""
Locomotion Module
=================

Terrain-aware movement and fall damage, evaluated once per entity per tick.
"""

from .controller import (
    MovementIntent,
    LocomotionState,
    LocomotionResult,
    LocomotionController,
    angle_difference,
    lerp_angle,
)
from .falls import (
    FallState,
    FallImpact,
    FallTracker,
    Vitals,
    fall_damage,
    apply_fall_impact,
)

__all__ = [
    'MovementIntent',
    'LocomotionState',
    'LocomotionResult',
    'LocomotionController',
    'angle_difference',
    'lerp_angle',
    'FallState',
    'FallImpact',
    'FallTracker',
    'Vitals',
    'fall_damage',
    'apply_fall_impact',
]
