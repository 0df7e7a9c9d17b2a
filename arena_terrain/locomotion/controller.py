"""
Locomotion Controller Module
============================

Per-tick movement decisions on terrain: direction, cliff blocking,
speed modulation by slope, sliding, facing and stamina.

The controller keeps no state of its own. Every tick is recomputed from
the entity's LocomotionState, its movement intent and the terrain query;
vertical motion stays with the physics collaborator.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import LocomotionConfig
from ..environment import TerrainQuery

EPSILON = 1e-9


@dataclass
class MovementIntent:
    """
    Player or AI input for one tick.

    ``forward`` and ``right`` are signed unit components in the frame of
    ``reference_angle`` (camera yaw). ``target_bearing`` is set while
    target-lock is active.
    """
    forward: float = 0.0
    right: float = 0.0
    reference_angle: float = 0.0  # radians
    sprint: bool = False
    block: bool = False
    quick_shield: bool = False
    target_bearing: Optional[float] = None

    @classmethod
    def from_keys(cls, forward: bool = False, backward: bool = False,
                  left: bool = False, right: bool = False, **kwargs) -> 'MovementIntent':
        """Build from digital key states"""
        return cls(
            forward=float(forward) - float(backward),
            right=float(right) - float(left),
            **kwargs
        )

    @property
    def is_blocking(self) -> bool:
        return self.block or self.quick_shield


@dataclass
class LocomotionState:
    """Per-entity locomotion state, owned by the entity record"""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    rotation: float = 0.0  # facing, radians (0 faces +z)
    velocity_x: float = 0.0
    velocity_y: float = 0.0  # written by the physics collaborator only
    velocity_z: float = 0.0
    stamina: float = 20.0
    grounded: bool = True
    slope_angle: float = 0.0
    is_sprinting: bool = False
    is_blocking: bool = False
    sliding: bool = False
    stamina_cooldown: float = 0.0  # seconds until regeneration resumes


@dataclass(frozen=True)
class LocomotionResult:
    """Outcome of one tick, handed to the physics collaborator"""
    x: float
    z: float
    velocity_x: float  # planar velocity including slide
    velocity_z: float
    drive_x: float  # input-driven part of the planar velocity
    drive_z: float
    rotation: float
    stamina: float
    is_sprinting: bool
    is_blocking: bool
    grounded: bool
    sliding: bool
    slope_angle: float

    @property
    def planar_velocity(self) -> Tuple[float, float]:
        return self.velocity_x, self.velocity_z

    @property
    def speed(self) -> float:
        return math.hypot(self.velocity_x, self.velocity_z)


def angle_difference(from_angle: float, to_angle: float) -> float:
    """Shortest signed rotation from one angle to another, in [-pi, pi)"""
    return (to_angle - from_angle + math.pi) % (2 * math.pi) - math.pi


def lerp_angle(from_angle: float, to_angle: float, t: float) -> float:
    """Interpolate along the shortest arc; t is capped at 1"""
    return from_angle + angle_difference(from_angle, to_angle) * min(max(t, 0.0), 1.0)


class LocomotionController:
    """
    Terrain-aware movement.

    Per tick:
    1. Rotate local intent into world space
    2. Classify the slope under the entity
    3. Block direct ascent of unwalkable slopes (lateral travel allowed)
    4. Pick walk/sprint speed, apply block and slope modifiers
    5. Add forced slide on very steep ground
    6. Turn toward the heading, update stamina, integrate position
    """

    def __init__(self, config: Optional[LocomotionConfig] = None):
        self.config = config or LocomotionConfig()

    # ==================== Building blocks ====================

    @staticmethod
    def world_direction(intent: MovementIntent) -> Tuple[float, float]:
        """Unit world (x, z) direction of the intent, or (0, 0)"""
        sin_r = math.sin(intent.reference_angle)
        cos_r = math.cos(intent.reference_angle)
        # forward = (sin, cos), right = (-cos, sin)
        dx = intent.forward * sin_r - intent.right * cos_r
        dz = intent.forward * cos_r + intent.right * sin_r
        length = math.hypot(dx, dz)
        if length < EPSILON:
            return 0.0, 0.0
        return dx / length, dz / length

    def classify(self, slope: float) -> Tuple[bool, bool]:
        """(traversable, slide_triggering) for a slope angle in degrees"""
        return (slope < self.config.max_traversable_slope,
                slope >= self.config.slide_threshold_slope)

    @staticmethod
    def downhill(normal: Tuple[float, float, float]) -> Tuple[float, float]:
        """Unit planar direction the surface leans toward, or (0, 0) on flat ground"""
        nx, nz = normal[0], normal[2]
        length = math.hypot(nx, nz)
        if length < EPSILON:
            return 0.0, 0.0
        return nx / length, nz / length

    def constrain_to_slope(self, dx: float, dz: float,
                           normal: Tuple[float, float, float],
                           traversable: bool) -> Tuple[float, float]:
        """
        Remove the uphill component of movement on unwalkable slopes.

        Movement is uphill when it opposes the direction the surface
        leans: dot(move, normal_xz) < 0. What remains runs along the
        slope contour; below the deadzone it is dropped entirely.
        """
        if traversable or (dx == 0.0 and dz == 0.0):
            return dx, dz
        hx, hz = self.downhill(normal)
        along = dx * hx + dz * hz
        if along >= 0.0:
            return dx, dz
        rx = dx - along * hx
        rz = dz - along * hz
        if math.hypot(rx, rz) < self.config.cliff_deadzone:
            return 0.0, 0.0
        return rx, rz

    def terrain_speed_modifier(self, dx: float, dz: float,
                               normal: Tuple[float, float, float], slope: float) -> float:
        """
        Speed factor from slope and heading.

        Uphill heads toward ``uphill_speed_min`` and downhill toward
        ``downhill_speed_max``, both scaled by slope steepness (full
        effect at the traversable limit) and by how directly the heading
        follows the slope.
        """
        length = math.hypot(dx, dz)
        hx, hz = self.downhill(normal)
        if length < EPSILON or (hx == 0.0 and hz == 0.0):
            return 1.0
        steepness = min(slope / self.config.max_traversable_slope, 1.0)
        alignment = (dx * hx + dz * hz) / length
        if alignment < 0.0:
            return 1.0 - (1.0 - self.config.uphill_speed_min) * steepness * -alignment
        return 1.0 + (self.config.downhill_speed_max - 1.0) * steepness * alignment

    def update_stamina(self, state: LocomotionState, sprinting: bool,
                       quick_shield: bool, delta: float) -> float:
        """Drain while sprinting or quick-shielding, otherwise regenerate"""
        cfg = self.config
        drain = 0.0
        if sprinting:
            drain += cfg.sprint_stamina_cost
        if quick_shield:
            drain += cfg.shield_stamina_cost

        stamina = state.stamina
        if drain > 0.0:
            stamina -= drain * delta
            state.stamina_cooldown = cfg.stamina_recovery_delay
        elif state.stamina_cooldown > 0.0:
            state.stamina_cooldown = max(0.0, state.stamina_cooldown - delta)
        else:
            stamina += cfg.stamina_recovery_rate * delta
        return min(max(stamina, 0.0), cfg.stamina_max)

    def is_grounded(self, y: float, ground: float) -> bool:
        return (y - ground) < self.config.ground_threshold

    # ==================== Tick ====================

    def step(self, state: LocomotionState, intent: MovementIntent,
             query: TerrainQuery, delta: float) -> LocomotionResult:
        """
        Advance one entity by one tick.

        Args:
            state: Entity state, updated in place
            intent: Movement intent for this tick
            query: Terrain query (flat-ground fallback when unpublished)
            delta: Elapsed seconds

        Returns:
            LocomotionResult mirroring the updated state
        """
        cfg = self.config
        if delta <= 0.0:
            return self._result(state, state.velocity_x, state.velocity_z)

        # 1. intent in world space
        intent_x, intent_z = self.world_direction(intent)

        # 2. terrain under the entity
        slope = query.slope_degrees(state.x, state.z)
        normal = query.normal(state.x, state.z)
        traversable, slide = self.classify(slope)
        grounded = self.is_grounded(state.y, query.height(state.x, state.z))

        # 3. cliff blocking
        dx, dz = self.constrain_to_slope(intent_x, intent_z, normal, traversable)
        moving = math.hypot(dx, dz) > EPSILON

        # 4. speed
        blocking = intent.is_blocking
        sprinting = intent.sprint and state.stamina > 0.0 and moving and not blocking
        speed = cfg.sprint_speed if sprinting else cfg.walk_speed
        if blocking:
            speed *= cfg.block_speed_factor
        speed *= self.terrain_speed_modifier(dx, dz, normal, slope)

        # 5. planar velocity
        drive_x, drive_z = dx * speed, dz * speed
        vx, vz = drive_x, drive_z

        # 6. forced slide
        sliding = slide and grounded
        if sliding:
            hx, hz = self.downhill(normal)
            vx += hx * cfg.slide_speed
            vz += hz * cfg.slide_speed

        # 7. facing
        rotation = state.rotation
        turn_rate = cfg.rotation_speed * delta
        if intent.target_bearing is not None:
            rotation = lerp_angle(rotation, intent.target_bearing, turn_rate)
        elif (intent_x or intent_z) and (intent.forward > 0 or intent.right != 0):
            rotation = lerp_angle(rotation, math.atan2(intent_x, intent_z), turn_rate)

        # 8. stamina
        stamina = self.update_stamina(state, sprinting, intent.quick_shield, delta)

        # 9. integrate and re-ground
        x, z = query.clamp_to_arena(state.x + vx * delta, state.z + vz * delta)
        ground = query.height(x, z)

        state.x, state.z = x, z
        state.velocity_x, state.velocity_z = vx, vz
        state.rotation = rotation
        state.stamina = stamina
        state.is_sprinting = sprinting
        state.is_blocking = blocking
        state.sliding = sliding
        state.slope_angle = slope
        state.grounded = self.is_grounded(state.y, ground)

        return self._result(state, drive_x, drive_z)

    @staticmethod
    def _result(state: LocomotionState, drive_x: float, drive_z: float) -> LocomotionResult:
        return LocomotionResult(
            x=state.x,
            z=state.z,
            velocity_x=state.velocity_x,
            velocity_z=state.velocity_z,
            drive_x=drive_x,
            drive_z=drive_z,
            rotation=state.rotation,
            stamina=state.stamina,
            is_sprinting=state.is_sprinting,
            is_blocking=state.is_blocking,
            grounded=state.grounded,
            sliding=state.sliding,
            slope_angle=state.slope_angle,
        )
