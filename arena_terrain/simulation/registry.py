"""
Simulation Registry Module
==========================

Per-entity records and the tick loop that drives locomotion and fall
tracking against the published terrain.

Each entity owns its LocomotionState, FallState and Vitals; the
controller and tracker receive them explicitly and never hold state of
their own, so entities never contend with each other.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from ..config import Config
from ..environment import TerrainQuery, TerrainService
from ..locomotion import (
    FallImpact,
    FallState,
    FallTracker,
    LocomotionController,
    LocomotionResult,
    LocomotionState,
    MovementIntent,
    Vitals,
    apply_fall_impact,
)

logger = logging.getLogger(__name__)


@dataclass
class EntityRecord:
    """Everything the simulation knows about one entity"""
    entity_id: str
    team_id: int = 0
    locomotion: LocomotionState = field(default_factory=LocomotionState)
    fall: FallState = field(default_factory=FallState)
    vitals: Vitals = field(default_factory=Vitals)


@dataclass(frozen=True)
class TickReport:
    """Per-entity tick outcome"""
    entity_id: str
    locomotion: LocomotionResult
    impact: Optional[FallImpact] = None


class GravityIntegrator:
    """
    Minimal vertical motion for offline runs.

    Stands in for the physics collaborator: falls under gravity and
    rests on the terrain surface.
    """

    def __init__(self, gravity: float = 20.0):
        self.gravity = gravity

    def advance(self, record: EntityRecord, query: TerrainQuery, delta: float) -> float:
        """New height for the record; vertical velocity is kept on its LocomotionState"""
        state = record.locomotion
        vy = state.velocity_y - self.gravity * delta
        y = state.y + vy * delta
        ground = query.height(state.x, state.z)
        if y <= ground:
            y, vy = ground, 0.0
        state.velocity_y = vy
        return y


class SimulationRegistry:
    """
    Entity records plus the per-tick update.

    Tick order per entity:
    1. Accept the vertical position reported by physics
    2. LocomotionController step (movement suppressed while staggered)
    3. FallTracker update from the grounded signal
    4. Apply any fall impact to vitals, count down stagger
    """

    def __init__(self, config: Optional[Config] = None,
                 service: Optional[TerrainService] = None,
                 query: Optional[TerrainQuery] = None):
        self.config = config or Config()
        self.service = service
        self._query = query
        self.controller = LocomotionController(self.config.locomotion)
        self.falls = FallTracker(self.config.falls)
        self._entities: Dict[str, EntityRecord] = {}

    @property
    def query(self) -> TerrainQuery:
        """Query over the latest published terrain"""
        if self.service is not None:
            return self.service.query()
        if self._query is None:
            self._query = TerrainQuery(None, self.config.locomotion.max_traversable_slope)
        return self._query

    # ==================== Records ====================

    def spawn(self, entity_id: str, x: float, z: float, team_id: int = 0,
              y: Optional[float] = None, rotation: float = 0.0) -> EntityRecord:
        """Create (or replace) an entity standing on the ground at (x, z)"""
        query = self.query
        x, z = query.clamp_to_arena(x, z)
        ground = query.height(x, z)
        record = EntityRecord(
            entity_id=entity_id,
            team_id=team_id,
            locomotion=LocomotionState(
                x=x, y=ground if y is None else y, z=z,
                rotation=rotation,
                stamina=self.config.locomotion.stamina_max,
                slope_angle=query.slope_degrees(x, z),
            ),
            vitals=Vitals(health=self.config.falls.max_health,
                          max_health=self.config.falls.max_health),
        )
        record.locomotion.grounded = self.controller.is_grounded(record.locomotion.y, ground)
        self.falls.update(record.fall, record.locomotion.y, record.locomotion.grounded)
        self._entities[entity_id] = record
        return record

    def respawn(self, entity_id: str, x: float, z: float) -> EntityRecord:
        previous = self._entities[entity_id]
        return self.spawn(entity_id, x, z, team_id=previous.team_id,
                          rotation=previous.locomotion.rotation)

    def despawn(self, entity_id: str) -> EntityRecord:
        return self._entities.pop(entity_id)

    def get(self, entity_id: str) -> Optional[EntityRecord]:
        return self._entities.get(entity_id)

    def __getitem__(self, entity_id: str) -> EntityRecord:
        return self._entities[entity_id]

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[EntityRecord]:
        return iter(list(self._entities.values()))

    def alive(self) -> Iterator[EntityRecord]:
        return (r for r in self if not r.vitals.eliminated)

    # ==================== Tick ====================

    def tick(self, entity_id: str, intent: MovementIntent, delta: float,
             y: Optional[float] = None) -> TickReport:
        """
        Advance one entity.

        Args:
            entity_id: Entity to update
            intent: Movement intent for this tick
            delta: Elapsed seconds
            y: Vertical position reported by physics (keeps the last one if None)

        Returns:
            TickReport with the locomotion result and any fall impact
        """
        record = self._entities[entity_id]
        query = self.query
        state = record.locomotion
        if y is not None:
            state.y = y

        if record.vitals.eliminated or record.vitals.staggered:
            # no steering; facing reference and slides still apply
            intent = MovementIntent(reference_angle=intent.reference_angle)

        result = self.controller.step(state, intent, query, delta)
        impact = self.falls.update(record.fall, state.y, result.grounded)
        if impact is not None and impact.damage > 0:
            apply_fall_impact(record.vitals, impact, entity_id)
            if record.vitals.eliminated:
                logger.info("Entity %s eliminated by a %.1f unit fall",
                            entity_id, impact.fall_distance)
        record.vitals.tick(delta)
        return TickReport(entity_id=entity_id, locomotion=result, impact=impact)

    def tick_all(self, intents: Dict[str, MovementIntent], delta: float,
                 heights: Optional[Dict[str, float]] = None) -> Dict[str, TickReport]:
        """Advance every entity; missing intents mean standing still"""
        heights = heights or {}
        reports = {}
        for record in self:
            intent = intents.get(record.entity_id, MovementIntent())
            reports[record.entity_id] = self.tick(
                record.entity_id, intent, delta, heights.get(record.entity_id))
        return reports
