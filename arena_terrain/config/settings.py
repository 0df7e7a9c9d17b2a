"""
Configuration Settings Module
==============================

Dataclass-based configuration with validation and defaults.
Follows Single Responsibility Principle - only handles configuration.
"""

from dataclasses import dataclass, field, asdict, fields, replace
from typing import Dict, Any, Optional
import math

# seeds share the noise LCG modulus; larger offsets also flatten the noise
MAX_SEED = 2 ** 31 - 1


class ConfigError(ValueError):
    """Raised when a configuration cannot produce a valid terrain"""


@dataclass(frozen=True)
class TerrainConfig:
    """
    Heightmap generation parameters.

    Immutable once generation starts. A seed of 0 asks the generator
    to pick a random seed for this generation.
    """
    resolution: int = 256  # grid side length (cells)
    base_frequency: float = 0.015
    octaves: int = 5
    persistence: float = 0.55  # amplitude falloff per octave
    min_height: float = -10.0  # world units
    max_height: float = 28.0
    smoothness: float = 0.5  # 0-1
    seed: int = 0

    @property
    def height_range(self) -> float:
        return self.max_height - self.min_height

    def validate(self) -> 'TerrainConfig':
        """Reject degenerate parameters before any generation work"""
        if not isinstance(self.resolution, int) or self.resolution < 2:
            raise ConfigError(f"resolution must be an integer >= 2, got {self.resolution!r}")
        if not math.isfinite(self.base_frequency) or self.base_frequency <= 0:
            raise ConfigError(f"base_frequency must be > 0, got {self.base_frequency!r}")
        if not isinstance(self.octaves, int) or self.octaves < 1:
            raise ConfigError(f"octaves must be an integer >= 1, got {self.octaves!r}")
        if not 0.0 < self.persistence < 1.0:
            raise ConfigError(f"persistence must be in (0, 1), got {self.persistence!r}")
        if not (math.isfinite(self.min_height) and math.isfinite(self.max_height)):
            raise ConfigError("height bounds must be finite")
        if self.max_height <= self.min_height:
            raise ConfigError(
                f"max_height ({self.max_height}) must exceed min_height ({self.min_height})"
            )
        if not 0.0 <= self.smoothness <= 1.0:
            raise ConfigError(f"smoothness must be in [0, 1], got {self.smoothness!r}")
        if not isinstance(self.seed, int) or not 0 <= self.seed <= MAX_SEED:
            raise ConfigError(f"seed must be an integer in [0, {MAX_SEED}], got {self.seed!r}")
        return self

    def with_seed(self, seed: int) -> 'TerrainConfig':
        return replace(self, seed=seed)


@dataclass
class ArenaConfig:
    """World extent the heightmap is stretched over"""
    width: float = 120.0  # world units (x)
    depth: float = 120.0  # world units (z)
    spawn_distance: float = 50.0  # team spawns, distance from center

    @property
    def half_width(self) -> float:
        return self.width / 2

    @property
    def half_depth(self) -> float:
        return self.depth / 2


@dataclass
class ShapingConfig:
    """Elevation bias and plateau terracing"""
    # > 0.5 pushes most of the map toward low ground
    low_elevation_bias: float = 0.7
    plateau_levels: int = 5
    plateau_strength: float = 0.75  # 0 = none, 1 = hard snap
    plateau_transition: float = 0.06  # normalized width of level boundaries


@dataclass
class FeatureConfig:
    """Guaranteed mid plateaus and high peaks"""
    seed_offset: int = 9999
    edge_margin: float = 15.0

    mid_count: int = 3
    mid_radius: float = 15.0
    mid_radius_jitter: float = 8.0
    mid_height: tuple = (0.5, 0.65)  # normalized target range
    mid_min_distance: float = 20.0

    peak_count: int = 2
    peak_radius: float = 10.0
    peak_radius_jitter: float = 5.0
    peak_height: tuple = (0.8, 0.95)
    peak_min_distance: float = 25.0

    # First peak sits on the center so its flat core covers the arena middle
    summit_offset: float = 2.0
    summit_radius: float = 14.0
    summit_radius_jitter: float = 4.0

    core_fraction: float = 0.3  # full-strength share of a feature radius


@dataclass
class RampConfig:
    """Connectivity ramps between elevation tiers"""
    radial_count: int = 8
    radial_angle_jitter: float = 0.3  # total spread (radians)
    inner_radius: float = 1.0  # from the summit center, inside its core
    inner_radius_jitter: float = 1.5
    edge_inset: float = 5.0
    width: float = 6.0
    width_jitter: float = 3.0

    cross_count: int = 6
    cross_angle_jitter: float = 0.5
    cross_span: float = math.pi / 3
    cross_span_jitter: float = 0.4
    cross_width_factor: float = 0.8

    core_fraction: float = 0.3  # full-strength share of a corridor width
    easing: float = 0.5  # 0 = straight grade, 1 = full smoothstep


@dataclass
class SmoothingConfig:
    """Blur passes applied after features and ramps"""
    iterations_per_unit: int = 5  # box blur iterations at amount 1.0
    first_pass: float = 0.6  # share of smoothness for the first global pass
    second_pass: float = 0.3
    ramp_iterations: int = 8
    ramp_margin: float = 1.2  # corridor widening for ramp smoothing


@dataclass
class LocomotionConfig:
    """Movement feel on terrain"""
    walk_speed: float = 5.0  # units per second
    sprint_speed: float = 8.0
    block_speed_factor: float = 0.5
    rotation_speed: float = 8.0  # radians per second

    stamina_max: float = 20.0
    sprint_stamina_cost: float = 2.0  # per second
    shield_stamina_cost: float = 0.5  # per second
    stamina_recovery_rate: float = 0.1  # per second
    stamina_recovery_delay: float = 2.0  # seconds after the last drain

    max_traversable_slope: float = 45.0  # degrees
    slide_threshold_slope: float = 50.0
    slide_speed: float = 4.0

    uphill_speed_min: float = 0.5
    downhill_speed_max: float = 1.4

    cliff_deadzone: float = 0.1
    ground_threshold: float = 0.15


@dataclass
class FallConfig:
    """Tiered fall damage"""
    safe_distance: float = 3.0
    # (max fall distance, damage) tiers above the safe distance
    tiers: tuple = ((6.0, 1), (10.0, 2), (15.0, 3))
    extra_step: float = 5.0  # one extra damage per step beyond the last tier
    stagger_min_damage: int = 2
    stagger_duration_ms: int = 300
    max_health: int = 10


@dataclass
class PlacementConfig:
    """Spawn and obstacle site rules"""
    spawn_search_radius: float = 12.0  # world units around the nominal spawn
    squad_spacing: float = 3.0

    obstacle_max_slope: float = 10.0  # degrees
    min_edge_distance: float = 10.0
    min_spacing: float = 12.0
    flat_area_bias: float = 0.7  # 0 = uniform, 1 = strongly prefer flat ground
    max_attempts: int = 2000

    tree_max_slope: Dict[str, float] = field(default_factory=lambda: {
        'pine': 30.0,
        'oak': 20.0,
        'dead': 35.0,
    })


@dataclass
class Config:
    """
    Master configuration class combining all sub-configurations.

    Usage:
        config = Config()
        config = Config(terrain=TerrainConfig(seed=42, resolution=128))
    """
    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    arena: ArenaConfig = field(default_factory=ArenaConfig)
    shaping: ShapingConfig = field(default_factory=ShapingConfig)
    features: FeatureConfig = field(default_factory=FeatureConfig)
    ramps: RampConfig = field(default_factory=RampConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    locomotion: LocomotionConfig = field(default_factory=LocomotionConfig)
    falls: FallConfig = field(default_factory=FallConfig)
    placement: PlacementConfig = field(default_factory=PlacementConfig)

    verbose: bool = False

    def validate(self) -> 'Config':
        self.terrain.validate()
        if self.arena.width <= 0 or self.arena.depth <= 0:
            raise ConfigError("arena extent must be positive")
        if not 0.5 < self.shaping.low_elevation_bias < 1.0:
            raise ConfigError("low_elevation_bias must be in (0.5, 1)")
        if self.shaping.plateau_levels < 1:
            raise ConfigError("plateau_levels must be >= 1")
        if not 0.0 <= self.ramps.easing <= 1.0:
            raise ConfigError("ramp easing must be in [0, 1]")
        return self

    def with_seed(self, seed: int) -> 'Config':
        return replace(self, terrain=self.terrain.with_seed(seed))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Config':
        """Create Config from dictionary (nested sections as dicts)"""
        config = cls()
        for key, value in d.items():
            if not hasattr(config, key):
                continue
            current = getattr(config, key)
            if isinstance(value, dict) and hasattr(current, '__dataclass_fields__'):
                known = {f.name for f in fields(current)}
                value = replace(current, **{k: v for k, v in value.items() if k in known})
            setattr(config, key, value)
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Export config to dictionary"""
        return asdict(self)


def default_config(seed: Optional[int] = None, resolution: Optional[int] = None) -> Config:
    """Default config with optional terrain overrides"""
    terrain = TerrainConfig()
    if seed is not None:
        terrain = replace(terrain, seed=seed)
    if resolution is not None:
        terrain = replace(terrain, resolution=resolution)
    return Config(terrain=terrain)
