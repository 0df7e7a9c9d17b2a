"""Tests for configuration and validation"""

import pytest

from arena_terrain.config import MAX_SEED, Config, ConfigError, RampConfig, TerrainConfig, default_config
from arena_terrain.environment import TerrainService
from arena_terrain.terrain import TerrainGenerator


def test_defaults_validate():
    config = Config()
    assert config.validate() is config
    assert config.terrain.resolution == 256
    assert config.terrain.height_range == pytest.approx(38.0)
    assert config.locomotion.max_traversable_slope == 45.0
    assert config.falls.stagger_duration_ms == 300


@pytest.mark.parametrize('field, value', [
    ('resolution', 1),
    ('resolution', 0),
    ('resolution', 64.5),
    ('base_frequency', 0.0),
    ('base_frequency', -0.01),
    ('base_frequency', float('nan')),
    ('octaves', 0),
    ('persistence', 0.0),
    ('persistence', 1.0),
    ('max_height', -10.0),
    ('min_height', 30.0),
    ('smoothness', -0.1),
    ('smoothness', 1.5),
    ('seed', -1),
    ('seed', 2 ** 31),
    ('seed', 2 ** 53),
])
def test_degenerate_terrain_config_rejected(field, value):
    config = TerrainConfig(**{field: value})
    with pytest.raises(ConfigError):
        config.validate()


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_generator_validates_before_work():
    config = Config(terrain=TerrainConfig(resolution=1))
    with pytest.raises(ConfigError):
        TerrainGenerator(config)


def test_service_rejects_invalid_request_synchronously():
    with TerrainService(Config(terrain=TerrainConfig(resolution=32))) as service:
        with pytest.raises(ConfigError):
            service.request(terrain=TerrainConfig(octaves=0))
        assert service.latest_ticket == 0, "Rejected requests take no ticket"


def test_with_seed_keeps_other_fields():
    config = default_config(resolution=64)
    seeded = config.with_seed(17)
    assert seeded.terrain.seed == 17
    assert seeded.terrain.resolution == 64
    assert config.terrain.seed == 0


def test_from_dict_nested_sections():
    config = Config.from_dict({
        'terrain': {'seed': 9, 'resolution': 64, 'unknown_key': 1},
        'locomotion': {'walk_speed': 6.0},
        'verbose': True,
    })
    assert config.terrain.seed == 9
    assert config.terrain.resolution == 64
    assert config.terrain.octaves == TerrainConfig().octaves
    assert config.locomotion.walk_speed == 6.0
    assert config.verbose is True


def test_to_dict_roundtrip():
    config = default_config(seed=5, resolution=64)
    restored = Config.from_dict(config.to_dict())
    assert restored.terrain == config.terrain
    assert restored.locomotion == config.locomotion


def test_largest_seed_accepted():
    assert TerrainConfig(seed=MAX_SEED).validate().seed == MAX_SEED


def test_ramp_easing_range_checked():
    with pytest.raises(ConfigError):
        Config(ramps=RampConfig(easing=1.5)).validate()
