import pytest

from evoracer.config import SimulationConfig


def test_defaults_are_valid():
    config = SimulationConfig()
    assert config.population_size == 50
    assert config.elite_count == 2
    assert config.max_workers == 1


@pytest.mark.parametrize("overrides", [
    {"population_size": 1},
    {"population_size": 1001},
    {"mutation_rate": -0.01},
    {"mutation_rate": 1.5},
    {"crossover_rate": 2.0},
    {"mutation_scale": -1.0},
    {"weight_init_scale": 0.0},
    {"population_size": 4, "elite_count": 5},
    {"parent_pool_fraction": 0.0},
    {"hidden_size": 0},
    {"time_step": 0.0},
    {"ticks_per_frame": 0},
    {"ticks_per_frame": 101},
    {"max_workers": 0},
    {"lifetime_limit": -5.0},
])
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ValueError):
        SimulationConfig(**overrides)


def test_config_is_immutable():
    config = SimulationConfig()
    with pytest.raises(AttributeError):
        config.mutation_rate = 0.5
