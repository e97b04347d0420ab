import pytest

from admitsim.config import SimulationConfig


def test_defaults_match_console_simulator():
    config = SimulationConfig()

    assert config.max_connections == 5
    assert config.arrival_chance == 0.2
    assert config.arrival_priorities == (2, 3)
    assert config.vip_chance == 0.02
    assert config.vip_name == "The King"
    assert config.disconnect_chance == 0.10
    assert config.tick_delay == (0.5, 1.5)


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_connections": 0},
        {"arrival_chance": 1.2},
        {"vip_chance": -0.1},
        {"disconnect_chance": 2},
        {"arrival_priorities": (3, 2)},
        {"tick_delay": (2.0, 1.0)},
        {"tick_delay": (-1.0, 1.0)},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValueError):
        SimulationConfig(**overrides)


@pytest.mark.parametrize("value", [2.0, "3", True])
def test_non_integer_capacity_is_a_type_error(value):
    with pytest.raises(TypeError):
        SimulationConfig(max_connections=value)


def test_from_dict_round_trip():
    config = SimulationConfig.from_dict({"max_connections": 3, "tick_delay": [1, 2], "seed": 4})

    assert config.max_connections == 3
    assert config.tick_delay == (1.0, 2.0)
    assert SimulationConfig.from_dict(config.as_dict()) == config


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="slots"):
        SimulationConfig.from_dict({"slots": 3})
