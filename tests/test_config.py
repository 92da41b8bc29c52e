"""Tests for simulation parameters."""

import math

import pytest

from clothsim import SimulationConfig
from clothsim.models import ZERO


def test_defaults():
    config = SimulationConfig()
    assert config.time_step == 1.0 / 200.0
    assert config.deformation == 1.2
    assert config.stiffness == 5000.0
    assert config.friction == 1.0
    assert config.drag == 0.9
    assert config.gravity_on and config.constraint_on
    assert not config.wind_on
    assert config.bend_stiffness == pytest.approx(5000.0 * 0.333)


@pytest.mark.parametrize(
    "field, value",
    [
        ("time_step", 0.0),
        ("deformation", 0.9),
        ("friction", 1.5),
        ("drag", -0.1),
        ("stiffness", 0.0),
        ("bend", 0.0),
        ("bend", 1.5),
        ("wind", -1.0),
        ("wind_direction", (0.0, 0.0, 0.0)),
        ("wind_gust", 2.0),
        ("mass", -1.0),
        ("cloth_width", 0.0),
        ("flap_strength", -0.5),
    ],
)
def test_invalid_values_fail_fast(field, value):
    with pytest.raises(ValueError):
        SimulationConfig(**{field: value})


def test_replace_validates():
    config = SimulationConfig()
    assert config.replace(drag=2.0).drag == 2.0
    assert config.drag == 0.9
    with pytest.raises(ValueError):
        config.replace(stiffness=-5.0)


def test_config_is_frozen():
    config = SimulationConfig()
    with pytest.raises(AttributeError):
        config.drag = 1.0


def test_wind_off_is_zero():
    assert SimulationConfig(wind_on=False).wind_force(1.0) == ZERO


def test_wind_direction_is_normalized():
    config = SimulationConfig(wind_on=True, wind=10.0, wind_direction=(3.0, 0.0, 4.0))
    force = config.wind_force(0.0)
    assert force.x == pytest.approx(6.0)
    assert force.z == pytest.approx(8.0)
    assert force.length() == pytest.approx(10.0)


def test_wind_gust_fluctuates():
    config = SimulationConfig(wind_on=True, wind=10.0, wind_gust=0.5, wind_gust_frequency=1.0)
    assert config.wind_force(0.0).z == pytest.approx(10.0)
    assert config.wind_force(0.25).z == pytest.approx(15.0)
    assert config.wind_force(0.75).z == pytest.approx(5.0)
    assert math.isclose(config.wind_force(0.5).z, 10.0, abs_tol=1e-9)


def test_from_env_reads_prefixed_values():
    environ = {
        "CLOTHSIM_TIME_STEP": "0.01",
        "CLOTHSIM_WIND_ON": "true",
        "CLOTHSIM_GRAVITY_ON": "no",
        "CLOTHSIM_WIND_DIRECTION": "1,0,0",
        "OTHER_STIFFNESS": "1",
    }
    config = SimulationConfig.from_env(environ)
    assert config.time_step == 0.01
    assert config.wind_on is True
    assert config.gravity_on is False
    assert config.wind_direction == (1.0, 0.0, 0.0)
    assert config.stiffness == 5000.0


def test_from_env_rejects_bad_values():
    with pytest.raises(ValueError):
        SimulationConfig.from_env({"CLOTHSIM_DRAG": "-3"})
    with pytest.raises(ValueError):
        SimulationConfig.from_env({"CLOTHSIM_WIND_DIRECTION": "1,2"})
