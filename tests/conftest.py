"""Pytest configuration and shared fixtures."""

import pytest

from clothsim import Cloth, SimulationConfig
from clothsim.models import Particle, Vector3


@pytest.fixture
def config():
    """Default simulation parameters."""
    return SimulationConfig()


@pytest.fixture
def still_config():
    """No gravity and no wind: only springs and drag act."""
    return SimulationConfig(gravity_on=False, wind_on=False)


@pytest.fixture
def small_cloth(config):
    """A 3x3 cloth hung from its two top corners."""
    return Cloth(3, 3, config)


@pytest.fixture
def pair():
    """Two free particles one unit apart along x."""
    return [
        Particle(0, 1.0, Vector3(0.0, 0.0, 0.0)),
        Particle(1, 1.0, Vector3(1.0, 0.0, 0.0)),
    ]
