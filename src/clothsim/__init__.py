"""
Cloth Physics Simulation Package

A mass-spring cloth simulation: a grid of particles joined by
structural, shear and flexion springs, hung from two corners and
advanced with position-history (Verlet) integration.
"""

from .cloth import Cloth
from .config import SimulationConfig
from .models import Particle, Spring, Vector3
from .snapshot import ClothState, SnapshotError

__version__ = "0.1.0"

__all__ = [
    "Cloth",
    "ClothState",
    "Particle",
    "SimulationConfig",
    "SnapshotError",
    "Spring",
    "Vector3",
]
