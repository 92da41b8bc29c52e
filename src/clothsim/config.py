# config.py
"""
Simulation parameters for the cloth.

All toggles and tunables live on one frozen record that is handed to the
cloth explicitly, so a simulation run is a function of its inputs only.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from dataclasses import dataclass
import math
import os
from typing import Any

from clothsim.models import ZERO, Vector3


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_vector(value: str) -> tuple[float, float, float]:
    parts = [float(p) for p in value.split(",")]
    if len(parts) != 3:
        raise ValueError(f"expected three comma-separated numbers, got {value!r}")
    return parts[0], parts[1], parts[2]


@dataclass(frozen=True)
class SimulationConfig:
    time_step: float = 1.0 / 200.0
    deformation: float = 1.2
    gravity: float = 9.8
    friction: float = 1.0
    drag: float = 0.9
    stiffness: float = 5000.0
    bend: float = 0.333
    wind: float = 100.0
    wind_direction: tuple[float, float, float] = (0.0, 0.0, 1.0)
    wind_gust: float = 0.0
    wind_gust_frequency: float = 0.5

    gravity_on: bool = True
    wind_on: bool = False
    constraint_on: bool = True

    mass: float = 1.0
    cloth_top: float = 1.0
    cloth_height: float = 1.0
    cloth_width: float = 1.5
    flap_strength: float = 0.2

    def __post_init__(self) -> None:
        if self.time_step <= 0:
            raise ValueError("time_step must be positive")
        if self.deformation < 1.0:
            raise ValueError("deformation must be >= 1.0")
        if not 0.0 <= self.friction <= 1.0:
            raise ValueError("friction must be in the range [0, 1]")
        if self.drag < 0:
            raise ValueError("drag must be >= 0")
        if self.stiffness <= 0:
            raise ValueError("stiffness must be positive")
        if not 0.0 < self.bend <= 1.0:
            raise ValueError("bend must be in the range (0, 1]")
        if self.wind < 0:
            raise ValueError("wind must be >= 0")
        if len(self.wind_direction) != 3:
            raise ValueError("wind_direction must be a 3D vector")
        if Vector3(*self.wind_direction).length() == 0:
            raise ValueError("wind_direction must be non-zero")
        if not 0.0 <= self.wind_gust <= 1.0:
            raise ValueError("wind_gust must be in the range [0, 1]")
        if self.wind_gust_frequency < 0:
            raise ValueError("wind_gust_frequency must be >= 0")
        if self.mass <= 0:
            raise ValueError("mass must be positive")
        if self.cloth_width <= 0 or self.cloth_height <= 0:
            raise ValueError("cloth_width and cloth_height must be positive")
        if self.flap_strength < 0:
            raise ValueError("flap_strength must be >= 0")

    @property
    def bend_stiffness(self) -> float:
        return self.stiffness * self.bend

    def wind_force(self, time: float) -> Vector3:
        """Wind force on each free particle at simulated ``time``."""
        if not self.wind_on:
            return ZERO
        strength = self.wind
        if self.wind_gust:
            strength *= 1.0 + self.wind_gust * math.sin(
                2.0 * math.pi * self.wind_gust_frequency * time
            )
        return Vector3(*self.wind_direction).normalize() * strength

    def replace(self, **changes: Any) -> SimulationConfig:
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str = "CLOTHSIM_",
    ) -> SimulationConfig:
        """
        Build a config from environment variables such as
        ``CLOTHSIM_TIME_STEP`` or ``CLOTHSIM_WIND_ON=true``.
        Unset variables keep their defaults.
        """
        if environ is None:
            environ = os.environ

        values: dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            raw = environ.get(prefix + f.name.upper())
            if raw is None:
                continue
            if f.name.endswith("_on"):
                values[f.name] = _parse_bool(raw)
            elif f.name == "wind_direction":
                values[f.name] = _parse_vector(raw)
            else:
                values[f.name] = float(raw)
        return cls(**values)
