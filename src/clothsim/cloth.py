# cloth.py
"""
A cloth modelled as a grid of particles connected by springs.

One ``update`` advances the sheet by a fixed time step, always in the
same order: save every particle's state, apply a pending flap, step
every free particle, then (if enabled) correct over-stretched springs
once each, in creation order.
"""

from __future__ import annotations

from collections.abc import Iterator
import logging

import numpy as np

from clothsim.config import SimulationConfig
from clothsim.diagnostics import ClothStats, compute_stats
from clothsim.mesh.grid import generate_grid
from clothsim.models import Particle, Vector3
from clothsim.snapshot import ClothState, SnapshotError
from clothsim.types import INDICES, POSITIONS

logger = logging.getLogger(__name__)


class Cloth:
    def __init__(
        self,
        rows: int,
        columns: int,
        config: SimulationConfig | None = None,
    ) -> None:
        self.config = config if config is not None else SimulationConfig()
        self.rows = rows
        self.columns = columns
        self.particles, self.springs = generate_grid(rows, columns, self.config)

        self.do_flap = False
        self.tick = 0
        self.elapsed = 0.0

        spring_i = np.array([s.a for s in self.springs], dtype=np.int32)
        spring_j = np.array([s.b for s in self.springs], dtype=np.int32)
        self._spring_indices = (spring_i, spring_j)
        self._rest_lengths = np.array([s.rest_length for s in self.springs], dtype=np.float64)
        self._masses = np.array([p.mass for p in self.particles], dtype=np.float64)

        # Hang the sheet from its two top corners.
        self.get_mass(0, 0).fixed = True
        self.get_mass(0, columns - 1).fixed = True

        logger.debug(
            "Cloth %dx%d built with %d particles and %d springs",
            rows,
            columns,
            len(self.particles),
            len(self.springs),
        )

    def __repr__(self) -> str:
        return f"Cloth(rows={self.rows}, columns={self.columns}, tick={self.tick})"

    # ------------------------
    # Grid access
    # ------------------------

    def index(self, row: int, col: int) -> int:
        if not (0 <= row < self.rows and 0 <= col < self.columns):
            raise IndexError(f"({row}, {col}) is outside a {self.rows}x{self.columns} cloth")
        return row * self.columns + col

    def get_mass(self, row: int, col: int) -> Particle:
        return self.particles[self.index(row, col)]

    def fix(self, row: int, col: int) -> None:
        self.get_mass(row, col).fixed = True

    def release(self, row: int, col: int) -> None:
        self.get_mass(row, col).fixed = False

    # ------------------------
    # Simulation
    # ------------------------

    def reset(self) -> None:
        for particle in self.particles:
            particle.reset()
        self.do_flap = False
        self.tick = 0
        self.elapsed = 0.0
        logger.debug("Cloth reset")

    def request_flap(self) -> None:
        self.do_flap = True

    def flap(self) -> None:
        """Stretch the bottom edge downward, giving it a velocity kick."""
        strength = self.config.flap_strength
        offset = Vector3(0.0, -strength, 0.0)
        for col in range(self.columns):
            self.get_mass(self.rows - 1, col).displace(offset)
        logger.debug("Flapped bottom edge by %.4f", strength)

    def update(self, config: SimulationConfig | None = None) -> None:
        """
        Advance the cloth by one time step.

        Args:
            config: Parameters for this step; also becomes the cloth's
                config for later steps. Defaults to the current one.
        """
        if config is not None:
            self.config = config
        config = self.config

        for particle in self.particles:
            particle.save_state()

        if self.do_flap:
            self.flap()
            self.do_flap = False

        wind = config.wind_force(self.elapsed)
        for particle in self.particles:
            particle.make_step(self.particles, self.springs, config, wind)

        if config.constraint_on:
            for spring in self.springs:
                spring.constrain(self.particles, config.deformation)

        self.tick += 1
        self.elapsed += config.time_step

    def run(self, ticks: int, config: SimulationConfig | None = None) -> None:
        for _ in range(ticks):
            self.update(config)

    # ------------------------
    # Read accessors
    # ------------------------

    def positions(self) -> POSITIONS:
        return np.array([tuple(p.position) for p in self.particles], dtype=np.float64)

    def last_positions(self) -> POSITIONS:
        return np.array([tuple(p.last_position) for p in self.particles], dtype=np.float64)

    def fixed_mask(self) -> np.ndarray:
        return np.array([p.fixed for p in self.particles], dtype=np.bool_)

    def spring_indices(self) -> tuple[INDICES, INDICES]:
        return self._spring_indices

    def spring_segments(self) -> Iterator[tuple[Vector3, Vector3]]:
        for spring in self.springs:
            yield self.particles[spring.a].position, self.particles[spring.b].position

    def stats(self) -> ClothStats:
        spring_i, spring_j = self._spring_indices
        return compute_stats(
            self.tick,
            self.elapsed,
            self.positions(),
            self.last_positions(),
            self._masses,
            ~self.fixed_mask(),
            spring_i,
            spring_j,
            self._rest_lengths,
        )

    # ------------------------
    # Snapshot
    # ------------------------

    def snapshot(self) -> ClothState:
        return ClothState(
            rows=self.rows,
            columns=self.columns,
            positions=self.positions(),
            last_positions=self.last_positions(),
            second_last_positions=np.array(
                [tuple(p.second_last_position) for p in self.particles], dtype=np.float64
            ),
            fixed=self.fixed_mask(),
            springs=np.column_stack(self._spring_indices),
            rest_lengths=self._rest_lengths.copy(),
            tick=self.tick,
            elapsed=self.elapsed,
            flap_pending=self.do_flap,
        )

    def restore(self, state: ClothState) -> None:
        """Write ``state`` back into this cloth. The topology must match."""
        if (state.rows, state.columns) != (self.rows, self.columns):
            raise SnapshotError(
                f"snapshot is for a {state.rows}x{state.columns} cloth, "
                f"not {self.rows}x{self.columns}"
            )
        if not np.array_equal(state.springs, np.column_stack(self._spring_indices)):
            raise SnapshotError("snapshot spring topology does not match this cloth")
        if not np.array_equal(state.rest_lengths, self._rest_lengths):
            raise SnapshotError("snapshot rest lengths do not match this cloth")

        for i, particle in enumerate(self.particles):
            particle.position = Vector3(*state.positions[i])
            particle.last_position = Vector3(*state.last_positions[i])
            particle.second_last_position = Vector3(*state.second_last_positions[i])
            particle.fixed = bool(state.fixed[i])

        self.tick = state.tick
        self.elapsed = state.elapsed
        self.do_flap = state.flap_pending
        logger.debug("Cloth restored to tick %d", self.tick)

    @classmethod
    def from_state(cls, state: ClothState, config: SimulationConfig | None = None) -> Cloth:
        cloth = cls(state.rows, state.columns, config)
        cloth.restore(state)
        return cloth
