# diagnostics.py
"""
Stability diagnostics over the cloth's position arrays.

These only observe the simulation. Nothing here clamps or corrects
positions, so a diverging run stays visible to the caller.
"""

from dataclasses import dataclass

from numba import njit  # type: ignore
import numpy as np

from clothsim.types import INDICES, MASK, POSITIONS

# ===============================
# KERNELS
# ===============================


@njit(cache=True)  # type: ignore
def max_displacement(pos: POSITIONS, prev_pos: POSITIONS) -> float:
    """Largest distance any particle moved between two position sets."""
    best = 0.0
    for i in range(len(pos)):
        dx = pos[i, 0] - prev_pos[i, 0]
        dy = pos[i, 1] - prev_pos[i, 1]
        dz = pos[i, 2] - prev_pos[i, 2]
        d = np.sqrt(dx * dx + dy * dy + dz * dz)
        if d > best:
            best = d
    return best


@njit(cache=True)  # type: ignore
def stretch_ratios(
    pos: POSITIONS,
    spring_i: INDICES,
    spring_j: INDICES,
    rest_lengths: POSITIONS,
) -> POSITIONS:
    """Current length over resting length, per spring."""
    out = np.empty(len(spring_i), dtype=np.float64)
    for s in range(len(spring_i)):
        a = spring_i[s]
        b = spring_j[s]
        dx = pos[b, 0] - pos[a, 0]
        dy = pos[b, 1] - pos[a, 1]
        dz = pos[b, 2] - pos[a, 2]
        length = np.sqrt(dx * dx + dy * dy + dz * dz)
        if rest_lengths[s] > 0.0:
            out[s] = length / rest_lengths[s]
        else:
            out[s] = 1.0
    return out


@njit(cache=True)  # type: ignore
def kinetic_energy(
    pos: POSITIONS,
    prev_pos: POSITIONS,
    masses: POSITIONS,
    free_mask: MASK,
) -> float:
    """Sum of 1/2 m v^2 over free particles, v being the per-step displacement."""
    total = 0.0
    for i in range(len(pos)):
        if not free_mask[i]:
            continue
        dx = pos[i, 0] - prev_pos[i, 0]
        dy = pos[i, 1] - prev_pos[i, 1]
        dz = pos[i, 2] - prev_pos[i, 2]
        total += 0.5 * masses[i] * (dx * dx + dy * dy + dz * dz)
    return total


# ===============================
# REPORT
# ===============================


@dataclass(frozen=True)
class ClothStats:
    tick: int
    elapsed: float
    max_displacement: float
    max_stretch: float
    kinetic_energy: float
    finite: bool

    @property
    def is_exploded(self) -> bool:
        return not self.finite

    def summary(self) -> str:
        return (
            f"tick {self.tick} (t={self.elapsed:.3f}s) | max step: {self.max_displacement:.5f} | "
            f"max stretch: {self.max_stretch:.4f} | KE: {self.kinetic_energy:.5f}"
        )


def compute_stats(
    tick: int,
    elapsed: float,
    pos: POSITIONS,
    prev_pos: POSITIONS,
    masses: POSITIONS,
    free_mask: MASK,
    spring_i: INDICES,
    spring_j: INDICES,
    rest_lengths: POSITIONS,
) -> ClothStats:
    finite = bool(np.isfinite(pos).all())
    ratios = stretch_ratios(pos, spring_i, spring_j, rest_lengths)
    return ClothStats(
        tick=tick,
        elapsed=elapsed,
        max_displacement=float(max_displacement(pos, prev_pos)),
        max_stretch=float(ratios.max()) if len(ratios) else 1.0,
        kinetic_energy=float(kinetic_energy(pos, prev_pos, masses, free_mask)),
        finite=finite,
    )
