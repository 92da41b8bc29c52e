# grid.py
"""
Rectangular cloth lattice generation.

Springs come in three classes:
1. Structural: to the south and east neighbours (stretch)
2. Shear: to the south-east and south-west diagonals
3. Flexion: two cells south and two cells east (bending, softer)

Links are only made forward, so no pair is connected twice in a class.
"""

import logging

from clothsim.config import SimulationConfig
from clothsim.models import Particle, Spring, Vector3
from clothsim.types import SpringKind

logger = logging.getLogger(__name__)


def generate_grid(
    rows: int,
    columns: int,
    config: SimulationConfig,
) -> tuple[list[Particle], list[Spring]]:
    """
    Generate the particles and springs of a ``rows`` x ``columns`` cloth.

    The (0, 0) particle sits at ``(-cloth_width / 2, cloth_top, 0)``;
    rows go down along -y and columns go right along +x, all in the
    z = 0 plane.

    Args:
        rows: Number of particle rows (>= 2)
        columns: Number of particle columns (>= 2)
        config: Supplies geometry, particle mass and spring stiffness

    Returns:
        (particles, springs) tuple, particles indexed by ``row * columns + col``
    """
    if rows < 2 or columns < 2:
        raise ValueError(f"cloth needs at least 2 rows and 2 columns, got {rows}x{columns}")

    x0 = -config.cloth_width / 2.0
    y0 = config.cloth_top
    dx = config.cloth_width / (columns - 1)
    dy = -config.cloth_height / (rows - 1)

    particles: list[Particle] = []
    for r in range(rows):
        for c in range(columns):
            position = Vector3(x0 + dx * c, y0 + dy * r, 0.0)
            particles.append(Particle(len(particles), config.mass, position))

    springs: list[Spring] = []
    added_springs: set[tuple[SpringKind, int, int]] = set()

    def idx(r: int, c: int) -> int:
        return r * columns + c

    def add_unique_spring(i1: int, i2: int, stiffness: float, kind: SpringKind) -> None:
        key = (kind, min(i1, i2), max(i1, i2))
        if key in added_springs:
            return
        added_springs.add(key)
        spring = Spring.between(particles, i1, i2, stiffness, kind)
        spring_index = len(springs)
        springs.append(spring)
        particles[i1].add_spring(spring_index)
        particles[i2].add_spring(spring_index)

    stiffness = config.stiffness
    bend_stiffness = config.bend_stiffness

    for r in range(rows):
        for c in range(columns):
            here = idx(r, c)

            if r + 1 < rows:
                add_unique_spring(here, idx(r + 1, c), stiffness, "structural")
            if c + 1 < columns:
                add_unique_spring(here, idx(r, c + 1), stiffness, "structural")

            if r + 1 < rows and c + 1 < columns:
                add_unique_spring(here, idx(r + 1, c + 1), stiffness, "shear")
            if r + 1 < rows and c > 0:
                add_unique_spring(here, idx(r + 1, c - 1), stiffness, "shear")

            if r + 2 < rows:
                add_unique_spring(here, idx(r + 2, c), bend_stiffness, "flexion")
            if c + 2 < columns:
                add_unique_spring(here, idx(r, c + 2), bend_stiffness, "flexion")

    logger.debug(
        "Generated %dx%d grid: %d particles, %d springs",
        rows,
        columns,
        len(particles),
        len(springs),
    )
    return particles, springs


def count_springs(springs: list[Spring]) -> dict[str, int]:
    counts = {"structural": 0, "shear": 0, "flexion": 0}
    for spring in springs:
        counts[spring.kind] += 1
    return counts
