"""Tests for cloth lattice construction."""

import pytest

from clothsim import SimulationConfig
from clothsim.mesh.grid import count_springs, generate_grid


@pytest.mark.parametrize(
    "rows, columns, expected",
    [
        (2, 2, {"structural": 4, "shear": 2, "flexion": 0}),
        (3, 3, {"structural": 12, "shear": 8, "flexion": 6}),
        (4, 5, {"structural": 31, "shear": 24, "flexion": 22}),
    ],
)
def test_spring_counts_per_class(rows, columns, expected, config):
    particles, springs = generate_grid(rows, columns, config)
    assert len(particles) == rows * columns
    assert count_springs(springs) == expected


@pytest.mark.parametrize("rows, columns", [(1, 3), (3, 1), (0, 0)])
def test_rejects_degenerate_grid(rows, columns, config):
    with pytest.raises(ValueError):
        generate_grid(rows, columns, config)


def test_layout_matches_geometry():
    config = SimulationConfig(cloth_top=2.0, cloth_height=1.0, cloth_width=2.0)
    particles, _ = generate_grid(3, 5, config)
    first = particles[0].position0
    last = particles[-1].position0
    assert tuple(first) == (-1.0, 2.0, 0.0)
    assert tuple(last) == (1.0, 1.0, 0.0)
    # row-major: index = row * columns + col
    assert tuple(particles[1 * 5 + 2].position0) == (0.0, 1.5, 0.0)


def test_no_duplicates_and_positive_rest_lengths(config):
    _, springs = generate_grid(5, 6, config)
    seen = set()
    for spring in springs:
        key = (spring.kind, frozenset((spring.a, spring.b)))
        assert key not in seen
        seen.add(key)
        assert spring.rest_length > 0


def test_flexion_springs_are_softer(config):
    _, springs = generate_grid(4, 4, config)
    for spring in springs:
        if spring.kind == "flexion":
            assert spring.stiffness == pytest.approx(config.stiffness * config.bend)
        else:
            assert spring.stiffness == config.stiffness


def test_particles_know_their_springs(config):
    particles, springs = generate_grid(3, 4, config)
    for s_index, spring in enumerate(springs):
        assert s_index in particles[spring.a].springs
        assert s_index in particles[spring.b].springs
    total = sum(len(p.springs) for p in particles)
    assert total == 2 * len(springs)
