"""Tests for the stability diagnostics."""

import math

import numpy as np
import pytest

from clothsim import Cloth
from clothsim.diagnostics import kinetic_energy, max_displacement, stretch_ratios
from clothsim.models import Vector3


def test_max_displacement_kernel():
    pos = np.array([[0.0, 0.0, 0.0], [3.0, 4.0, 0.0]])
    prev = np.zeros((2, 3))
    assert max_displacement(pos, prev) == pytest.approx(5.0)


def test_stretch_ratio_kernel():
    pos = np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [2.0, 1.0, 0.0]])
    spring_i = np.array([0, 1], dtype=np.int32)
    spring_j = np.array([1, 2], dtype=np.int32)
    rest = np.array([1.0, 2.0])
    ratios = stretch_ratios(pos, spring_i, spring_j, rest)
    assert ratios.tolist() == pytest.approx([2.0, 0.5])


def test_kinetic_energy_skips_fixed():
    pos = np.array([[1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
    prev = np.zeros((2, 3))
    masses = np.array([2.0, 2.0])
    free = np.array([True, False])
    # v = 1 per step -> 1/2 * 2 * 1
    assert kinetic_energy(pos, prev, masses, free) == pytest.approx(1.0)


def test_fresh_cloth_stats(small_cloth):
    stats = small_cloth.stats()
    assert stats.tick == 0
    assert stats.max_displacement == 0.0
    assert stats.max_stretch == pytest.approx(1.0)
    assert stats.kinetic_energy == 0.0
    assert stats.finite and not stats.is_exploded
    assert "tick 0" in stats.summary()


def test_stats_track_motion(small_cloth):
    small_cloth.run(20)
    stats = small_cloth.stats()
    assert stats.tick == 20
    assert stats.max_displacement > 0.0
    assert stats.kinetic_energy > 0.0


def test_non_finite_positions_are_reported_not_masked(small_cloth):
    small_cloth.get_mass(2, 2).position = Vector3(math.nan, 0.0, 0.0)
    stats = small_cloth.stats()
    assert stats.is_exploded
    assert math.isnan(small_cloth.get_mass(2, 2).position.x)
