# models.py
from __future__ import annotations

from collections.abc import Iterator, Sequence
import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clothsim.config import SimulationConfig
    from clothsim.types import SpringKind


class Vector3:
    """Immutable 3D vector. Arithmetic always returns a new instance."""

    __slots__ = ["x", "y", "z"]

    def __init__(self, x: float, y: float, z: float) -> None:
        self.x, self.y, self.z = float(x), float(y), float(z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __repr__(self) -> str:
        return f"Vector3({self.x!r}, {self.y!r}, {self.z!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    def __hash__(self) -> int:
        return hash((self.x, self.y, self.z))

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3:  # Handles: scalar * vector
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3:
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> Vector3:
        """Unit vector in the same direction; the zero vector maps to itself."""
        length = self.length()
        return self / length if length != 0 else Vector3(0, 0, 0)

    def cross(self, other: Vector3) -> Vector3:
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def distance_to(self, other: Vector3) -> float:
        return (other - self).length()


ZERO = Vector3(0, 0, 0)
DOWN = Vector3(0, -1, 0)


class Particle:
    """
    A point mass on the cloth lattice.

    Velocity is never stored. It is reconstructed from the two saved
    positions, so ``save_state`` must run on every particle before any
    particle is advanced.
    """

    def __init__(self, index: int, mass: float, position0: Vector3) -> None:
        if mass <= 0:
            raise ValueError(f"particle mass must be positive, got {mass}")
        self.index = index
        self.mass = float(mass)
        self.position0 = position0
        self.fixed = False  # If True, integration never moves this particle
        self.springs: list[int] = []  # Indices into the owning cloth's spring list
        self.reset()

    def __repr__(self) -> str:
        return f"Particle(index={self.index}, position={self.position!r}, fixed={self.fixed})"

    def add_spring(self, spring_index: int) -> None:
        self.springs.append(spring_index)

    def reset(self) -> None:
        self.position = self.position0
        self.last_position = self.position0
        self.second_last_position = self.position0

    def save_state(self) -> None:
        self.second_last_position = self.last_position
        self.last_position = self.position

    def displace(self, offset: Vector3) -> None:
        """Shift the current and saved positions, keeping the older one."""
        if self.fixed:
            return
        self.position = self.position + offset
        self.last_position = self.last_position + offset

    def velocity(self) -> Vector3:
        """Implied velocity: the last completed step's displacement."""
        return self.last_position - self.second_last_position

    def drag_force(self, config: SimulationConfig) -> Vector3:
        return self.velocity() * -config.drag

    def compute_acceleration(
        self,
        particles: Sequence[Particle],
        springs: Sequence[Spring],
        config: SimulationConfig,
        wind: Vector3 = ZERO,
    ) -> Vector3:
        """
        Newton's second law over the forces acting on this particle:
        all incident springs, gravity, wind and drag.

        Args:
            particles: The cloth's particle arena
            springs: The cloth's spring list (``self.springs`` indexes it)
            config: Simulation parameters
            wind: Wind force for the current tick

        Returns:
            Acceleration vector
        """
        force = ZERO
        for spring_index in self.springs:
            force = force + springs[spring_index].compute_force(self.index, particles)

        if config.gravity_on:
            force = force + DOWN * (config.gravity * self.mass)
        if config.wind_on:
            force = force + wind
        force = force + self.drag_force(config)

        return force / self.mass

    def compute_step(self, time_step: float, acceleration: Vector3, friction: float = 1.0) -> None:
        velocity = self.velocity() * friction
        self.position = (
            self.last_position + velocity * time_step + acceleration * (time_step * time_step)
        )

    def make_step(
        self,
        particles: Sequence[Particle],
        springs: Sequence[Spring],
        config: SimulationConfig,
        wind: Vector3 = ZERO,
    ) -> None:
        if self.fixed:
            return
        acceleration = self.compute_acceleration(particles, springs, config, wind)
        self.compute_step(config.time_step, acceleration, config.friction)


class Spring:
    """
    Hooke's-law connector between two particles of a cloth, referenced by
    index. The resting length is taken from the particles' initial
    positions and never changes.
    """

    def __init__(
        self,
        a: int,
        b: int,
        stiffness: float,
        rest_length: float,
        kind: SpringKind = "structural",
    ) -> None:
        if a == b:
            raise ValueError(f"spring cannot connect particle {a} to itself")
        if stiffness <= 0:
            raise ValueError(f"spring stiffness must be positive, got {stiffness}")
        self.a = a
        self.b = b
        self.stiffness = float(stiffness)
        self.rest_length = float(rest_length)
        self.kind = kind

    @classmethod
    def between(
        cls,
        particles: Sequence[Particle],
        a: int,
        b: int,
        stiffness: float,
        kind: SpringKind = "structural",
    ) -> Spring:
        rest_length = particles[a].position0.distance_to(particles[b].position0)
        return cls(a, b, stiffness, rest_length, kind)

    def __repr__(self) -> str:
        return (
            f"Spring({self.a}, {self.b}, stiffness={self.stiffness}, "
            f"rest_length={self.rest_length}, kind={self.kind!r})"
        )

    def other(self, index: int) -> int:
        if index == self.a:
            return self.b
        if index == self.b:
            return self.a
        raise ValueError(f"particle {index} is not an end of spring ({self.a}, {self.b})")

    def compute_force(self, on: int, particles: Sequence[Particle]) -> Vector3:
        """Force exerted on particle ``on``, from both ends' saved positions."""
        other = particles[self.other(on)]
        this = particles[on]
        distance = other.last_position - this.last_position
        return distance.normalize() * ((distance.length() - self.rest_length) * self.stiffness)

    def constrain(self, particles: Sequence[Particle], deformation: float) -> bool:
        """
        Pull the two ends together so they are at most
        ``rest_length * deformation`` apart. A fixed end is never moved.

        Returns:
            True if a correction was applied
        """
        pa = particles[self.a]
        pb = particles[self.b]
        if pa.fixed and pb.fixed:
            return False

        delta = pb.position - pa.position
        length = delta.length()
        limit = self.rest_length * deformation
        if length <= limit or length == 0:
            return False

        direction = delta / length
        excess = length - limit

        if pa.fixed:
            pb.position = pb.position - direction * excess
        elif pb.fixed:
            pa.position = pa.position + direction * excess
        else:
            half = excess * 0.5
            pa.position = pa.position + direction * half
            pb.position = pb.position - direction * half
        return True
