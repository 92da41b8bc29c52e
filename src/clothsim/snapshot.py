# snapshot.py
"""Capture and persistence of the full simulation state of a cloth."""

from __future__ import annotations

from dataclasses import dataclass
import os

import numpy as np

from clothsim.types import INDICES, MASK, POSITIONS


class SnapshotError(ValueError):
    """A snapshot does not match the cloth it is restored into."""


@dataclass
class ClothState:
    """
    Everything needed to continue a simulation exactly: all three
    position histories, anchors, topology and the tick bookkeeping.
    Float data is kept as float64 so a restore is bit-exact.
    """

    rows: int
    columns: int
    positions: POSITIONS
    last_positions: POSITIONS
    second_last_positions: POSITIONS
    fixed: MASK
    springs: INDICES  # (M, 2) endpoint indices
    rest_lengths: POSITIONS
    tick: int = 0
    elapsed: float = 0.0
    flap_pending: bool = False

    def __post_init__(self) -> None:
        n = self.rows * self.columns
        for name in ("positions", "last_positions", "second_last_positions"):
            arr = np.asarray(getattr(self, name), dtype=np.float64)
            if arr.shape != (n, 3):
                raise SnapshotError(f"{name} must have shape ({n}, 3), got {arr.shape}")
            setattr(self, name, arr)

        self.fixed = np.asarray(self.fixed, dtype=np.bool_)
        if self.fixed.shape != (n,):
            raise SnapshotError(f"fixed must have shape ({n},), got {self.fixed.shape}")

        self.springs = np.asarray(self.springs, dtype=np.int32).reshape(-1, 2)
        self.rest_lengths = np.asarray(self.rest_lengths, dtype=np.float64)
        if self.rest_lengths.shape != (len(self.springs),):
            raise SnapshotError("rest_lengths must have one entry per spring")

    def save(self, path: str | os.PathLike[str]) -> None:
        np.savez(
            path,
            shape=np.array([self.rows, self.columns], dtype=np.int64),
            positions=self.positions,
            last_positions=self.last_positions,
            second_last_positions=self.second_last_positions,
            fixed=self.fixed,
            springs=self.springs,
            rest_lengths=self.rest_lengths,
            tick=np.array(self.tick, dtype=np.int64),
            elapsed=np.array(self.elapsed, dtype=np.float64),
            flap_pending=np.array(self.flap_pending, dtype=np.bool_),
        )

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> ClothState:
        with np.load(path) as data:
            rows, columns = (int(v) for v in data["shape"])
            return cls(
                rows=rows,
                columns=columns,
                positions=data["positions"],
                last_positions=data["last_positions"],
                second_last_positions=data["second_last_positions"],
                fixed=data["fixed"],
                springs=data["springs"],
                rest_lengths=data["rest_lengths"],
                tick=int(data["tick"]),
                elapsed=float(data["elapsed"]),
                flap_pending=bool(data["flap_pending"]),
            )
