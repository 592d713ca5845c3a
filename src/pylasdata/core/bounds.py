"""Axis-aligned 3D bounds stored in the header."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Bounds:
    """3D axis-aligned bounding box.

    Attributes:
        minx, miny, minz: Minimum corner coordinates.
        maxx, maxy, maxz: Maximum corner coordinates.
    """

    minx: float
    miny: float
    minz: float
    maxx: float
    maxy: float
    maxz: float

    @classmethod
    def from_arrays(cls, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> Bounds:
        """Compute bounds from X, Y, Z arrays."""
        return cls(
            minx=float(np.min(x)),
            miny=float(np.min(y)),
            minz=float(np.min(z)),
            maxx=float(np.max(x)),
            maxy=float(np.max(y)),
            maxz=float(np.max(z)),
        )

    @classmethod
    def from_table(cls, table: "PointTable") -> Bounds | None:
        """Bounds of a table's X/Y/Z columns, or None if it has no points."""
        if len(table) == 0 or not all(c in table for c in ("X", "Y", "Z")):
            return None
        return cls.from_arrays(table["X"], table["Y"], table["Z"])

    @property
    def mins(self) -> tuple[float, float, float]:
        return (self.minx, self.miny, self.minz)

    @property
    def maxs(self) -> tuple[float, float, float]:
        return (self.maxx, self.maxy, self.maxz)

    def __repr__(self) -> str:
        return (
            f"Bounds(x=[{self.minx:.2f}, {self.maxx:.2f}], "
            f"y=[{self.miny:.2f}, {self.maxy:.2f}], "
            f"z=[{self.minz:.2f}, {self.maxz:.2f}])"
        )
