"""PointTable — columnar point storage backed by NumPy arrays."""

from __future__ import annotations

from typing import Iterator, Mapping

import numpy as np


class PointTable:
    """Point records stored as a dict of per-column arrays.

    Scalar columns are 1-D arrays of length N. Vector columns (normals,
    per-point covariances, ...) are 2-D arrays of shape (N, d). Every
    column shares the same row count.

    Examples:
        >>> t = PointTable.from_dict({"X": [1.0, 2.0], "Y": [3.0, 4.0]})
        >>> t["normal"] = np.zeros((2, 3), dtype=np.float32)
        >>> len(t), t.column_names
        (2, ['X', 'Y', 'normal'])
    """

    def __init__(self) -> None:
        self._columns: dict[str, np.ndarray] = {}

    # ── Properties ──────────────────────────────────────────────────

    @property
    def num_points(self) -> int:
        """Number of rows."""
        if not self._columns:
            return 0
        return len(next(iter(self._columns.values())))

    @property
    def column_names(self) -> list[str]:
        """Column names in insertion order."""
        return list(self._columns.keys())

    # ── Column Access ───────────────────────────────────────────────

    def __getitem__(self, key: str) -> np.ndarray:
        if key not in self._columns:
            raise KeyError(f"Column '{key}' not found. Available: {self.column_names}")
        return self._columns[key]

    def __setitem__(self, key: str, value: np.ndarray) -> None:
        """Add or replace a column; its length must match the table."""
        value = np.asarray(value)
        if value.ndim == 0:
            raise ValueError(f"Column '{key}' must be an array, got a scalar")
        others = [name for name in self._columns if name != key]
        if others and len(value) != self.num_points:
            raise ValueError(
                f"Array length {len(value)} doesn't match "
                f"existing point count {self.num_points}"
            )
        self._columns[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._columns

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return self.num_points

    def __repr__(self) -> str:
        cols = ", ".join(self.column_names[:6])
        if len(self.column_names) > 6:
            cols += f", ... (+{len(self.column_names) - 6} more)"
        return f"PointTable({self.num_points:,} points, columns=[{cols}])"

    def remove_column(self, name: str) -> np.ndarray:
        """Remove a column and return its values."""
        if name not in self._columns:
            raise KeyError(f"Column '{name}' not found")
        return self._columns.pop(name)

    # ── Construction & Conversion ───────────────────────────────────

    @classmethod
    def from_dict(cls, data: Mapping[str, np.ndarray]) -> PointTable:
        """Create from a mapping of column name to values (all same length)."""
        table = cls()
        arrays = {name: np.asarray(values) for name, values in data.items()}
        lengths = {name: len(arr) for name, arr in arrays.items()}
        if len(set(lengths.values())) > 1:
            raise ValueError(f"All arrays must have same length, got: {lengths}")
        table._columns.update(arrays)
        return table

    def to_numpy(self) -> np.ndarray:
        """Convert to a structured array; vector columns become subarrays."""
        dtype = [
            (name, arr.dtype, arr.shape[1:]) if arr.ndim > 1 else (name, arr.dtype)
            for name, arr in self._columns.items()
        ]
        result = np.empty(self.num_points, dtype=dtype)
        for name, arr in self._columns.items():
            result[name] = arr
        return result

    def select(self, names: list[str]) -> PointTable:
        """New table with the given columns (arrays are shared)."""
        return PointTable.from_dict({name: self[name] for name in names})

    def join(self, other: PointTable) -> PointTable:
        """New table holding the columns of both tables."""
        clash = set(self._columns) & set(other._columns)
        if clash:
            raise ValueError(f"Tables share columns {sorted(clash)}")
        if self._columns and other._columns and len(self) != len(other):
            raise ValueError(
                f"Can't join tables with {len(self)} and {len(other)} rows"
            )
        return PointTable.from_dict({**self._columns, **other._columns})

    def copy(self) -> PointTable:
        """Deep copy of this table."""
        return PointTable.from_dict({name: arr.copy() for name, arr in self._columns.items()})

    def isclose(self, other: PointTable, atol: float = 1e-6) -> bool:
        """Same column names (any order) and element-wise equal within ``atol``."""
        if set(self._columns) != set(other._columns) or len(self) != len(other):
            return False
        for name, arr in self._columns.items():
            theirs = other[name]
            if arr.shape != theirs.shape:
                return False
            if arr.dtype.kind == "b":
                arr, theirs = arr.astype(np.float64), theirs.astype(np.float64)
            if not np.allclose(arr, theirs, rtol=0.0, atol=atol):
                return False
        return True
