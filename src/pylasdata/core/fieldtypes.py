"""Element types allowed for user-defined (extra bytes) point fields."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from pylasdata.errors import UnsupportedFieldTypeError


class FieldType(Enum):
    """Closed set of per-point element kinds.

    Each member carries its LAS Extra Bytes ``data_type`` code and the numpy
    dtype used for the in-memory column. ``BOOL`` shares code 1 with
    ``UINT8``: on disk a flag is just an unsigned char.
    """

    UINT8 = (1, "u1")
    INT8 = (2, "i1")
    UINT16 = (3, "u2")
    INT16 = (4, "i2")
    UINT32 = (5, "u4")
    INT32 = (6, "i4")
    UINT64 = (7, "u8")
    INT64 = (8, "i8")
    FLOAT32 = (9, "f4")
    FLOAT64 = (10, "f8")
    BOOL = (1, "?")

    @property
    def code(self) -> int:
        """LAS Extra Bytes data type code."""
        return self.value[0]

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.value[1])

    @property
    def size(self) -> int:
        """Size of one element in bytes."""
        return self.dtype.itemsize

    @property
    def is_float(self) -> bool:
        return self.dtype.kind == "f"

    @property
    def is_signed(self) -> bool:
        return self.dtype.kind == "i"

    @classmethod
    def from_dtype(cls, dtype: np.dtype | type | str) -> FieldType:
        """Map a numpy dtype to its FieldType.

        Raises:
            UnsupportedFieldTypeError: For strings, objects, complex numbers
                and anything else without a fixed LAS representation.
        """
        dt = np.dtype(dtype)
        if dt.kind in "biuf":
            dt = dt.newbyteorder("=")
        for member in cls:
            if member.dtype == dt:
                return member
        raise UnsupportedFieldTypeError(
            f"Only columns of base types or fixed-size vectors of base types "
            f"are supported as custom columns. Got type {dt}"
        )

    @classmethod
    def from_code(cls, code: int) -> FieldType:
        """Map an on-disk data type code to a FieldType (1 reads as UINT8)."""
        for member in cls:
            if member.code == code:
                return member
        raise UnsupportedFieldTypeError(f"Unknown extra bytes data type code {code}")

    def __str__(self) -> str:
        return self.name.lower()


def split_column_name(name: str, dim: int) -> list[str]:
    """Field names for each entry of a vector column (zero indexed)."""
    return [f"{name} [{i}]" for i in range(dim)]


@dataclass(frozen=True)
class ColumnType:
    """Type of a whole user column: a scalar or a fixed-size vector.

    Attributes:
        element: Element kind of every value.
        dim: Vector dimension, or None for a scalar column.
    """

    element: FieldType
    dim: int | None = None

    def __post_init__(self) -> None:
        if self.dim is not None and self.dim < 1:
            raise UnsupportedFieldTypeError(f"Vector columns need dim >= 1, got {self.dim}")

    @classmethod
    def of(cls, values: np.ndarray) -> ColumnType:
        """Infer the column type of an array of per-point values."""
        values = np.asarray(values)
        element = FieldType.from_dtype(values.dtype)
        if values.ndim == 1:
            return cls(element)
        if values.ndim == 2:
            return cls(element, values.shape[1])
        raise UnsupportedFieldTypeError(
            f"Columns must be 1-D (scalar) or 2-D (vector) arrays, got shape {values.shape}"
        )

    @property
    def is_vector(self) -> bool:
        return self.dim is not None

    @property
    def size(self) -> int:
        """Bytes the column adds to every point record."""
        return self.element.size * (self.dim or 1)

    def field_names(self, name: str) -> list[str]:
        """Names of the extra fields documenting a column called ``name``."""
        if self.dim is None:
            return [name]
        return split_column_name(name, self.dim)

    def __str__(self) -> str:
        if self.dim is None:
            return str(self.element)
        return f"{self.element}[{self.dim}]"
