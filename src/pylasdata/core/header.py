"""LAS public header block — counts, sizes and derived byte offsets."""

from __future__ import annotations

import copy
from dataclasses import dataclass

from pylasdata.core.bounds import Bounds
from pylasdata.core.formats import (
    DEFAULT_COORDINATE_SCALE,
    EXTENDED_RECORDS_MIN_VERSION,
    NO_UNIT_CONVERSION,
    PointFormat,
    get_point_format,
    header_size_for,
)
from pylasdata.errors import InvalidUnitScaleError


def check_unit_scale(unit_scale: tuple[float, float, float]) -> tuple[float, float, float]:
    """Validate a per-axis unit scale and return it as a float triple."""
    scale = tuple(float(s) for s in unit_scale)
    if len(scale) != 3:
        raise InvalidUnitScaleError(f"Unit scale needs 3 components, got {unit_scale}")
    if not all(s > 0 for s in scale):
        raise InvalidUnitScaleError(f"Unit conversion factors must be positive! Got {unit_scale}")
    return scale


@dataclass
class HeaderModel:
    """Scalar metadata of a LAS dataset.

    Offsets are derived values: ``payload_offset`` is the header size plus
    any leading user bytes plus the size of every VLR, and
    ``extended_section_offset`` is the end of the point records when EVLRs
    exist (0 otherwise). Only :class:`~pylasdata.core.dataset.Dataset`
    changes record counts, record length or offsets after construction.

    Attributes:
        format_version: LAS version as (major, minor).
        point_format_id: Point data record format (0-10).
        point_count: Number of point records.
        record_length: Bytes per point record, standard plus extra fields.
        ordinary_record_count: Number of VLRs.
        extended_record_count: Number of EVLRs.
        payload_offset: Byte offset of the first point record.
        extended_section_offset: Byte offset of the first EVLR, or 0.
        unit_scale: Per-axis unit conversion applied on ingest.
        coordinate_scale: Per-axis scale of the stored integer coordinates.
        coordinate_offset: Per-axis offset of the stored integer coordinates.
        bounds: Extent of the points, if known.
        generating_software: Name of the producing software.
    """

    format_version: tuple[int, int] = (1, 2)
    point_format_id: int = 0
    point_count: int = 0
    record_length: int = 0
    ordinary_record_count: int = 0
    extended_record_count: int = 0
    payload_offset: int = 0
    extended_section_offset: int = 0
    unit_scale: tuple[float, float, float] = NO_UNIT_CONVERSION
    coordinate_scale: tuple[float, float, float] = (DEFAULT_COORDINATE_SCALE,) * 3
    coordinate_offset: tuple[float, float, float] = (0.0, 0.0, 0.0)
    bounds: Bounds | None = None
    generating_software: str = "pylasdata"

    def __post_init__(self) -> None:
        self.format_version = tuple(self.format_version)
        header_size_for(self.format_version)
        get_point_format(self.point_format_id)
        self.unit_scale = check_unit_scale(self.unit_scale)
        self.coordinate_scale = tuple(float(s) for s in self.coordinate_scale)
        if any(s == 0 for s in self.coordinate_scale):
            raise InvalidUnitScaleError(
                f"Coordinate scale must be non-zero! Got {self.coordinate_scale}"
            )
        self.coordinate_offset = tuple(float(o) for o in self.coordinate_offset)

    @property
    def header_size(self) -> int:
        """Size of the fixed header block for this version."""
        return header_size_for(self.format_version)

    @property
    def point_format(self) -> PointFormat:
        return get_point_format(self.point_format_id)

    @property
    def supports_extended_records(self) -> bool:
        return self.format_version >= EXTENDED_RECORDS_MIN_VERSION

    @property
    def version_string(self) -> str:
        return f"{self.format_version[0]}.{self.format_version[1]}"

    def recompute_extended_offset(self) -> None:
        """Point the EVLR offset just past the point records (0 without EVLRs)."""
        if self.extended_record_count > 0:
            self.extended_section_offset = (
                self.payload_offset + self.record_length * self.point_count
            )
        else:
            self.extended_section_offset = 0

    def copy(self) -> HeaderModel:
        return copy.copy(self)
