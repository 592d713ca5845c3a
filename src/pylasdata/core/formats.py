"""LAS point formats, their standard dimensions, and layout constants.

Standard dimension layouts come from laspy's point format tables; only the
column names used by this package are defined here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import laspy
import numpy as np
from laspy.header import LAS_HEADERS_SIZE
from laspy.point.dims import preferred_file_version_for_point_format
from laspy.vlrs.known import ExtraBytesStruct

from pylasdata.errors import SchemaMismatchError


def _parse_version(text: str) -> tuple[int, int]:
    major, minor = text.split(".")
    return int(major), int(minor)


# Fixed public header size by LAS version (1.0 shares the 1.1 layout)
HEADER_SIZES: dict[tuple[int, int], int] = {
    (1, 0): LAS_HEADERS_SIZE["1.1"],
    **{_parse_version(v): size for v, size in LAS_HEADERS_SIZE.items()},
}

VLR_HEADER_SIZE = 54
EVLR_HEADER_SIZE = 60
EXTRA_BYTES_ENTRY_SIZE = ExtraBytesStruct.size()
EXTRA_BYTES_NAME_SIZE = 32
RECORD_DESCRIPTION_SIZE = 32
RECORD_USER_ID_SIZE = 16
MAX_RECORD_LENGTH = 0xFFFF

LAS_SPEC_USER_ID = "LASF_Spec"
EXTRA_BYTES_RECORD_ID = 4
LAS_PROJECTION_USER_ID = "LASF_Projection"
WKT_RECORD_ID = 2112

EXTENDED_RECORDS_MIN_VERSION = (1, 4)

# Raw per-point bytes with no Extra Bytes description
UNDOCUMENTED_BYTES_COLUMN = "undocumented_bytes"
ID_COLUMN = "id"

NO_UNIT_CONVERSION = (1.0, 1.0, 1.0)
DEFAULT_COORDINATE_SCALE = 0.001

# laspy dimension name → pylasdata column name
_LASPY_DIM_MAP = {
    "X": "X",
    "Y": "Y",
    "Z": "Z",
    "intensity": "Intensity",
    "return_number": "ReturnNumber",
    "number_of_returns": "NumberOfReturns",
    "scan_direction_flag": "ScanDirectionFlag",
    "edge_of_flight_line": "EdgeOfFlightLine",
    "classification": "Classification",
    "synthetic": "Synthetic",
    "key_point": "KeyPoint",
    "withheld": "Withheld",
    "overlap": "Overlap",
    "scanner_channel": "ScannerChannel",
    "scan_angle_rank": "ScanAngleRank",
    "scan_angle": "ScanAngle",
    "user_data": "UserData",
    "point_source_id": "PointSourceId",
    "gps_time": "GpsTime",
    "red": "Red",
    "green": "Green",
    "blue": "Blue",
    "nir": "NIR",
    "wavepacket_index": "WavePacketDescriptorIndex",
    "wavepacket_offset": "ByteOffsetToWaveformData",
    "wavepacket_size": "WaveformPacketSize",
    "return_point_wave_location": "ReturnPointWaveformLocation",
    "x_t": "Xt",
    "y_t": "Yt",
    "z_t": "Zt",
}


@dataclass(frozen=True)
class PointField:
    """One standard dimension of a point format.

    Attributes:
        name: Dimension name (X, Intensity, ReturnNumber, ...).
        dtype: NumPy dtype used to hold the values in memory.
        num_bits: Width inside the point record. Flags are bit-packed,
            so this is not always a multiple of 8.
    """

    name: str
    dtype: np.dtype
    num_bits: int

    @property
    def num_bytes(self) -> float:
        return self.num_bits / 8

    @classmethod
    def from_laspy(cls, dim: laspy.DimensionInfo) -> PointField:
        if dim.kind == laspy.DimensionKind.BitField:
            # single-bit flags are held as bool, wider bit fields as uint8
            dtype = np.dtype(np.bool_) if dim.num_bits == 1 else np.dtype(np.uint8)
        else:
            dtype = dim.dtype
        return cls(_LASPY_DIM_MAP[dim.name], dtype, dim.num_bits)


@dataclass(frozen=True)
class PointFormat:
    """A LAS point data record format."""

    id: int
    fields: tuple[PointField, ...]
    min_version: tuple[int, int]
    record_length: int

    @classmethod
    def from_laspy(cls, point_format_id: int) -> PointFormat:
        fmt = laspy.PointFormat(point_format_id)
        return cls(
            point_format_id,
            tuple(PointField.from_laspy(dim) for dim in fmt.standard_dimensions),
            _parse_version(preferred_file_version_for_point_format(point_format_id)),
            fmt.num_standard_bytes,
        )

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(f.name for f in self.fields)

    def __contains__(self, name: str) -> bool:
        return any(f.name == name for f in self.fields)

    def __repr__(self) -> str:
        return f"PointFormat({self.id}, {self.record_length} bytes)"


POINT_FORMATS: dict[int, PointFormat] = {
    fmt_id: PointFormat.from_laspy(fmt_id) for fmt_id in sorted(laspy.supported_point_formats())
}


# Every column name that belongs in the standard point table
RECOGNISED_COLUMNS: frozenset[str] = frozenset(
    name for fmt in POINT_FORMATS.values() for name in fmt.field_names
) | {ID_COLUMN}


def get_point_format(point_format_id: int) -> PointFormat:
    """Look up a point format by id."""
    if point_format_id not in POINT_FORMATS:
        raise SchemaMismatchError(
            f"Unknown point format {point_format_id}. "
            f"Supported: {sorted(POINT_FORMATS)}"
        )
    return POINT_FORMATS[point_format_id]


def fields_for(point_format_id: int) -> tuple[PointField, ...]:
    """Ordered standard fields of a point format."""
    return get_point_format(point_format_id).fields


def is_standard_column(name: str) -> bool:
    return name in RECOGNISED_COLUMNS


def format_id_for(columns: Iterable[str]) -> int | None:
    """Lowest point format id holding every standard column in ``columns``.

    ``id`` and non-standard names are ignored. Returns None when no single
    format carries all of the standard columns.
    """
    wanted = {c for c in columns if c in RECOGNISED_COLUMNS and c != ID_COLUMN}
    for fmt_id, fmt in POINT_FORMATS.items():
        if wanted <= fmt.field_names:
            return fmt_id
    return None


def version_for_format(point_format_id: int) -> tuple[int, int]:
    """Minimum LAS version able to hold a point format."""
    return get_point_format(point_format_id).min_version


def header_size_for(version: tuple[int, int]) -> int:
    if version not in HEADER_SIZES:
        raise SchemaMismatchError(
            f"Unsupported LAS version {version[0]}.{version[1]}"
        )
    return HEADER_SIZES[version]
