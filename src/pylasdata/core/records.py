"""Variable-length records and their payloads.

A record payload is one of a closed set of variants:

* ``OpaquePayload`` — raw bytes this package doesn't interpret,
* ``ExtraFieldsRegistry`` — the Extra Bytes description of user fields,
* ``WktPayload`` — an OGC WKT coordinate system.

Each variant knows its serialized ``size`` and can produce its bytes, so
the size of a record is a pure function of its content.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

import numpy as np
from laspy.vlrs.known import ExtraBytesStruct

from pylasdata.core.fieldtypes import ColumnType, FieldType
from pylasdata.core.formats import (
    EVLR_HEADER_SIZE,
    EXTRA_BYTES_ENTRY_SIZE,
    EXTRA_BYTES_NAME_SIZE,
    EXTRA_BYTES_RECORD_ID,
    LAS_PROJECTION_USER_ID,
    LAS_SPEC_USER_ID,
    RECORD_DESCRIPTION_SIZE,
    RECORD_USER_ID_SIZE,
    VLR_HEADER_SIZE,
    WKT_RECORD_ID,
)
from pylasdata.errors import InvariantViolationError

def _slot_dtype(field_type: FieldType) -> type:
    # no_data/min/max slots hold 8-byte values widened from the element type
    if field_type.is_float:
        return np.float64
    return np.int64 if field_type.is_signed else np.uint64


@dataclass(frozen=True)
class OpaquePayload:
    """Payload bytes passed through untouched."""

    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)

    def to_bytes(self) -> bytes:
        return bytes(self.data)


@dataclass(frozen=True)
class WktPayload:
    """OGC WKT coordinate reference system text."""

    wkt: str

    @property
    def size(self) -> int:
        # NUL terminated
        return len(self.wkt.encode("utf-8")) + 1

    def to_bytes(self) -> bytes:
        return self.wkt.encode("utf-8") + b"\x00"

    @classmethod
    def from_bytes(cls, data: bytes) -> WktPayload:
        return cls(data.decode("utf-8").rstrip("\x00"))


@dataclass
class ExtraField:
    """One Extra Bytes entry: a single scalar user field.

    Attributes:
        name: Field name (at most 32 bytes).
        field_type: Element type of the field.
        description: Free text (at most 32 bytes).
        no_data, min, max, scale, offset: Optional values, written only
            when set (their option bit is derived from presence).
    """

    name: str
    field_type: FieldType
    description: str = ""
    no_data: float | None = None
    min: float | None = None
    max: float | None = None
    scale: float | None = None
    offset: float | None = None

    def __post_init__(self) -> None:
        if len(self.name.encode("ascii")) > EXTRA_BYTES_NAME_SIZE:
            raise InvariantViolationError(
                f"Extra field name '{self.name}' is longer than {EXTRA_BYTES_NAME_SIZE} bytes"
            )
        if len(self.description.encode("ascii")) > RECORD_DESCRIPTION_SIZE:
            raise InvariantViolationError(
                f"Extra field description is longer than {RECORD_DESCRIPTION_SIZE} bytes"
            )

    @property
    def size(self) -> int:
        """Bytes this field occupies in each point record."""
        return self.field_type.size

    def to_bytes(self) -> bytes:
        """Serialize to the fixed 192-byte LAS Extra Bytes layout."""
        # from_buffer_copy skips ExtraBytesStruct.__init__, which presets min/max
        entry = ExtraBytesStruct.from_buffer_copy(bytes(EXTRA_BYTES_ENTRY_SIZE))
        entry.data_type = self.field_type.code
        entry.name = self.name.encode("ascii")
        entry.description = self.description.encode("ascii")

        slot_dtype = _slot_dtype(self.field_type)
        for raw, bit, value in (
            (entry._no_data, ExtraBytesStruct.NO_DATA_BIT_MASK, self.no_data),
            (entry._min, ExtraBytesStruct.MIN_BIT_MASK, self.min),
            (entry._max, ExtraBytesStruct.MAX_BIT_MASK, self.max),
        ):
            if value is not None:
                if not self.field_type.is_float:
                    value = int(value)
                np.frombuffer(raw, dtype=slot_dtype)[0] = value
                entry.options |= bit
        if self.scale is not None:
            entry.scale = [self.scale]
        if self.offset is not None:
            entry.offset = [self.offset]
        return bytes(entry)

    @classmethod
    def from_bytes(cls, data: bytes) -> ExtraField:
        """Parse one 192-byte Extra Bytes entry."""
        if len(data) != EXTRA_BYTES_ENTRY_SIZE:
            raise ValueError(
                f"Extra bytes entry must be {EXTRA_BYTES_ENTRY_SIZE} bytes, got {len(data)}"
            )
        entry = ExtraBytesStruct.from_buffer_copy(data)
        field_type = FieldType.from_code(entry.data_type)
        slot_dtype = _slot_dtype(field_type)

        def value(raw, bit: int) -> float | None:
            if not entry.options & bit:
                return None
            return np.frombuffer(raw, dtype=slot_dtype)[0].item()

        scale = entry.scale
        offset = entry.offset
        return cls(
            name=entry.format_name(),
            field_type=field_type,
            description=entry.description.rstrip(b"\x00").decode("ascii"),
            no_data=value(entry._no_data, ExtraBytesStruct.NO_DATA_BIT_MASK),
            min=value(entry._min, ExtraBytesStruct.MIN_BIT_MASK),
            max=value(entry._max, ExtraBytesStruct.MAX_BIT_MASK),
            scale=None if scale is None else float(scale[0]),
            offset=None if offset is None else float(offset[0]),
        )


class ExtraFieldsRegistry:
    """Ordered Extra Bytes entries describing every user-defined point field.

    A vector-valued field of dimension d is stored as d entries named
    ``"<field> [0]" ... "<field> [d-1]"`` sharing one element type. Names
    are unique: adding a name that already exists with a different type
    replaces the old entry.
    """

    def __init__(self, fields: list[ExtraField] | None = None) -> None:
        self._fields: list[ExtraField] = []
        for f in fields or []:
            self._append(f)

    def _append(self, new: ExtraField) -> None:
        if self.find(new.name) is not None:
            raise InvariantViolationError(f"Duplicate extra field '{new.name}'")
        self._fields.append(new)

    @property
    def fields(self) -> list[ExtraField]:
        return list(self._fields)

    @property
    def names(self) -> list[str]:
        return [f.name for f in self._fields]

    @property
    def size(self) -> int:
        """Serialized payload size in bytes."""
        return len(self._fields) * EXTRA_BYTES_ENTRY_SIZE

    @property
    def point_bytes(self) -> int:
        """Bytes all documented fields add to each point record."""
        return sum(f.size for f in self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[ExtraField]:
        return iter(self._fields)

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtraFieldsRegistry):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        entries = ", ".join(f"{f.name}: {f.field_type}" for f in self._fields)
        return f"ExtraFieldsRegistry([{entries}])"

    def find(self, name: str, field_type: FieldType | None = None) -> ExtraField | None:
        """The entry called ``name`` (optionally also of ``field_type``)."""
        for f in self._fields:
            if f.name == name and (field_type is None or f.field_type == field_type):
                return f
        return None

    def add_field(
        self,
        name: str,
        field_type: FieldType | ColumnType,
        description: str = "",
    ) -> list[ExtraField]:
        """Document a user field, splitting vector types into one entry per dimension.

        Returns:
            The entries that were created.
        """
        if isinstance(field_type, FieldType):
            field_type = ColumnType(field_type)
        added = []
        for sub_name in field_type.field_names(name):
            new = ExtraField(sub_name, field_type.element, description)
            existing = self.find(sub_name)
            if existing is not None:
                self._fields[self._fields.index(existing)] = new
            else:
                self._fields.append(new)
            added.append(new)
        return added

    def remove_field(self, name: str, field_type: FieldType | None = None) -> int:
        """Remove the entry called ``name``.

        Returns:
            Bytes per point released by the removal (0 if nothing matched).
        """
        match = self.find(name, field_type)
        if match is None:
            return 0
        self._fields.remove(match)
        return match.size

    def to_bytes(self) -> bytes:
        return b"".join(f.to_bytes() for f in self._fields)

    @classmethod
    def from_bytes(cls, data: bytes) -> ExtraFieldsRegistry:
        if len(data) % EXTRA_BYTES_ENTRY_SIZE:
            raise ValueError(
                f"Extra bytes payload of {len(data)} bytes isn't a multiple "
                f"of {EXTRA_BYTES_ENTRY_SIZE}"
            )
        return cls([
            ExtraField.from_bytes(data[i:i + EXTRA_BYTES_ENTRY_SIZE])
            for i in range(0, len(data), EXTRA_BYTES_ENTRY_SIZE)
        ])


Payload = Union[OpaquePayload, ExtraFieldsRegistry, WktPayload]


@dataclass
class MetadataRecord:
    """A variable-length record (VLR) or extended variable-length record (EVLR).

    Attributes:
        user_id: Namespace of the record, e.g. "LASF_Spec".
        record_id: Numeric id within the namespace.
        description: Free text, at most 32 bytes.
        payload: Record body; raw ``bytes`` are wrapped as OpaquePayload.
        extended: True for an EVLR stored after the point records.
        superseded: Marks the record as replaced by a newer one.
    """

    user_id: str
    record_id: int
    description: str = ""
    payload: Payload = field(default_factory=OpaquePayload)
    extended: bool = False
    superseded: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.payload, (bytes, bytearray, memoryview)):
            self.payload = OpaquePayload(bytes(self.payload))
        if not isinstance(self.payload, (OpaquePayload, ExtraFieldsRegistry, WktPayload)):
            raise TypeError(f"Unsupported record payload {type(self.payload).__name__}")
        if len(self.user_id.encode("ascii")) > RECORD_USER_ID_SIZE:
            raise ValueError(
                f"Record user id '{self.user_id}' is longer than {RECORD_USER_ID_SIZE} bytes"
            )
        if len(self.description.encode("ascii")) > RECORD_DESCRIPTION_SIZE:
            raise ValueError(
                f"Record description '{self.description}' is longer than "
                f"{RECORD_DESCRIPTION_SIZE} bytes"
            )
        if not 0 <= self.record_id <= 0xFFFF:
            raise ValueError(f"Record id must fit in 16 bits, got {self.record_id}")

    @classmethod
    def extra_bytes(cls, registry: ExtraFieldsRegistry | None = None) -> MetadataRecord:
        """An Extra Bytes record holding ``registry`` (empty by default)."""
        return cls(
            LAS_SPEC_USER_ID,
            EXTRA_BYTES_RECORD_ID,
            "Extra Bytes Records",
            ExtraFieldsRegistry() if registry is None else registry,
        )

    @classmethod
    def wkt(cls, wkt: str, extended: bool = False) -> MetadataRecord:
        """An OGC WKT coordinate system record."""
        return cls(
            LAS_PROJECTION_USER_ID,
            WKT_RECORD_ID,
            "OGC WKT Coordinate System",
            WktPayload(wkt),
            extended=extended,
        )

    @property
    def header_size(self) -> int:
        return EVLR_HEADER_SIZE if self.extended else VLR_HEADER_SIZE

    @property
    def size(self) -> int:
        """Serialized size: fixed record header plus payload."""
        return self.header_size + self.payload.size

    @property
    def is_extra_fields(self) -> bool:
        return self.user_id == LAS_SPEC_USER_ID and self.record_id == EXTRA_BYTES_RECORD_ID

    def mark_superseded(self) -> None:
        self.superseded = True

    def __repr__(self) -> str:
        kind = "EVLR" if self.extended else "VLR"
        flag = ", superseded" if self.superseded else ""
        return (
            f"{kind}({self.user_id!r}, {self.record_id}, {self.description!r}, "
            f"{self.payload.size} bytes{flag})"
        )
