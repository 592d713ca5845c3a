"""Dataset — LAS points, header, records and extra fields kept in lockstep."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Mapping, Union

import numpy as np
from pyproj import CRS

from pylasdata.core.bounds import Bounds
from pylasdata.core.fieldtypes import ColumnType
from pylasdata.core.formats import (
    DEFAULT_COORDINATE_SCALE,
    EXTENDED_RECORDS_MIN_VERSION,
    EXTRA_BYTES_ENTRY_SIZE,
    EXTRA_BYTES_NAME_SIZE,
    ID_COLUMN,
    LAS_PROJECTION_USER_ID,
    MAX_RECORD_LENGTH,
    NO_UNIT_CONVERSION,
    UNDOCUMENTED_BYTES_COLUMN,
    WKT_RECORD_ID,
    format_id_for,
    get_point_format,
    is_standard_column,
    version_for_format,
)
from pylasdata.core.header import HeaderModel, check_unit_scale
from pylasdata.core.records import (
    ExtraFieldsRegistry,
    MetadataRecord,
    OpaquePayload,
    WktPayload,
)
from pylasdata.core.table import PointTable
from pylasdata.errors import (
    CountMismatchError,
    DuplicateRegistrySingletonError,
    InvariantViolationError,
    NotFoundError,
    SchemaMismatchError,
    SizeMismatchError,
    UnsupportedFieldTypeError,
)
from pylasdata.utils.crs import to_wkt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordHandle:
    """Stable reference to a record owned by a :class:`Dataset`."""

    index: int


RecordRef = Union[MetadataRecord, RecordHandle]


def _column_type(name: str, values: np.ndarray) -> ColumnType | None:
    """Validate a user column; None means the reserved undocumented-bytes column."""
    if name == UNDOCUMENTED_BYTES_COLUMN:
        if values.dtype != np.uint8 or values.ndim not in (1, 2):
            raise UnsupportedFieldTypeError(
                f"'{UNDOCUMENTED_BYTES_COLUMN}' must be a uint8 array of shape (N,) "
                f"or (N, k), got {values.dtype} {values.shape}"
            )
        return None
    ctype = ColumnType.of(values)
    for sub_name in ctype.field_names(name):
        if not sub_name.isascii() or len(sub_name) > EXTRA_BYTES_NAME_SIZE:
            raise InvariantViolationError(
                f"User field name '{sub_name}' must be ASCII and at most "
                f"{EXTRA_BYTES_NAME_SIZE} bytes"
            )
    return ctype


def _column_size(name: str, values: np.ndarray) -> int:
    """Bytes a user column occupies in each point record."""
    ctype = _column_type(name, values)
    if ctype is not None:
        return ctype.size
    return 1 if values.ndim == 1 else values.shape[1]


def _check_entry_names(name: str, ctype: ColumnType, owners: Mapping[str, str]) -> None:
    """Refuse a column whose Extra Bytes entries another user column already owns.

    Args:
        name: Column being added.
        ctype: Its type; vector columns own ``"name [i]"`` entries.
        owners: Entry name → user column that owns it.
    """
    for sub_name in ctype.field_names(name):
        owner = owners.get(sub_name, name)
        if owner != name:
            raise SchemaMismatchError(
                f"User column '{name}' needs Extra Bytes entry '{sub_name}', "
                f"which belongs to column '{owner}'"
            )


def _registry_payload(record: MetadataRecord) -> ExtraFieldsRegistry:
    """The Extra Bytes entries of a record, parsing raw payload bytes if needed."""
    payload = record.payload
    if isinstance(payload, ExtraFieldsRegistry):
        return payload
    if isinstance(payload, OpaquePayload):
        try:
            return ExtraFieldsRegistry.from_bytes(payload.data)
        except ValueError as exc:
            raise SchemaMismatchError(f"Malformed Extra Bytes record: {exc}") from exc
    raise SchemaMismatchError(
        f"Extra Bytes record carries a {type(payload).__name__} payload"
    )


class Dataset:
    """A LAS dataset held in memory.

    Holds the header, the standard point columns (always including ``id``),
    any user-defined columns, the VLRs and EVLRs, and the raw bytes between
    the header and the first VLR. Every public operation keeps the
    following in sync:

    * point and record counts in the header,
    * ``record_length`` (standard fields + extra fields + undocumented bytes),
    * ``payload_offset`` and ``extended_section_offset``,
    * the Extra Bytes record, which documents each user column exactly once.

    Operations validate first and commit afterwards, so a raised error
    leaves the dataset untouched. There is no internal locking.

    Examples:
        >>> header = HeaderModel(point_format_id=0, point_count=2)
        >>> ds = Dataset(header, {"X": [0.0, 1.0], "Y": [0.0, 1.0], "Z": [0.0, 1.0]})
        >>> ds.add_column("reflectance", np.array([0.5, 0.9]))
        >>> ds.header.record_length
        28
    """

    def __init__(
        self,
        header: HeaderModel,
        points: PointTable | Mapping[str, np.ndarray],
        ordinary_records: Iterable[MetadataRecord] = (),
        extended_records: Iterable[MetadataRecord] = (),
        leading_bytes: bytes = b"",
        unit_scale: tuple[float, float, float] | None = None,
    ) -> None:
        table = points if isinstance(points, PointTable) else PointTable.from_dict(points)
        ordinary = list(ordinary_records)
        extended = list(extended_records)

        # ── Validation (nothing is mutated until it all passes) ────────
        self._check_schema(header, table)

        if len(table) != header.point_count:
            raise CountMismatchError(
                f"Number of points in header {header.point_count} doesn't match "
                f"number of points in table {len(table)}"
            )
        if len(ordinary) != header.ordinary_record_count:
            raise CountMismatchError(
                f"Number of VLRs in header {header.ordinary_record_count} doesn't match "
                f"number of VLRs supplied {len(ordinary)}"
            )
        if len(extended) != header.extended_record_count:
            raise CountMismatchError(
                f"Number of EVLRs in header {header.extended_record_count} doesn't match "
                f"number of EVLRs supplied {len(extended)}"
            )
        self._check_record_lists(header, ordinary, extended)

        unit_scale = header.unit_scale if unit_scale is None else check_unit_scale(unit_scale)

        user_columns = [c for c in table if not is_standard_column(c)]
        column_types: dict[str, ColumnType] = {}
        owners: dict[str, str] = {}
        user_bytes = 0
        for col in user_columns:
            values = table[col]
            ctype = _column_type(col, values)
            if ctype is not None:
                _check_entry_names(col, ctype, owners)
                column_types[col] = ctype
                owners.update((sub_name, col) for sub_name in ctype.field_names(col))
            user_bytes += _column_size(col, values)
        if header.point_format.record_length + user_bytes > MAX_RECORD_LENGTH:
            raise InvariantViolationError(
                f"Point record length {header.point_format.record_length + user_bytes} "
                f"exceeds {MAX_RECORD_LENGTH} bytes"
            )

        registry_records = [r for r in ordinary + extended if r.is_extra_fields]
        if len(registry_records) > 1:
            raise DuplicateRegistrySingletonError(
                f"Found {len(registry_records)} Extra Bytes records when we can only have a max of 1"
            )
        registry = None
        if registry_records:
            if registry_records[0].extended:
                raise InvariantViolationError("The Extra Bytes record must be a VLR, not an EVLR")
            registry = _registry_payload(registry_records[0])
            documented = {
                sub_name
                for col, ctype in column_types.items()
                for sub_name in ctype.field_names(col)
            }
            stale = [name for name in registry.names if name not in documented]
            if stale:
                raise SchemaMismatchError(
                    f"Extra Bytes record documents fields {stale} with no matching column"
                )

        # ── Commit ─────────────────────────────────────────────────────
        if registry is not None:
            registry_records[0].payload = registry

        self._header = header.copy()
        self._header.unit_scale = unit_scale
        self._unit_scale = unit_scale
        self._leading_bytes = bytes(leading_bytes)

        self._arena: dict[RecordHandle, MetadataRecord] = {}
        self._next_handle = 0
        self._ordinary = [self._store(r) for r in ordinary]
        self._extended = [self._store(r) for r in extended]

        table = table.copy()
        if ID_COLUMN not in table:
            table[ID_COLUMN] = np.arange(1, len(table) + 1, dtype=np.int64)
        self._points = table.select([c for c in table if is_standard_column(c)])
        self._user_fields = table.select(user_columns) if user_columns else None

        self.reconcile_header()
        for col, ctype in column_types.items():
            self._document_column(col, ctype)
        self.update_extended_offset()

        logger.debug(
            "Dataset with %d points, format %d, record length %d, point offset %d",
            self.num_points,
            self._header.point_format_id,
            self._header.record_length,
            self._header.payload_offset,
        )

    @classmethod
    def from_points(
        cls,
        points: PointTable | Mapping[str, np.ndarray],
        *,
        ordinary_records: Iterable[MetadataRecord] = (),
        extended_records: Iterable[MetadataRecord] = (),
        leading_bytes: bytes = b"",
        scale: float = DEFAULT_COORDINATE_SCALE,
        point_format_id: int | None = None,
        crs: str | CRS | None = None,
        unit_scale: tuple[float, float, float] | None = None,
    ) -> Dataset:
        """Build a dataset from points alone, deriving the header.

        Args:
            points: Point columns; standard names decide the point format.
            ordinary_records: VLRs to include.
            extended_records: EVLRs to include (forces LAS 1.4).
            leading_bytes: Raw bytes between header and first VLR.
            scale: Coordinate scale for all three axes.
            point_format_id: Explicit point format (default: smallest format
                holding every standard column).
            crs: Coordinate system (EPSG code, WKT, PROJ string or
                pyproj.CRS), stored as a WKT VLR.
            unit_scale: Unit conversion applied when the points were ingested.

        Returns:
            A consistent Dataset.
        """
        table = points if isinstance(points, PointTable) else PointTable.from_dict(points)
        if point_format_id is None:
            point_format_id = format_id_for(table)
            if point_format_id is None:
                raise SchemaMismatchError(
                    f"No point format holds all of the columns {table.column_names}"
                )
        ordinary = list(ordinary_records)
        extended = list(extended_records)
        if crs is not None:
            ordinary.append(MetadataRecord.wkt(to_wkt(crs)))

        version = version_for_format(point_format_id)
        if extended and version < EXTENDED_RECORDS_MIN_VERSION:
            version = EXTENDED_RECORDS_MIN_VERSION

        bounds = Bounds.from_table(table)
        offset = (0.0, 0.0, 0.0) if bounds is None else tuple(float(np.floor(m)) for m in bounds.mins)

        header = HeaderModel(
            format_version=version,
            point_format_id=point_format_id,
            point_count=len(table),
            record_length=get_point_format(point_format_id).record_length,
            ordinary_record_count=len(ordinary),
            extended_record_count=len(extended),
            unit_scale=NO_UNIT_CONVERSION if unit_scale is None else unit_scale,
            coordinate_scale=(scale, scale, scale),
            coordinate_offset=offset,
            bounds=bounds,
        )
        return cls(header, table, ordinary, extended, leading_bytes)

    # ── Validation helpers ──────────────────────────────────────────

    @staticmethod
    def _check_schema(header: HeaderModel, table: PointTable) -> None:
        fmt = header.point_format
        standard = {c for c in table if is_standard_column(c) and c != ID_COLUMN}
        table_format = format_id_for(standard)
        if table_format != fmt.id and not standard <= fmt.field_names:
            raise SchemaMismatchError(
                f"Point format in header {fmt.id} doesn't match point format in table "
                f"{table_format}: columns {sorted(standard - fmt.field_names)} "
                f"aren't part of format {fmt.id}"
            )
        for col in standard | ({ID_COLUMN} & set(table)):
            if table[col].ndim != 1:
                raise SchemaMismatchError(
                    f"Standard column '{col}' must be 1-D, got shape {table[col].shape}"
                )

    @staticmethod
    def _check_record_lists(
        header: HeaderModel,
        ordinary: list[MetadataRecord],
        extended: list[MetadataRecord],
    ) -> None:
        for record in ordinary:
            if record.extended:
                raise InvariantViolationError(f"{record!r} is extended but was supplied as a VLR")
        for record in extended:
            if not record.extended:
                raise InvariantViolationError(f"{record!r} is not extended but was supplied as an EVLR")
        if extended and not header.supports_extended_records:
            raise InvariantViolationError(
                f"LAS {header.version_string} doesn't support EVLRs"
            )
        ids = [id(r) for r in ordinary + extended]
        if len(set(ids)) != len(ids):
            raise InvariantViolationError("The same record object was supplied more than once")

    # ── Properties ──────────────────────────────────────────────────

    @property
    def header(self) -> HeaderModel:
        return self._header

    @property
    def points(self) -> PointTable:
        """Standard point columns (always includes ``id``)."""
        return self._points

    @property
    def user_fields(self) -> PointTable | None:
        """User-defined columns, or None if there are none."""
        return self._user_fields

    @property
    def ordinary_records(self) -> list[MetadataRecord]:
        return [self._arena[h] for h in self._ordinary]

    @property
    def extended_records(self) -> list[MetadataRecord]:
        return [self._arena[h] for h in self._extended]

    @property
    def leading_bytes(self) -> bytes:
        return self._leading_bytes

    @property
    def unit_scale(self) -> tuple[float, float, float]:
        """Unit conversion applied when the points were ingested."""
        return self._unit_scale

    @property
    def num_points(self) -> int:
        return len(self._points)

    @property
    def extra_fields(self) -> ExtraFieldsRegistry | None:
        """The Extra Bytes entries, or None if there is no Extra Bytes record."""
        record = self._registry_record()
        return None if record is None else record.payload

    @property
    def crs(self) -> str | None:
        """WKT text of the first coordinate system record, if any."""
        for record in self.ordinary_records + self.extended_records:
            if isinstance(record.payload, WktPayload):
                return record.payload.wkt
            if record.user_id == LAS_PROJECTION_USER_ID and record.record_id == WKT_RECORD_ID:
                try:
                    return WktPayload.from_bytes(record.payload.to_bytes()).wkt
                except UnicodeDecodeError:
                    logger.warning("WKT record %r isn't valid UTF-8, ignoring it", record)
        return None

    def __len__(self) -> int:
        return self.num_points

    def get_pointcloud(self) -> PointTable:
        """All point columns, standard and user-defined, in one table."""
        if self._user_fields is None:
            return self._points
        return self._points.join(self._user_fields)

    def positions(self, file_units: bool = False) -> np.ndarray:
        """X/Y/Z as an (N, 3) array.

        Args:
            file_units: Undo the unit conversion applied on ingest.
        """
        xyz = np.column_stack([
            np.asarray(self._points[axis], dtype=np.float64) for axis in ("X", "Y", "Z")
        ])
        if file_units:
            xyz = xyz / np.asarray(self._unit_scale)
        return xyz

    # ── Record access ───────────────────────────────────────────────

    def _store(self, record: MetadataRecord) -> RecordHandle:
        handle = RecordHandle(self._next_handle)
        self._next_handle += 1
        self._arena[handle] = record
        return handle

    def _resolve(self, ref: RecordRef) -> RecordHandle:
        if isinstance(ref, RecordHandle):
            if ref not in self._arena:
                raise NotFoundError(f"No record with handle {ref.index} in dataset")
            return ref
        order = self._extended if ref.extended else self._ordinary
        for handle in order:
            if self._arena[handle] is ref:
                return handle
        for handle in order:
            if self._arena[handle] == ref:
                return handle
        kind = "EVLR" if ref.extended else "VLR"
        raise NotFoundError(f"Couldn't find {kind} {ref!r} in dataset")

    def record(self, handle: RecordHandle) -> MetadataRecord:
        """The record a handle refers to."""
        return self._arena[self._resolve(handle)]

    def handle_of(self, record: MetadataRecord) -> RecordHandle:
        """Handle of a record owned by this dataset."""
        return self._resolve(record)

    def _registry_record(self) -> MetadataRecord | None:
        for handle in self._ordinary:
            record = self._arena[handle]
            if record.is_extra_fields:
                return record
        return None

    # ── Layout bookkeeping ──────────────────────────────────────────

    def _undocumented_width(self) -> int:
        if self._user_fields is None or UNDOCUMENTED_BYTES_COLUMN not in self._user_fields:
            return 0
        return _column_size(UNDOCUMENTED_BYTES_COLUMN, self._user_fields[UNDOCUMENTED_BYTES_COLUMN])

    def _expected_record_length(self) -> int:
        registry = self.extra_fields
        return (
            self._header.point_format.record_length
            + (0 if registry is None else registry.point_bytes)
            + self._undocumented_width()
        )

    def _expected_payload_offset(self) -> int:
        return (
            self._header.header_size
            + len(self._leading_bytes)
            + sum(r.size for r in self.ordinary_records)
        )

    def reconcile_header(self) -> None:
        """Recompute every derived header field from the dataset's contents.

        Running it on an already consistent dataset changes nothing.
        """
        h = self._header
        h.point_count = self.num_points
        h.ordinary_record_count = len(self._ordinary)
        h.extended_record_count = len(self._extended)
        h.record_length = self._expected_record_length()
        h.payload_offset = self._expected_payload_offset()
        self.update_extended_offset()

    def update_extended_offset(self) -> None:
        """Point the EVLR offset just past the point records."""
        self._header.recompute_extended_offset()

    def _set_format_version(self, version: tuple[int, int]) -> None:
        old_size = self._header.header_size
        old_version = self._header.version_string
        self._header.format_version = version
        self._header.payload_offset += self._header.header_size - old_size
        logger.info("Upgraded LAS version %s -> %s", old_version, self._header.version_string)

    def _ensure_registry(self) -> ExtraFieldsRegistry:
        record = self._registry_record()
        if record is None:
            record = MetadataRecord.extra_bytes()
            self._attach(record)
            logger.info("Added Extra Bytes record to document user fields")
        return record.payload

    def _document_column(self, name: str, ctype: ColumnType) -> None:
        """Make the Extra Bytes record describe column ``name`` of type ``ctype``.

        Shared by construction and :meth:`add_column`. Each sub-field is
        skipped when already documented with the same type, replaced when
        documented with another type, or appended otherwise; record length
        and point offset follow every entry change.
        """
        registry = self._ensure_registry()
        h = self._header
        for sub_name in ctype.field_names(name):
            existing = registry.find(sub_name)
            if existing is not None and existing.field_type == ctype.element:
                continue
            if existing is not None:
                logger.info(
                    "Extra field '%s' changes type from %s to %s",
                    sub_name, existing.field_type, ctype.element,
                )
                h.record_length -= registry.remove_field(sub_name)
                h.payload_offset -= EXTRA_BYTES_ENTRY_SIZE
            registry.add_field(sub_name, ctype.element)
            h.payload_offset += EXTRA_BYTES_ENTRY_SIZE
            h.record_length += ctype.element.size

    def _forget_column(self, name: str) -> None:
        """Release the record bytes and Extra Bytes entries of user column ``name``."""
        h = self._header
        values = self._user_fields[name]
        ctype = _column_type(name, values)
        if ctype is None:
            h.record_length -= _column_size(name, values)
            return
        registry = self.extra_fields
        for sub_name in ctype.field_names(name):
            freed = registry.remove_field(sub_name)
            if freed:
                h.record_length -= freed
                h.payload_offset -= EXTRA_BYTES_ENTRY_SIZE

    # ── Record mutation ─────────────────────────────────────────────

    def _attach(self, record: MetadataRecord) -> RecordHandle:
        h = self._header
        handle = self._store(record)
        if record.extended:
            self._extended.append(handle)
            h.extended_record_count += 1
            if h.extended_record_count == 1:
                self.update_extended_offset()
        else:
            self._ordinary.append(handle)
            h.ordinary_record_count += 1
            h.payload_offset += record.size
            self.update_extended_offset()
        return handle

    def add_record(self, record: MetadataRecord) -> RecordHandle:
        """Add a VLR or EVLR, updating counts and offsets.

        The first EVLR upgrades the dataset to LAS 1.4 if needed.

        Returns:
            Handle addressing the record inside this dataset.
        """
        if any(record is owned for owned in self._arena.values()):
            raise InvariantViolationError(f"{record!r} already belongs to this dataset")
        registry = None
        if record.is_extra_fields:
            if record.extended:
                raise InvariantViolationError("The Extra Bytes record must be a VLR, not an EVLR")
            if self._registry_record() is not None:
                raise DuplicateRegistrySingletonError(
                    "Dataset already has an Extra Bytes record; only one is allowed"
                )
            registry = _registry_payload(record)
            if len(registry) > 0:
                raise SchemaMismatchError(
                    f"Extra Bytes record documents fields {registry.names} with no matching column"
                )
        upgrade = (
            record.extended
            and not self._extended
            and not self._header.supports_extended_records
        )

        if registry is not None:
            record.payload = registry
        if upgrade:
            self._set_format_version(EXTENDED_RECORDS_MIN_VERSION)
        handle = self._attach(record)
        logger.debug(
            "Added %r; point offset %d, EVLR offset %d",
            record, self._header.payload_offset, self._header.extended_section_offset,
        )
        return handle

    def remove_record(self, ref: RecordRef) -> None:
        """Remove a VLR or EVLR (by record or handle), updating counts and offsets."""
        handle = self._resolve(ref)
        record = self._arena[handle]
        h = self._header
        if record.extended:
            self._extended.remove(handle)
            del self._arena[handle]
            h.extended_record_count -= 1
            if not self._extended:
                h.extended_section_offset = 0
        else:
            new_offset = h.payload_offset - record.size
            if new_offset <= 0:
                raise InvariantViolationError(
                    f"Inconsistent data configuration! Got point offset of {new_offset} "
                    f"after removing VLR"
                )
            if record.is_extra_fields and self._has_documented_columns():
                raise InvariantViolationError(
                    "Can't remove the Extra Bytes record while user columns depend on it"
                )
            self._ordinary.remove(handle)
            del self._arena[handle]
            h.ordinary_record_count -= 1
            h.payload_offset = new_offset
            self.update_extended_offset()
        logger.debug("Removed %r", record)

    def mark_superseded(self, ref: RecordRef) -> None:
        """Flag a record owned by this dataset as superseded."""
        self._arena[self._resolve(ref)].mark_superseded()

    def _has_documented_columns(self) -> bool:
        if self._user_fields is None:
            return False
        return any(c != UNDOCUMENTED_BYTES_COLUMN for c in self._user_fields)

    # ── Column mutation ─────────────────────────────────────────────

    def _entry_owners(self) -> dict[str, str]:
        """Extra Bytes entry name → user column that owns it."""
        owners: dict[str, str] = {}
        if self._user_fields is None:
            return owners
        for col in self._user_fields:
            ctype = _column_type(col, self._user_fields[col])
            if ctype is not None:
                owners.update((sub_name, col) for sub_name in ctype.field_names(col))
        return owners

    def _check_length(self, name: str, values: np.ndarray) -> None:
        if values.ndim == 0 or len(values) != self.num_points:
            size = 1 if values.ndim == 0 else len(values)
            raise SizeMismatchError(
                f"Column '{name}' size {size} inconsistent with number of points {self.num_points}"
            )

    def add_column(self, name: str, values: np.ndarray) -> None:
        """Add or replace a user-defined column.

        Scalar columns get one Extra Bytes entry, (N, d) vector columns get
        d entries named ``"name [i]"``. Replacing a column first releases
        everything the old one occupied.

        Args:
            name: Column name; must not be a standard LAS dimension.
            values: One value (or one vector) per point.
        """
        values = np.array(values)
        self._check_length(name, values)
        if is_standard_column(name):
            raise SchemaMismatchError(
                f"'{name}' is a standard LAS dimension; use merge_column to set it"
            )
        ctype = _column_type(name, values)
        if ctype is not None:
            _check_entry_names(name, ctype, self._entry_owners())
        new_size = _column_size(name, values)
        replacing = self._user_fields is not None and name in self._user_fields
        old_size = _column_size(name, self._user_fields[name]) if replacing else 0
        projected = self._header.record_length - old_size + new_size
        if projected > MAX_RECORD_LENGTH:
            raise InvariantViolationError(
                f"Point record length {projected} exceeds {MAX_RECORD_LENGTH} bytes"
            )

        if replacing:
            self._forget_column(name)
        if self._user_fields is None:
            self._user_fields = PointTable()
        self._user_fields[name] = values
        if ctype is None:
            self._header.record_length += new_size
        else:
            self._document_column(name, ctype)
        # every record length change moves the end of the point records
        self.update_extended_offset()
        logger.debug(
            "%s column '%s' (%s); record length %d, point offset %d",
            "Replaced" if replacing else "Added",
            name,
            "undocumented" if ctype is None else ctype,
            self._header.record_length,
            self._header.payload_offset,
        )

    def merge_column(self, name: str, values: np.ndarray) -> None:
        """Set a column's values, whether it's standard or user-defined.

        Standard columns are overwritten in place (or added, if the point
        format has them but the table didn't); anything else goes through
        :meth:`add_column`.
        """
        values = np.asarray(values)
        self._check_length(name, values)
        if name in self._points:
            if values.shape != self._points[name].shape:
                raise SizeMismatchError(
                    f"Column '{name}' has shape {self._points[name].shape}, got {values.shape}"
                )
            self._points[name][...] = values
        elif is_standard_column(name):
            if name not in self._header.point_format:
                raise SchemaMismatchError(
                    f"'{name}' isn't part of point format {self._header.point_format_id}"
                )
            if values.ndim != 1:
                raise SchemaMismatchError(f"Standard column '{name}' must be 1-D")
            self._points[name] = np.array(values)
        else:
            self.add_column(name, values)

    def remove_column(self, name: str) -> None:
        """Remove a user-defined column and its Extra Bytes entries."""
        if self._user_fields is None or name not in self._user_fields:
            raise NotFoundError(f"No user column '{name}' in dataset")
        self._forget_column(name)
        self._user_fields.remove_column(name)
        if not self._user_fields.column_names:
            self._user_fields = None
        self.update_extended_offset()
        logger.debug("Removed column '%s'; record length %d", name, self._header.record_length)

    # ── Introspection ───────────────────────────────────────────────

    def check_invariants(self) -> None:
        """Recompute every layout invariant from scratch.

        Raises:
            InvariantViolationError: Listing each invariant that doesn't hold.
        """
        h = self._header
        problems = []
        if h.point_count != self.num_points:
            problems.append(f"point count {h.point_count} != {self.num_points} rows")
        if self._user_fields is not None and len(self._user_fields) != self.num_points:
            problems.append(f"user table has {len(self._user_fields)} rows, expected {self.num_points}")
        if h.ordinary_record_count != len(self._ordinary):
            problems.append(f"VLR count {h.ordinary_record_count} != {len(self._ordinary)}")
        if h.extended_record_count != len(self._extended):
            problems.append(f"EVLR count {h.extended_record_count} != {len(self._extended)}")
        if h.record_length != self._expected_record_length():
            problems.append(f"record length {h.record_length} != {self._expected_record_length()}")
        if h.payload_offset != self._expected_payload_offset():
            problems.append(f"point offset {h.payload_offset} != {self._expected_payload_offset()}")
        expected_evlr = (
            h.payload_offset + h.record_length * h.point_count if self._extended else 0
        )
        if h.extended_section_offset != expected_evlr:
            problems.append(f"EVLR offset {h.extended_section_offset} != {expected_evlr}")

        documented = {}
        claims: dict[str, list[str]] = {}
        user_bytes = 0
        if self._user_fields is not None:
            for col in self._user_fields:
                values = self._user_fields[col]
                user_bytes += _column_size(col, values)
                ctype = _column_type(col, values)
                if ctype is None:
                    continue
                for sub_name in ctype.field_names(col):
                    claims.setdefault(sub_name, []).append(col)
                    documented[sub_name] = ctype.element
        shared = {sub_name: cols for sub_name, cols in claims.items() if len(cols) > 1}
        if shared:
            problems.append(f"Extra Bytes entries owned by several columns: {shared}")
        column_width = h.point_format.record_length + user_bytes
        if h.record_length != column_width:
            problems.append(f"record length {h.record_length} != {column_width} bytes of columns")

        registry = self.extra_fields
        registered = {} if registry is None else {f.name: f.field_type for f in registry}
        repeated = [] if registry is None else [
            name for name, count in Counter(registry.names).items() if count > 1
        ]
        if repeated:
            problems.append(f"Extra Bytes entries {repeated} appear more than once")
        if documented != registered:
            problems.append(f"user columns {documented} != Extra Bytes entries {registered}")

        registries = [r for r in self.ordinary_records + self.extended_records if r.is_extra_fields]
        if len(registries) > 1:
            problems.append(f"{len(registries)} Extra Bytes records")
        if not all(s > 0 for s in self._unit_scale) or h.unit_scale != self._unit_scale:
            problems.append(f"unit scale {self._unit_scale} / header {h.unit_scale}")

        if problems:
            raise InvariantViolationError("Inconsistent dataset: " + "; ".join(problems))

    def __repr__(self) -> str:
        lines = [
            "LAS Dataset",
            f"\tNum Points: {self.num_points}",
            f"\tPoint Format: {self._header.point_format_id}",
            f"\tPoint Channels: {self._points.column_names}",
        ]
        if self._user_fields is not None:
            lines.append(f"\tUser Fields: {self._user_fields.column_names}")
        lines += [
            f"\tVLRs: {len(self._ordinary)}",
            f"\tEVLRs: {len(self._extended)}",
            f"\tUser Bytes: {len(self._leading_bytes)}",
        ]
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented
        if self._header != other._header:
            return False
        if not self.get_pointcloud().isclose(other.get_pointcloud(), atol=1e-6):
            return False
        for mine, theirs in (
            (self.ordinary_records, other.ordinary_records),
            (self.extended_records, other.extended_records),
        ):
            # same records, any order
            if len(mine) != len(theirs):
                return False
            if not all(any(r == t for t in theirs) for r in mine):
                return False
            if not all(any(t == r for r in mine) for t in theirs):
                return False
        return self._leading_bytes == other._leading_bytes
