"""pylasdata — in-memory LAS datasets that keep their layout consistent."""

from pylasdata._version import __version__
from pylasdata.core.bounds import Bounds
from pylasdata.core.dataset import Dataset, RecordHandle
from pylasdata.core.fieldtypes import ColumnType, FieldType
from pylasdata.core.header import HeaderModel
from pylasdata.core.records import ExtraField, ExtraFieldsRegistry, MetadataRecord
from pylasdata.core.table import PointTable
from pylasdata.errors import (
    CountMismatchError,
    DatasetError,
    DuplicateRegistrySingletonError,
    InvalidCrsError,
    InvalidUnitScaleError,
    InvariantViolationError,
    NotFoundError,
    SchemaMismatchError,
    SizeMismatchError,
    UnsupportedFieldTypeError,
)
from pylasdata.io.csv import CsvReader

__all__ = [
    "__version__",
    "Bounds",
    "ColumnType",
    "CsvReader",
    "Dataset",
    "ExtraField",
    "ExtraFieldsRegistry",
    "FieldType",
    "HeaderModel",
    "MetadataRecord",
    "PointTable",
    "RecordHandle",
    "CountMismatchError",
    "DatasetError",
    "DuplicateRegistrySingletonError",
    "InvalidCrsError",
    "InvalidUnitScaleError",
    "InvariantViolationError",
    "NotFoundError",
    "SchemaMismatchError",
    "SizeMismatchError",
    "UnsupportedFieldTypeError",
]
