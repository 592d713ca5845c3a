"""Core data model for pylasdata."""

from pylasdata.core.bounds import Bounds
from pylasdata.core.dataset import Dataset, RecordHandle
from pylasdata.core.fieldtypes import ColumnType, FieldType
from pylasdata.core.formats import POINT_FORMATS, PointFormat
from pylasdata.core.header import HeaderModel
from pylasdata.core.records import (
    ExtraField,
    ExtraFieldsRegistry,
    MetadataRecord,
    OpaquePayload,
    WktPayload,
)
from pylasdata.core.table import PointTable

__all__ = [
    "Bounds",
    "ColumnType",
    "Dataset",
    "ExtraField",
    "ExtraFieldsRegistry",
    "FieldType",
    "HeaderModel",
    "MetadataRecord",
    "OpaquePayload",
    "POINT_FORMATS",
    "PointFormat",
    "PointTable",
    "RecordHandle",
    "WktPayload",
]
