"""Tests for user field element types."""

import numpy as np
import pytest

from pylasdata.core.fieldtypes import ColumnType, FieldType, split_column_name
from pylasdata.errors import UnsupportedFieldTypeError


class TestFieldType:
    @pytest.mark.parametrize("dtype, expected", [
        (np.uint8, FieldType.UINT8),
        (np.int16, FieldType.INT16),
        (np.uint64, FieldType.UINT64),
        (np.float32, FieldType.FLOAT32),
        (np.float64, FieldType.FLOAT64),
        (np.bool_, FieldType.BOOL),
    ])
    def test_from_dtype(self, dtype, expected):
        assert FieldType.from_dtype(dtype) is expected

    def test_big_endian_maps_to_same_type(self):
        assert FieldType.from_dtype(">f4") is FieldType.FLOAT32

    def test_sizes(self):
        assert FieldType.UINT8.size == 1
        assert FieldType.INT32.size == 4
        assert FieldType.FLOAT64.size == 8
        assert FieldType.BOOL.size == 1

    @pytest.mark.parametrize("dtype", ["U8", "S4", object, np.complex128])
    def test_unsupported_dtype_raises(self, dtype):
        with pytest.raises(UnsupportedFieldTypeError, match="base types"):
            FieldType.from_dtype(dtype)

    def test_unsupported_is_type_error(self):
        with pytest.raises(TypeError):
            FieldType.from_dtype("U8")

    def test_from_code(self):
        assert FieldType.from_code(10) is FieldType.FLOAT64
        assert FieldType.from_code(9) is FieldType.FLOAT32
        # flags are written as unsigned chars
        assert FieldType.from_code(1) is FieldType.UINT8

    def test_from_unknown_code_raises(self):
        with pytest.raises(UnsupportedFieldTypeError, match="code 42"):
            FieldType.from_code(42)

    def test_signedness(self):
        assert FieldType.INT8.is_signed
        assert not FieldType.UINT8.is_signed
        assert FieldType.FLOAT32.is_float
        assert not FieldType.INT64.is_float

    def test_str(self):
        assert str(FieldType.FLOAT32) == "float32"


class TestColumnType:
    def test_scalar(self):
        ctype = ColumnType.of(np.zeros(5, dtype=np.float64))
        assert ctype == ColumnType(FieldType.FLOAT64)
        assert not ctype.is_vector
        assert ctype.size == 8
        assert ctype.field_names("reflectance") == ["reflectance"]

    def test_vector(self):
        ctype = ColumnType.of(np.zeros((5, 3), dtype=np.float32))
        assert ctype == ColumnType(FieldType.FLOAT32, 3)
        assert ctype.is_vector
        assert ctype.size == 12
        assert ctype.field_names("normal") == ["normal [0]", "normal [1]", "normal [2]"]
        assert str(ctype) == "float32[3]"

    def test_three_dimensional_raises(self):
        with pytest.raises(UnsupportedFieldTypeError, match="1-D"):
            ColumnType.of(np.zeros((2, 2, 2)))

    def test_zero_dim_vector_raises(self):
        with pytest.raises(UnsupportedFieldTypeError):
            ColumnType(FieldType.UINT8, 0)

    def test_split_column_name(self):
        assert split_column_name("rgb", 2) == ["rgb [0]", "rgb [1]"]
