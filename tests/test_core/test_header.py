"""Tests for the LAS header model."""

import pytest

from pylasdata.core.header import HeaderModel, check_unit_scale
from pylasdata.errors import InvalidUnitScaleError, SchemaMismatchError


class TestHeaderModel:
    def test_defaults(self):
        h = HeaderModel()
        assert h.format_version == (1, 2)
        assert h.header_size == 227
        assert h.point_format.record_length == 20
        assert h.unit_scale == (1.0, 1.0, 1.0)
        assert not h.supports_extended_records

    def test_version_14(self):
        h = HeaderModel(format_version=(1, 4), point_format_id=6)
        assert h.header_size == 375
        assert h.supports_extended_records
        assert h.version_string == "1.4"

    def test_version_from_list(self):
        assert HeaderModel(format_version=[1, 3]).format_version == (1, 3)

    def test_unknown_format_raises(self):
        with pytest.raises(SchemaMismatchError):
            HeaderModel(point_format_id=42)

    def test_unknown_version_raises(self):
        with pytest.raises(SchemaMismatchError, match="Unsupported LAS version"):
            HeaderModel(format_version=(1, 9))

    @pytest.mark.parametrize("unit_scale", [(1.0, 0.0, 1.0), (1.0, 1.0, -2.0)])
    def test_bad_unit_scale_raises(self, unit_scale):
        with pytest.raises(InvalidUnitScaleError, match="positive"):
            HeaderModel(unit_scale=unit_scale)

    def test_zero_coordinate_scale_raises(self):
        with pytest.raises(InvalidUnitScaleError, match="non-zero"):
            HeaderModel(coordinate_scale=(0.01, 0.0, 0.01))

    def test_recompute_extended_offset(self):
        h = HeaderModel(point_count=10, record_length=20, payload_offset=300)
        h.recompute_extended_offset()
        assert h.extended_section_offset == 0
        h.extended_record_count = 1
        h.recompute_extended_offset()
        assert h.extended_section_offset == 300 + 20 * 10

    def test_copy_is_independent(self):
        h = HeaderModel(point_count=5)
        c = h.copy()
        c.point_count = 6
        assert h.point_count == 5
        assert c != h


class TestCheckUnitScale:
    def test_returns_floats(self):
        assert check_unit_scale((1, 2, 3)) == (1.0, 2.0, 3.0)

    def test_wrong_length(self):
        with pytest.raises(InvalidUnitScaleError, match="3 components"):
            check_unit_scale((1.0, 1.0))
