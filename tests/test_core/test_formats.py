"""Tests for point formats and layout constants."""

import laspy
import numpy as np
import pytest

from pylasdata.core.formats import (
    POINT_FORMATS,
    fields_for,
    format_id_for,
    get_point_format,
    header_size_for,
    is_standard_column,
    version_for_format,
)
from pylasdata.errors import SchemaMismatchError


class TestPointFormats:
    @pytest.mark.parametrize("fmt_id, length", [
        (0, 20), (1, 28), (2, 26), (3, 34), (4, 57), (5, 63),
        (6, 30), (7, 36), (8, 38), (9, 59), (10, 67),
    ])
    def test_record_length(self, fmt_id, length):
        assert get_point_format(fmt_id).record_length == length

    def test_all_formats_present(self):
        assert sorted(POINT_FORMATS) == list(range(11))

    def test_contains(self):
        fmt = get_point_format(3)
        assert "Red" in fmt
        assert "GpsTime" in fmt
        assert "NIR" not in fmt

    def test_fields_in_record_order(self):
        fields = fields_for(1)
        assert [f.name for f in fields[:4]] == ["X", "Y", "Z", "Intensity"]
        assert fields[-1].name == "GpsTime"
        assert fields[4].num_bits == 3
        assert fields[-1].num_bytes == 8

    def test_unknown_format_raises(self):
        with pytest.raises(SchemaMismatchError, match="Unknown point format 11"):
            get_point_format(11)

    def test_versions(self):
        assert version_for_format(0) == (1, 2)
        assert version_for_format(5) == (1, 3)
        assert version_for_format(6) == (1, 4)


class TestFormatInference:
    @pytest.mark.parametrize("columns, expected", [
        ({"X", "Y", "Z"}, 0),
        ({"X", "Y", "Z", "GpsTime"}, 1),
        ({"X", "Y", "Z", "Red", "Green", "Blue"}, 2),
        ({"X", "GpsTime", "Red"}, 3),
        ({"X", "ScanAngle"}, 6),
        ({"Red", "Overlap"}, 7),
        ({"X", "NIR"}, 8),
        ({"X", "Xt", "ScanAngle"}, 9),
    ])
    def test_lowest_matching_format(self, columns, expected):
        assert format_id_for(columns) == expected

    def test_ignores_id_and_user_columns(self):
        assert format_id_for({"X", "Y", "Z", "id", "reflectance"}) == 0

    def test_no_format_fits(self):
        assert format_id_for({"ScanAngleRank", "ScanAngle"}) is None

    def test_standard_columns(self):
        assert is_standard_column("id")
        assert is_standard_column("Classification")
        assert not is_standard_column("reflectance")


class TestHeaderSizes:
    def test_sizes(self):
        assert header_size_for((1, 2)) == 227
        assert header_size_for((1, 3)) == 235
        assert header_size_for((1, 4)) == 375

    def test_unknown_version_raises(self):
        with pytest.raises(SchemaMismatchError, match="2.0"):
            header_size_for((2, 0))


class TestLaspyAgreement:
    @pytest.mark.parametrize("fmt_id", sorted(laspy.supported_point_formats()))
    def test_record_length_matches_laspy(self, fmt_id):
        expected = laspy.PointFormat(fmt_id).num_standard_bytes
        assert get_point_format(fmt_id).record_length == expected

    @pytest.mark.parametrize("fmt_id", [0, 3, 6, 10])
    def test_field_order_matches_laspy(self, fmt_id):
        ours = [f.num_bits for f in fields_for(fmt_id)]
        theirs = [d.num_bits for d in laspy.PointFormat(fmt_id).standard_dimensions]
        assert ours == theirs

    def test_flags_held_as_bool(self):
        fmt = {f.name: f for f in fields_for(6)}
        assert fmt["Overlap"].dtype == np.bool_
        assert fmt["ScannerChannel"].dtype == np.uint8
        assert fmt["ScanAngle"].dtype == np.int16

    def test_las_15_header(self):
        assert header_size_for((1, 5)) == 393
