"""Tests for PointTable and Bounds."""

import numpy as np
import pytest

from pylasdata.core.bounds import Bounds
from pylasdata.core.table import PointTable


class TestPointTableCreation:
    def test_empty(self):
        t = PointTable()
        assert t.num_points == 0
        assert t.column_names == []
        assert len(t) == 0

    def test_set_get_column(self):
        t = PointTable()
        x = np.array([1.0, 2.0, 3.0])
        t["X"] = x
        np.testing.assert_array_equal(t["X"], x)
        assert "X" in t
        assert len(t) == 3

    def test_set_mismatched_length_raises(self):
        t = PointTable()
        t["X"] = np.array([1.0, 2.0, 3.0])
        with pytest.raises(ValueError, match="length"):
            t["Y"] = np.array([1.0, 2.0])

    def test_replace_column_with_new_length(self):
        t = PointTable()
        t["X"] = np.array([1.0, 2.0, 3.0])
        t["X"] = np.array([1.0])
        assert len(t) == 1

    def test_scalar_raises(self):
        with pytest.raises(ValueError, match="scalar"):
            PointTable()["X"] = 1.0

    def test_get_missing_raises(self):
        with pytest.raises(KeyError, match="not found"):
            _ = PointTable()["X"]

    def test_from_dict_mismatched_raises(self):
        with pytest.raises(ValueError, match="same length"):
            PointTable.from_dict({"X": np.array([1.0]), "Y": np.array([1.0, 2.0])})

    def test_vector_column(self):
        t = PointTable.from_dict({"X": [1.0, 2.0], "normal": np.zeros((2, 3))})
        assert t["normal"].shape == (2, 3)
        assert t.num_points == 2


class TestPointTableOperations:
    @pytest.fixture
    def table(self):
        return PointTable.from_dict({
            "X": np.array([1.0, 2.0]),
            "flag": np.array([True, False]),
            "normal": np.array([[0.0, 0.0, 1.0], [0.0, 1.0, 0.0]], dtype=np.float32),
        })

    def test_to_numpy(self, table):
        arr = table.to_numpy()
        assert arr.dtype.names == ("X", "flag", "normal")
        assert arr["normal"].shape == (2, 3)
        np.testing.assert_array_equal(arr["X"], [1.0, 2.0])

    def test_select_shares_arrays(self, table):
        sub = table.select(["X"])
        assert sub.column_names == ["X"]
        assert sub["X"] is table["X"]

    def test_remove_column(self, table):
        removed = table.remove_column("flag")
        np.testing.assert_array_equal(removed, [True, False])
        assert "flag" not in table
        with pytest.raises(KeyError):
            table.remove_column("flag")

    def test_join(self, table):
        other = PointTable.from_dict({"Y": np.array([5.0, 6.0])})
        joined = table.join(other)
        assert joined.column_names == ["X", "flag", "normal", "Y"]

    def test_join_clash_raises(self, table):
        with pytest.raises(ValueError, match="share columns"):
            table.join(table.select(["X"]))

    def test_join_row_mismatch_raises(self, table):
        with pytest.raises(ValueError, match="rows"):
            table.join(PointTable.from_dict({"Y": np.array([1.0])}))

    def test_copy_is_deep(self, table):
        c = table.copy()
        c["X"][0] = 99.0
        assert table["X"][0] == 1.0

    def test_isclose(self, table):
        other = table.copy()
        other["X"] = other["X"] + 1e-7
        assert table.isclose(other)
        other["X"] = other["X"] + 1e-3
        assert not table.isclose(other)

    def test_isclose_column_order_irrelevant(self, table):
        reordered = table.select(["normal", "X", "flag"])
        assert table.isclose(reordered)

    def test_isclose_bool_columns(self, table):
        other = table.copy()
        other["flag"] = np.array([True, True])
        assert not table.isclose(other)

    def test_isclose_different_columns(self, table):
        assert not table.isclose(table.select(["X"]))

    def test_repr(self, table):
        assert "2 points" in repr(table)


class TestBounds:
    def test_from_table(self):
        t = PointTable.from_dict({
            "X": np.array([1.0, 3.0]),
            "Y": np.array([-2.0, 2.0]),
            "Z": np.array([10.0, 5.0]),
        })
        b = Bounds.from_table(t)
        assert b.mins == (1.0, -2.0, 5.0)
        assert b.maxs == (3.0, 2.0, 10.0)

    def test_from_table_without_xyz(self):
        assert Bounds.from_table(PointTable.from_dict({"X": [1.0]})) is None

    def test_from_empty_table(self):
        t = PointTable.from_dict({"X": [], "Y": [], "Z": []})
        assert Bounds.from_table(t) is None
