"""Tests for CLI."""

import pytest

from pylasdata._version import __version__
from pylasdata.cli import main


@pytest.fixture
def sample_csv(tmp_path):
    """A small CSV point file for CLI tests."""
    path = tmp_path / "points.csv"
    path.write_text(
        "X,Y,Z,Classification\n"
        "1.0,10.0,0.1,2\n"
        "2.0,20.0,0.2,2\n"
        "3.0,30.0,0.3,6\n"
    )
    return str(path)


@pytest.fixture
def user_csv(tmp_path):
    path = tmp_path / "user.csv"
    path.write_text("X,Y,Z,reflectance\n1.0,2.0,3.0,0.5\n4.0,5.0,6.0,0.7\n")
    return str(path)


class TestCliInfo:
    def test_info_command(self, sample_csv, capsys):
        ret = main(["info", sample_csv])
        assert ret == 0
        output = capsys.readouterr().out
        assert "Points: 3" in output
        assert "Point format: 0" in output
        assert "LAS version: 1.2" in output
        assert "Record length: 20" in output
        assert "Point offset: 227" in output
        assert "EVLR offset: 0" in output

    def test_info_missing_file(self, capsys):
        ret = main(["info", "/nonexistent/file.csv"])
        assert ret == 1
        assert "File not found" in capsys.readouterr().err

    def test_info_shows_bounds(self, sample_csv, capsys):
        main(["info", sample_csv])
        output = capsys.readouterr().out
        assert "Bounds X: [1.000, 3.000]" in output
        assert "Bounds Y:" in output
        assert "Bounds Z:" in output

    def test_info_user_fields(self, user_csv, capsys):
        assert main(["info", user_csv]) == 0
        output = capsys.readouterr().out
        assert "User fields: reflectance" in output
        assert "Extra field: reflectance (float64, 8 bytes)" in output
        assert "Point offset: 473" in output
        assert "VLRs: 1" in output

    def test_info_point_format(self, sample_csv, capsys):
        assert main(["info", sample_csv, "--point-format", "1"]) == 0
        output = capsys.readouterr().out
        assert "Point format: 1" in output
        assert "Record length: 28" in output

    def test_info_crs(self, sample_csv, capsys):
        assert main(["info", sample_csv, "--crs", "EPSG:4326"]) == 0
        output = capsys.readouterr().out
        assert "CRS:" in output
        assert "VLRs: 1" in output

    def test_info_bad_scale(self, sample_csv, capsys):
        assert main(["info", sample_csv, "--scale", "0"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_info_bad_point_format(self, sample_csv, capsys):
        assert main(["info", sample_csv, "--point-format", "42"]) == 1

    def test_info_verbose(self, sample_csv, capsys):
        assert main(["info", sample_csv, "-v"]) == 0


class TestCliGeneral:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert f"pylasdata {__version__}" in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "info" in capsys.readouterr().out
