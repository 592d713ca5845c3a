"""Shared test fixtures."""

import numpy as np
import pytest

from pylasdata.core.dataset import Dataset
from pylasdata.core.header import HeaderModel


@pytest.fixture
def points() -> dict[str, np.ndarray]:
    """Two points of format 0 without an id column."""
    return {
        "X": np.array([1.0, 2.0]),
        "Y": np.array([3.0, 4.0]),
        "Z": np.array([5.0, 6.0]),
        "Intensity": np.array([100, 200], dtype=np.uint16),
    }


@pytest.fixture
def header() -> HeaderModel:
    """LAS 1.2, point format 0, two points, no records."""
    return HeaderModel(format_version=(1, 2), point_format_id=0, point_count=2)


@pytest.fixture
def dataset(header, points) -> Dataset:
    """A minimal consistent dataset: 2 points, format 0, no records."""
    return Dataset(header, points)


@pytest.fixture
def sample_points() -> dict[str, np.ndarray]:
    """100 random points with classification and a user column."""
    rng = np.random.default_rng(42)
    return {
        "X": rng.uniform(400000, 401000, 100),
        "Y": rng.uniform(5600000, 5601000, 100),
        "Z": rng.uniform(100, 500, 100),
        "Intensity": rng.integers(0, 65535, 100, dtype=np.uint16),
        "Classification": rng.choice([1, 2, 3, 6], size=100).astype(np.uint8),
        "reflectance": rng.uniform(0, 1, 100).astype(np.float32),
    }
