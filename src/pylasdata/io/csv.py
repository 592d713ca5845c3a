"""CSV/text reader — delimited point data into a PointTable."""

from __future__ import annotations

import io as _io
import logging
import re
from typing import Any

import numpy as np

from pylasdata.core.table import PointTable

logger = logging.getLogger(__name__)

# "normal [0]", "normal [1]", ... as produced for vector extra fields
_VECTOR_HEADER = re.compile(r"^(?P<name>.+) \[(?P<index>\d+)\]$")


class CsvReader:
    """Read CSV/TXT point files.

    Headers of the form ``"name [i]"`` are gathered back into a single
    (N, d) column ``name``, matching how vector user fields are split into
    Extra Bytes entries.

    Options:
        delimiter: str — Field delimiter (default: auto-detect from ',', ';', '\\t', ' ').
        header: str — Comma-separated column names if file has no header row.
            E.g., "X,Y,Z,Intensity". If not given, first row is used as header.
        skip: int — Number of header lines to skip before data (default: 0).
    """

    def read(self, path: str, **options: Any) -> PointTable:
        delimiter = options.get("delimiter")
        header_str = options.get("header")
        skip = int(options.get("skip", 0))

        with open(path, "r") as f:
            for _ in range(skip):
                f.readline()

            if header_str:
                columns = [c.strip() for c in header_str.split(",")]
            else:
                first_line = f.readline().strip()
                if delimiter is None:
                    delimiter = self._detect_delimiter(first_line)
                columns = [c.strip() for c in first_line.split(delimiter)]

            remaining = f.read()

        if delimiter is None and remaining:
            delimiter = self._detect_delimiter(remaining.split("\n", 1)[0])

        if not remaining.strip():
            arrays = {col: np.array([], dtype=np.float64) for col in columns}
        else:
            data = np.loadtxt(
                _io.StringIO(remaining),
                delimiter=None if delimiter == " " else delimiter,
                dtype=np.float64,
                ndmin=2,
            )
            if data.shape[1] != len(columns):
                raise ValueError(
                    f"{path}: {len(columns)} header columns but {data.shape[1]} values per row"
                )
            sample = remaining.strip().split("\n", 1)[0]
            first_row = sample.split() if delimiter == " " else sample.split(delimiter)
            first_row = [v.strip() for v in first_row]
            arrays: dict[str, np.ndarray] = {}
            for j, col in enumerate(columns):
                arr = data[:, j]
                # Integer column: whole numbers written without a decimal point
                if np.all(arr == np.floor(arr)) and "." not in first_row[j]:
                    arr = arr.astype(np.int64)
                arrays[col] = arr

        table = PointTable.from_dict(self._group_vectors(arrays))
        logger.info("Read %d points with columns %s from %s", len(table), table.column_names, path)
        return table

    @staticmethod
    def _group_vectors(arrays: dict[str, np.ndarray]) -> dict[str, np.ndarray]:
        """Stack ``"name [0]" ... "name [d-1]"`` columns into one 2-D column."""
        groups: dict[str, dict[int, np.ndarray]] = {}
        result: dict[str, np.ndarray] = {}
        for col, arr in arrays.items():
            match = _VECTOR_HEADER.match(col)
            if match is None:
                result[col] = arr
                continue
            name = match.group("name")
            groups.setdefault(name, {})[int(match.group("index"))] = arr
            # keep the vector where its first entry appeared
            result.setdefault(name, None)

        for name, parts in groups.items():
            if sorted(parts) != list(range(len(parts))):
                raise ValueError(
                    f"Vector column '{name}' has entries {sorted(parts)}, "
                    f"expected 0..{len(parts) - 1}"
                )
            if name in arrays:
                raise ValueError(f"Column '{name}' appears both as scalar and vector")
            result[name] = np.column_stack([parts[i] for i in range(len(parts))])
        return result

    def _detect_delimiter(self, line: str) -> str:
        """Auto-detect the delimiter from a sample line."""
        for delim in [",", ";", "\t"]:
            if delim in line:
                return delim
        return " "

    @classmethod
    def extensions(cls) -> list[str]:
        return [".csv", ".txt", ".xyz"]
