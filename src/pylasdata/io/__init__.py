"""Readers that turn text files into point tables."""

from pylasdata.io.csv import CsvReader

__all__ = ["CsvReader"]
