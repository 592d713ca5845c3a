"""pylasdata CLI — inspect the LAS layout a point file would produce."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pylasdata._version import __version__
from pylasdata.errors import DatasetError


def cmd_info(args: argparse.Namespace) -> int:
    """Show the LAS layout of a delimited point file."""
    from pylasdata.core.dataset import Dataset
    from pylasdata.io.csv import CsvReader

    path = args.file
    if not Path(path).exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        table = CsvReader().read(path, delimiter=args.delimiter)
        ds = Dataset.from_points(
            table,
            scale=args.scale,
            point_format_id=args.point_format,
            crs=args.crs,
        )
    except (DatasetError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    header = ds.header
    print(f"File: {path}")
    print(f"Points: {ds.num_points:,}")
    print(f"Point format: {header.point_format_id}")
    print(f"LAS version: {header.version_string}")
    print(f"Record length: {header.record_length}")
    print(f"Point offset: {header.payload_offset}")
    print(f"EVLR offset: {header.extended_section_offset}")
    print(f"VLRs: {header.ordinary_record_count}")
    print(f"EVLRs: {header.extended_record_count}")
    print(f"Dimensions: {', '.join(ds.points.column_names)}")

    if ds.user_fields is not None:
        print(f"User fields: {', '.join(ds.user_fields.column_names)}")
    if ds.extra_fields is not None:
        for f in ds.extra_fields:
            print(f"  Extra field: {f.name} ({f.field_type}, {f.size} bytes)")
    if ds.crs:
        print(f"CRS: {ds.crs}")

    bounds = header.bounds
    if bounds is not None:
        print(f"Bounds X: [{bounds.minx:.3f}, {bounds.maxx:.3f}]")
        print(f"Bounds Y: [{bounds.miny:.3f}, {bounds.maxy:.3f}]")
        print(f"Bounds Z: [{bounds.minz:.3f}, {bounds.maxz:.3f}]")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="pylasdata",
        description="pylasdata — in-memory LAS datasets with consistent layout",
    )
    parser.add_argument(
        "--version", action="version", version=f"pylasdata {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # info
    info_parser = subparsers.add_parser("info", help="Show the LAS layout of a point file")
    info_parser.add_argument("file", help="Delimited point file (CSV/TXT/XYZ)")
    info_parser.add_argument(
        "--point-format", type=int, default=None,
        help="Point format id (default: smallest format holding all columns)",
    )
    info_parser.add_argument("--scale", type=float, default=0.001, help="Coordinate scale")
    info_parser.add_argument("--crs", default=None, help="Coordinate system (EPSG code or WKT)")
    info_parser.add_argument("--delimiter", default=None, help="Field delimiter")
    info_parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
