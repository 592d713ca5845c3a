"""CRS (Coordinate Reference System) helpers wrapping pyproj."""

from __future__ import annotations

from pyproj import CRS
from pyproj.exceptions import CRSError

from pylasdata.errors import InvalidCrsError


def parse_crs(crs_input: str | CRS | None) -> CRS | None:
    """Parse a CRS from various input formats.

    Args:
        crs_input: EPSG string ("EPSG:25832"), WKT string, proj4 string,
                   or a pyproj.CRS object.

    Returns:
        pyproj.CRS object or None.
    """
    if crs_input is None:
        return None
    if isinstance(crs_input, CRS):
        return crs_input
    try:
        return CRS.from_user_input(crs_input)
    except CRSError as e:
        raise InvalidCrsError(f"Can't interpret {crs_input!r} as a CRS: {e}") from e


def to_wkt(crs_input: str | CRS) -> str:
    """OGC WKT text for a CRS, as stored in a LASF_Projection/2112 record."""
    return parse_crs(crs_input).to_wkt()
