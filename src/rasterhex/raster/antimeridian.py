"""Split raster windows at the antimeridian.

A raster whose pixel edges run past +180 (or start before -180) would make
longitudes jump inside a single processing unit. normalize() cuts such a
window at the column where the ±180 line falls and gives each side its own
longitude offset, so that every normalized window has monotonic longitudes
within [-180, 180].
"""

import logging
import math
from typing import List

from rasterhex.contracts import require
from rasterhex.errors import InvalidInput
from rasterhex.raster.window import RasterWindow, wrap_longitude

__all__ = ['normalize', 'normalize_longitude', 'crosses_antimeridian']

logger = logging.getLogger(__name__)


def normalize_longitude(longitude: float) -> float:
    """Normalize a longitude into [-180, 180)."""
    return float(wrap_longitude(longitude))


def crosses_antimeridian(west: float, east: float) -> bool:
    """Whether the extent [west, east] crosses the ±180 line.

    The extent is taken as continuous (east >= west). Its west edge is
    shifted into [-180, 180); the extent crosses when its east edge then
    ends up past +180. Extents wider than 360 degrees are rejected.

    Raises
    ------
    InvalidInput
        If east < west or the extent is wider than 360 degrees.
    """
    require(east >= west, f"East edge {east} lies west of {west}", InvalidInput)
    require(
        east - west <= 360.0,
        f"Extent [{west}, {east}] is wider than 360 degrees",
        InvalidInput,
    )
    shift = normalize_longitude(west) - west
    return east + shift > 180.0


def normalize(window: RasterWindow) -> List[RasterWindow]:
    """Return one window, or two when ``window`` crosses the antimeridian.

    Each sample is assigned to a side by its centre longitude. The side
    west of the line keeps the offset that moves it into [-180, 180); the
    east side receives an extra -360.

    Parameters
    ----------
    window : RasterWindow
        Window to normalize.

    Returns
    -------
    list of RasterWindow
        ``[window]`` (with a normalizing offset) or ``[first, second]``
        ordered by column.
    """
    west, _, east, _ = window.bounds()
    shift = normalize_longitude(west) - west
    if not crosses_antimeridian(west, east):
        return [window.with_lon_offset(window.lon_offset + shift)]

    # Column (relative, fractional) where the line lon = 180 crosses the middle row
    boundary = 180.0 - shift - window.lon_offset
    mid_row = window.row_off + window.height / 2.0
    col_cross, _ = window.transform.to_pixel(boundary, window.transform.to_world(0.0, mid_row)[1])

    # a > 0: columns run eastwards, the first part lies west of the line
    first_is_west = window.transform.coefficients[0] > 0

    # centre of column k lies on the line when k == edge; such samples go east
    edge = round(col_cross - window.col_off - 0.5, 9)
    split = math.ceil(edge) if first_is_west else math.floor(edge) + 1
    split = min(max(split, 0), window.width)

    if split in (0, window.width):
        # The line falls inside the outer half-pixel: all centres on one side
        center_lon = window.transform.to_world(window.col_off + window.width / 2.0, mid_row)[0]
        side_shift = shift if center_lon + window.lon_offset + shift < 180.0 else shift - 360.0
        logger.debug("Antimeridian within half a pixel of the window edge, no split")
        return [window.with_lon_offset(window.lon_offset + side_shift)]

    first = window.subwindow(0, 0, window.height, split)
    second = window.subwindow(0, split, window.height, window.width - split)

    west_part, east_part = (first, second) if first_is_west else (second, first)
    west_part = west_part.with_lon_offset(window.lon_offset + shift)
    east_part = east_part.with_lon_offset(window.lon_offset + shift - 360.0)

    logger.debug(
        "Split window %s at column %d: west %dx%d, east %dx%d",
        window, window.col_off + split,
        west_part.height, west_part.width, east_part.height, east_part.width,
    )
    parts = [west_part, east_part] if first_is_west else [east_part, west_part]
    return parts
