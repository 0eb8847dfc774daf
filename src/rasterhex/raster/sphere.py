"""Metric size of geographic pixels on a spherical earth."""

import math
from typing import Tuple

from rasterhex.contracts import require
from rasterhex.errors import InvalidInput
from rasterhex.raster.transform import GeoTransform

# earth radius at the equator in meters
EARTH_RADIUS_EQUATOR = 6_378_137.0

METERS_PER_DEGREE = math.pi / 180.0 * EARTH_RADIUS_EQUATOR


def pixel_size_m(transform: GeoTransform, shape: Tuple[int, int]) -> Tuple[float, float]:
    """Approximate (width, height) of one pixel in meters.

    Evaluated at the centre latitude of a raster of ``shape`` (rows, cols):
    the column and row vectors of the transform are converted from degrees
    with the meridian scale in latitude and the parallel scale
    ``cos(latitude)`` in longitude.

    Parameters
    ----------
    transform : GeoTransform
        Transform of the raster (degrees).
    shape : tuple of int
        (rows, cols) of the raster.

    Returns
    -------
    tuple of float
        Pixel width and height in meters.
    """
    rows, cols = shape
    require(rows > 0 and cols > 0, f"Empty raster of shape {shape}", InvalidInput)

    _, lat = transform.to_world(cols / 2.0, rows / 2.0)
    require(-90.0 <= lat <= 90.0, f"Centre latitude {lat} outside [-90, 90]", InvalidInput)
    scale_x = math.cos(math.radians(lat))

    a, b, _, d, e, _ = transform.coefficients
    width = math.hypot(a * scale_x, d) * METERS_PER_DEGREE
    height = math.hypot(b * scale_x, e) * METERS_PER_DEGREE
    return width, height
