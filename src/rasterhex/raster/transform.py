"""Affine georeferencing of raster pixel indices.

GeoTransform wraps ``affine.Affine`` and adds the validation the converter
relies on: finite coefficients and an invertible map. Coefficients follow
the rasterio ordering::

    x = a * col + b * row + c
    y = d * col + e * row + f

with x = longitude and y = latitude in degrees.
"""

import math
from typing import Sequence, Tuple

import numpy as np
from affine import Affine

from rasterhex.contracts import require
from rasterhex.errors import InvalidInput

__all__ = ['GeoTransform']


class GeoTransform:
    """Immutable, invertible pixel-to-world affine map.

    Parameters
    ----------
    a, b, c, d, e, f : float
        Coefficients in rasterio order (see module docstring).

    Raises
    ------
    InvalidInput
        If a coefficient is not finite or the map is degenerate.

    Examples
    --------
    >>> gt = GeoTransform.from_gdal((8.11377, 0.0011965, 0.0, 49.40792, 0.0, -0.0012151))
    >>> gt.to_world(0, 0)
    (8.11377, 49.40792)
    """

    __slots__ = ("_affine", "_inverse")

    def __init__(self, a: float, b: float, c: float, d: float, e: float, f: float):
        coefficients = (a, b, c, d, e, f)
        require(
            all(math.isfinite(float(v)) for v in coefficients),
            f"GeoTransform coefficients must be finite, got {coefficients}",
            InvalidInput,
        )
        aff = Affine(*(float(v) for v in coefficients))
        require(
            not aff.is_degenerate,
            f"GeoTransform is not invertible (determinant {aff.determinant})",
            InvalidInput,
        )
        object.__setattr__(self, "_affine", aff)
        object.__setattr__(self, "_inverse", ~aff)

    def __setattr__(self, name, value):
        raise AttributeError("GeoTransform is immutable")

    @classmethod
    def from_gdal(cls, t: Sequence[float]) -> "GeoTransform":
        """Construct from the 6 coefficients in the ordering used by GDAL."""
        require(len(t) == 6, f"Expected 6 coefficients, got {len(t)}", InvalidInput)
        return cls(t[1], t[2], t[0], t[4], t[5], t[3])

    @classmethod
    def from_rasterio(cls, t: Sequence[float]) -> "GeoTransform":
        """Construct from the 6 coefficients in the ordering used by rasterio."""
        require(len(t) == 6, f"Expected 6 coefficients, got {len(t)}", InvalidInput)
        return cls(*t[:6])

    @classmethod
    def from_coords(cls, x: np.ndarray, y: np.ndarray) -> "GeoTransform":
        """Build the transform of a regular grid from 1-D pixel-centre coordinates.

        Parameters
        ----------
        x, y : np.ndarray
            Longitudes of the column centres and latitudes of the row
            centres, each evenly spaced with at least two values.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        require(
            x.ndim == 1 and y.ndim == 1 and x.size >= 2 and y.size >= 2,
            "Coordinates must be 1-D with at least two values each",
            InvalidInput,
        )
        dx = x[1] - x[0]
        dy = y[1] - y[0]
        require(
            np.allclose(np.diff(x), dx) and np.allclose(np.diff(y), dy),
            "Coordinates must be evenly spaced",
            InvalidInput,
        )
        return cls(dx, 0.0, x[0] - dx / 2.0, 0.0, dy, y[0] - dy / 2.0)

    @property
    def affine(self) -> Affine:
        return self._affine

    @property
    def coefficients(self) -> Tuple[float, float, float, float, float, float]:
        """(a, b, c, d, e, f) in rasterio order."""
        return tuple(self._affine)[:6]

    @property
    def determinant(self) -> float:
        return self._affine.determinant

    @property
    def pixel_size(self) -> Tuple[float, float]:
        """Length of one pixel along columns and along rows, in degrees."""
        a, b, _, d, e, _ = self.coefficients
        return math.hypot(a, d), math.hypot(b, e)

    def to_world(self, cols, rows):
        """Map pixel indices (scalars or arrays) to (x, y)."""
        return self._affine @ (cols, rows)

    def to_pixel(self, xs, ys):
        """Map world coordinates (scalars or arrays) back to fractional (col, row)."""
        return self._inverse @ (xs, ys)

    def to_gdal(self) -> Tuple[float, float, float, float, float, float]:
        return self._affine.to_gdal()

    def __eq__(self, other) -> bool:
        if not isinstance(other, GeoTransform):
            return NotImplemented
        return self.coefficients == other.coefficients

    def __hash__(self) -> int:
        return hash(self.coefficients)

    def __reduce__(self):
        return (GeoTransform, self.coefficients)

    def __repr__(self) -> str:
        return "GeoTransform(%s)" % ", ".join(repr(v) for v in self.coefficients)
