"""Rectangular read-only views onto a georeferenced raster.

A RasterWindow never copies samples: it keeps the full array and the
full-raster GeoTransform and addresses its region by offset and size.
The orchestrator creates windows when partitioning and drops them once
their chunk has been converted.
"""

from typing import Tuple

import numpy as np
from affine import Affine

from rasterhex.contracts import require
from rasterhex.errors import InvalidInput
from rasterhex.raster.transform import GeoTransform

__all__ = ['RasterWindow', 'wrap_longitude']


def wrap_longitude(lon):
    """Wrap longitudes (scalar or array) into [-180, 180)."""
    return ((lon + 540.0) % 360.0) - 180.0


class RasterWindow:
    """Axis-aligned region of a 2-D raster.

    Parameters
    ----------
    array : array-like
        The full 2-D raster (rows, columns). Shared, never written to.

    transform : GeoTransform
        Transform of the full raster (pixel (0, 0) of ``array``).

    row_off, col_off : int
        Origin of the window inside ``array``.

    height, width : int, optional
        Window size. Defaults to the rest of the array.

    lon_offset : float
        Longitude shift (a multiple of 360) applied to every sample of the
        window. Set by the antimeridian splitter.

    Raises
    ------
    InvalidInput
        If the array is not 2-D, the window is empty or exceeds the array.
    """

    __slots__ = ("array", "transform", "row_off", "col_off", "height", "width", "lon_offset")

    def __init__(self, array, transform: GeoTransform, row_off: int = 0, col_off: int = 0,
                 height: int = None, width: int = None, lon_offset: float = 0.0):
        array = np.asarray(array)
        require(array.ndim == 2, f"Raster must be 2-D, got {array.ndim} dims", InvalidInput)
        require(
            isinstance(transform, GeoTransform),
            f"transform must be a GeoTransform, got {type(transform).__name__}",
            InvalidInput,
        )
        if height is None:
            height = array.shape[0] - row_off
        if width is None:
            width = array.shape[1] - col_off
        require(
            0 <= row_off and 0 <= col_off and height > 0 and width > 0
            and row_off + height <= array.shape[0]
            and col_off + width <= array.shape[1],
            f"Window at ({row_off}, {col_off}) size {height}x{width} "
            f"does not fit a raster of shape {array.shape}",
            InvalidInput,
        )
        self.array = array
        self.transform = transform
        self.row_off = int(row_off)
        self.col_off = int(col_off)
        self.height = int(height)
        self.width = int(width)
        self.lon_offset = float(lon_offset)

    @classmethod
    def full(cls, array, transform: GeoTransform) -> "RasterWindow":
        """Window covering the whole raster."""
        return cls(array, transform)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def size(self) -> int:
        return self.height * self.width

    @property
    def values(self) -> np.ndarray:
        """View of the samples inside the window."""
        return self.array[self.row_off:self.row_off + self.height,
                          self.col_off:self.col_off + self.width]

    def subwindow(self, row_off: int, col_off: int, height: int, width: int) -> "RasterWindow":
        """Window relative to this one, inheriting its longitude offset."""
        require(
            row_off + height <= self.height and col_off + width <= self.width,
            f"Subwindow at ({row_off}, {col_off}) size {height}x{width} "
            f"exceeds window of shape {self.shape}",
            InvalidInput,
        )
        return RasterWindow(
            self.array, self.transform,
            self.row_off + row_off, self.col_off + col_off,
            height, width, self.lon_offset,
        )

    def with_lon_offset(self, lon_offset: float) -> "RasterWindow":
        return RasterWindow(
            self.array, self.transform, self.row_off, self.col_off,
            self.height, self.width, lon_offset,
        )

    def detached(self) -> "RasterWindow":
        """Self-contained copy holding only this window's samples.

        The transform is shifted so that every sample keeps its world
        coordinate. Used to ship chunks to worker processes without
        pickling the full raster.
        """
        shifted = self.transform.affine @ Affine.translation(self.col_off, self.row_off)
        return RasterWindow(
            np.ascontiguousarray(self.values),
            GeoTransform(*tuple(shifted)[:6]),
            lon_offset=self.lon_offset,
        )

    def pixel_centers(self) -> Tuple[np.ndarray, np.ndarray]:
        """Longitudes and latitudes of the sample centres, shape (height, width).

        The window's longitude offset is applied and the result wrapped
        into [-180, 180).
        """
        rows, cols = np.mgrid[
            self.row_off:self.row_off + self.height,
            self.col_off:self.col_off + self.width,
        ]
        xs, ys = self.transform.to_world(cols + 0.5, rows + 0.5)
        return wrap_longitude(xs + self.lon_offset), ys

    def bounds(self) -> Tuple[float, float, float, float]:
        """(west, south, east, north) of the pixel edges, longitude offset applied.

        Longitudes are not wrapped: a window crossing the antimeridian
        reports an east edge beyond 180.
        """
        cols = np.array([self.col_off, self.col_off + self.width] * 2, dtype=np.float64)
        rows = np.array([self.row_off] * 2 + [self.row_off + self.height] * 2, dtype=np.float64)
        xs, ys = self.transform.to_world(cols, rows)
        xs = xs + self.lon_offset
        return float(xs.min()), float(ys.min()), float(xs.max()), float(ys.max())

    def __repr__(self) -> str:
        return (
            f"RasterWindow(row_off={self.row_off}, col_off={self.col_off}, "
            f"height={self.height}, width={self.width}, lon_offset={self.lon_offset})"
        )
