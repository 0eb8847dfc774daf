"""Stream (cell, sample) pairs out of a raster window.

Two sampling schemes link cells to samples: every pixel centre is looked
up in the grid, or every cell centroid inside the window reads the pixel
under it. The latter is needed when cells are smaller than pixels.
"""

import logging
import math
from typing import Any, Callable, Iterator, Optional, Tuple

import numpy as np

from rasterhex.contracts import require
from rasterhex.errors import InvalidInput
from rasterhex.grid import HexGridProvider, default_provider
from rasterhex.raster.window import RasterWindow, wrap_longitude

__all__ = ['enumerate_cells', 'NodataFilter', 'valid_mask', 'PIXEL_CENTER', 'CELL_CENTROID', 'SAMPLINGS']

logger = logging.getLogger(__name__)

SampleFilter = Callable[[Any], bool]

PIXEL_CENTER = "pixel_center"
CELL_CENTROID = "cell_centroid"
SAMPLINGS = (PIXEL_CENTER, CELL_CENTROID)


class NodataFilter:
    """Sample filter rejecting a nodata value.

    A NaN nodata value rejects NaN samples. Instances are picklable so they
    can be shipped to worker processes.
    """

    def __init__(self, nodata):
        self.nodata = nodata
        self._is_nan = isinstance(nodata, float) and math.isnan(nodata)

    def __call__(self, sample) -> bool:
        if self._is_nan:
            return not (isinstance(sample, (float, np.floating)) and math.isnan(sample))
        return sample != self.nodata

    def mask(self, values: np.ndarray) -> np.ndarray:
        """Vectorised form of the filter over an array."""
        if self._is_nan:
            if np.issubdtype(values.dtype, np.floating):
                return ~np.isnan(values)
            return np.ones(values.shape, dtype=bool)
        return values != self.nodata

    def __repr__(self) -> str:
        return f"NodataFilter({self.nodata!r})"


def valid_mask(values: np.ndarray, predicate: Optional[SampleFilter]) -> np.ndarray:
    """Boolean mask of the samples kept by ``predicate`` (all when None)."""
    values = np.asarray(values)
    if predicate is None:
        return np.ones(values.shape, dtype=bool)
    if hasattr(predicate, "mask"):
        return np.asarray(predicate.mask(values), dtype=bool)
    return np.vectorize(lambda v: bool(predicate(v)), otypes=[bool])(values)


def enumerate_cells(window: RasterWindow, resolution: int,
                    predicate: Optional[SampleFilter] = None,
                    provider: Optional[HexGridProvider] = None,
                    sampling: str = PIXEL_CENTER) -> Iterator[Tuple[str, Any]]:
    """Yield ``(cell, sample)`` for every accepted sample of ``window``.

    With ``"pixel_center"`` sampling the samples are visited row-major and
    each one is located at its pixel centre, shifted by the window's
    longitude offset and wrapped into [-180, 180). With ``"cell_centroid"``
    the window's bounding box is tiled with cells and every cell whose
    centroid falls inside the window reads the pixel under that centroid,
    so cells smaller than a pixel still cover the whole window. Calling the
    function again restarts the enumeration.

    Parameters
    ----------
    window : RasterWindow
        Window to enumerate.
    resolution : int
        Resolution of the emitted cells.
    predicate : callable, optional
        Sample filter; samples for which it returns False are skipped.
    provider : HexGridProvider, optional
        Point to cell lookup. Defaults to H3.
    sampling : {"pixel_center", "cell_centroid"}
        Which point links a cell to a sample.

    Raises
    ------
    InvalidInput
        If ``sampling`` is unknown.
    GridError
        Propagated from the provider.
    """
    require(
        sampling in SAMPLINGS,
        f"Unknown sampling {sampling!r}, expected one of {list(SAMPLINGS)}",
        InvalidInput,
    )
    provider = provider or default_provider()
    values = window.values
    keep = valid_mask(values, predicate)
    if sampling == CELL_CENTROID:
        yield from _cell_centroid_samples(window, resolution, values, keep, provider)
        return

    lons, lats = window.pixel_centers()
    rows, cols = np.nonzero(keep)
    logger.debug(
        "Enumerating %d of %d samples in %s", rows.size, window.size, window
    )
    for r, c in zip(rows.tolist(), cols.tolist()):
        cell = provider.cell_for(float(lons[r, c]), float(lats[r, c]), resolution)
        yield cell, values[r, c]


def _query_boxes(west, south, east, north):
    """Split a lon/lat box into boxes inside [-180, 180] x [-90, 90]."""
    south, north = max(south, -90.0), min(north, 90.0)
    if south >= north:
        return []
    if east - west >= 360.0:
        return [(-180.0, south, 180.0, north)]
    width = east - west
    west = float(wrap_longitude(west))
    east = west + width
    if east <= 180.0:
        return [(west, south, east, north)]
    return [(west, south, 180.0, north), (-180.0, south, east - 360.0, north)]


def _cell_centroid_samples(window, resolution, values, keep, provider):
    west, south, east, north = window.bounds()
    # one pixel of margin so centroids on the window edge are never lost
    pad = max(window.transform.pixel_size)
    west, south, east, north = west - pad, south - pad, east + pad, north + pad

    candidates = set()
    for box in _query_boxes(west, south, east, north):
        candidates.update(provider.cells_in_box(*box, resolution))

    emitted = 0
    for cell in sorted(candidates):
        lon, lat = provider.centroid(cell)
        # undo the wrap so the centroid lines up with the window's longitudes
        lon = west + (lon - west) % 360.0
        col, row = window.transform.to_pixel(lon - window.lon_offset, lat)
        r = math.floor(row) - window.row_off
        c = math.floor(col) - window.col_off
        # a centroid belongs to the window holding its pixel, never to two
        if 0 <= r < window.height and 0 <= c < window.width and keep[r, c]:
            emitted += 1
            yield cell, values[r, c]
    logger.debug(
        "Sampled %d of %d candidate cell centroids in %s", emitted, len(candidates), window
    )
