"""H3 implementation of the hex grid capability interface.

Thin adapter over the ``h3`` (v4) bindings. Inputs are validated before
they reach the library so that every rejection surfaces as GridError with
a message naming the offending value.
"""

import logging
import math
import numbers
from typing import Iterable, List, Tuple

import h3

from rasterhex.contracts import require
from rasterhex.errors import GridError

__all__ = ['H3GridProvider']

logger = logging.getLogger(__name__)

# widest longitude span handed to H3 in a single polygon
MAX_SLICE_WIDTH = 90.0


class H3GridProvider:
    """Hex grid provider backed by Uber's H3 (resolutions 0-15).

    H3 takes coordinates as (lat, lng); this adapter keeps the (lon, lat)
    order used everywhere else in rasterhex.

    Examples
    --------
    >>> grid = H3GridProvider()
    >>> cell = grid.cell_for(13.0, 52.0, 9)
    >>> grid.resolution_of(cell)
    9
    """

    min_resolution = 0
    max_resolution = 15

    def cell_for(self, lon: float, lat: float, resolution: int) -> str:
        """Return the H3 cell containing (lon, lat) at ``resolution``."""
        resolution = self._check_resolution(resolution)
        require(
            math.isfinite(lon) and math.isfinite(lat),
            f"Coordinates must be finite, got lon={lon}, lat={lat}",
            GridError,
        )
        require(
            -90.0 <= lat <= 90.0,
            f"Latitude {lat} outside [-90, 90]",
            GridError,
        )
        try:
            return h3.latlng_to_cell(float(lat), float(lon), resolution)
        except (h3.H3BaseException, ValueError) as err:
            raise GridError(f"H3 rejected lon={lon}, lat={lat}: {err}") from err

    def average_edge_length(self, resolution: int) -> float:
        """Average hexagon edge length at ``resolution`` in metres."""
        resolution = self._check_resolution(resolution)
        return h3.average_hexagon_edge_length(resolution, unit='m')

    def average_area(self, resolution: int) -> float:
        """Average hexagon area at ``resolution`` in square metres."""
        resolution = self._check_resolution(resolution)
        return h3.average_hexagon_area(resolution, unit='m^2')

    def cell_area(self, cell: str) -> float:
        """Exact area of ``cell`` on the authalic sphere, in square metres."""
        self._check_cell(cell)
        return h3.cell_area(cell, unit='m^2')

    def centroid(self, cell: str) -> Tuple[float, float]:
        """Centre of ``cell`` as (lon, lat)."""
        self._check_cell(cell)
        lat, lng = h3.cell_to_latlng(cell)
        return lng, lat

    def cells_in_box(self, west: float, south: float, east: float, north: float,
                     resolution: int) -> List[str]:
        """Cells whose centroids fall inside the box, sorted by cell id.

        The box must not cross the antimeridian: ``-180 <= west < east <= 180``.
        H3 polygons are limited to edges shorter than 180 degrees, so wide
        boxes are queried in slices of at most ``MAX_SLICE_WIDTH`` degrees.
        """
        resolution = self._check_resolution(resolution)
        require(
            all(math.isfinite(v) for v in (west, south, east, north)),
            f"Box must be finite, got ({west}, {south}, {east}, {north})",
            GridError,
        )
        require(
            -180.0 <= west < east <= 180.0 and -90.0 <= south < north <= 90.0,
            f"Invalid box ({west}, {south}, {east}, {north})",
            GridError,
        )
        slices = max(1, math.ceil((east - west) / MAX_SLICE_WIDTH))
        step = (east - west) / slices
        cells = set()
        for i in range(slices):
            lo = west + i * step
            hi = east if i == slices - 1 else lo + step
            ring = [(south, lo), (south, hi), (north, hi), (north, lo)]
            try:
                cells.update(h3.h3shape_to_cells(h3.LatLngPoly(ring), resolution))
            except (h3.H3BaseException, ValueError) as err:
                raise GridError(
                    f"H3 failed to fill box ({lo}, {south}, {hi}, {north}): {err}"
                ) from err
        logger.debug(
            "Box (%.4f, %.4f, %.4f, %.4f) holds %d cells at resolution %d",
            west, south, east, north, len(cells), resolution,
        )
        return sorted(cells)

    def boundary(self, cell: str) -> List[Tuple[float, float]]:
        """Boundary ring of ``cell`` as (lon, lat) pairs (not closed)."""
        self._check_cell(cell)
        return [(lng, lat) for lat, lng in h3.cell_to_boundary(cell)]

    def children(self, cell: str, resolution: int) -> List[str]:
        """Children of ``cell`` at ``resolution``, sorted by cell id."""
        self._check_cell(cell)
        resolution = self._check_resolution(resolution)
        require(
            resolution >= h3.get_resolution(cell),
            f"Cannot take children of {cell} at coarser resolution {resolution}",
            GridError,
        )
        return sorted(h3.cell_to_children(cell, resolution))

    def resolution_of(self, cell: str) -> int:
        """Resolution encoded in ``cell``."""
        self._check_cell(cell)
        return h3.get_resolution(cell)

    def compact(self, cells: Iterable[str]) -> List[str]:
        """Compact a set of cells, returned sorted by cell id."""
        cells = sorted(set(cells))
        for cell in cells:
            self._check_cell(cell)
        try:
            compacted = h3.compact_cells(cells)
        except (h3.H3BaseException, ValueError) as err:
            raise GridError(f"H3 failed to compact {len(cells)} cells: {err}") from err
        logger.debug("Compacted %d cells to %d", len(cells), len(compacted))
        return sorted(compacted)

    def _check_resolution(self, resolution) -> int:
        require(
            isinstance(resolution, numbers.Integral) and not isinstance(resolution, bool)
            and self.min_resolution <= resolution <= self.max_resolution,
            f"H3 resolution must be an integer in [{self.min_resolution}, "
            f"{self.max_resolution}], got {resolution!r}",
            GridError,
        )
        return int(resolution)

    def _check_cell(self, cell) -> None:
        require(
            isinstance(cell, str) and h3.is_valid_cell(cell),
            f"Invalid H3 cell: {cell!r}",
            GridError,
        )

    def __repr__(self) -> str:
        return "H3GridProvider()"
