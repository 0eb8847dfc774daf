"""Raster to hex-grid conversion orchestration.

Coordinates the conversion stages: resolution search, antimeridian
normalization, partitioning, per-chunk enumeration and aggregation on a
scheduler, and the final reduction of partial coverages. Contracts are
checked between stages.
"""

import logging
import numbers
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

import numpy as np
import xarray as xr

from rasterhex.contracts import (
    require,
    assert_georeferenced,
    assert_normalized,
    assert_partitioned,
    assert_single_resolution,
)
from rasterhex.coverage.aggregation import AggregationPolicy, get_policy
from rasterhex.coverage.cell_coverage import CellCoverage, fold, reduce_coverages
from rasterhex.coverage.enumerator import (
    PIXEL_CENTER,
    SAMPLINGS,
    NodataFilter,
    enumerate_cells,
    valid_mask,
)
from rasterhex.coverage.resolution import ResolutionSearchMode, select_resolution
from rasterhex.errors import InvalidInput
from rasterhex.grid import HexGridProvider, default_provider
from rasterhex.pipeline.scheduler import make_scheduler
from rasterhex.raster.antimeridian import normalize, normalize_longitude
from rasterhex.raster.partition import plan_chunks
from rasterhex.raster.sphere import pixel_size_m
from rasterhex.raster.transform import GeoTransform
from rasterhex.raster.window import RasterWindow

if TYPE_CHECKING:
    from rasterhex.schemas import InternalConfig

__all__ = ['Partitioning', 'CoverageConverter', 'convert', 'convert_with_config']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Partitioning:
    """How the raster is cut into chunks and where the chunks run.

    ``InternalPartitionConfig`` from the resolved configuration carries the
    same attributes and can be passed wherever a Partitioning is expected.
    ``sampling`` selects how cells are linked to samples, see
    ``rasterhex.coverage.enumerator.enumerate_cells``.
    """

    chunk_size: Optional[int] = None
    chunk_count: Optional[int] = None
    scheduler: str = "sequential"
    max_workers: Optional[int] = None
    skip_empty: bool = True
    sampling: str = PIXEL_CENTER


def _process_chunk(task) -> CellCoverage:
    """Enumerate and fold one chunk. Module-level so process pools can pickle it."""
    window, resolution, policy, predicate, provider, sampling = task
    samples = enumerate_cells(window, resolution, predicate, provider, sampling)
    return fold(samples, policy, resolution)


class CoverageConverter:
    """Convert one georeferenced raster into hex cell coverages.

    Parameters
    ----------
    raster : np.ndarray or xr.DataArray
        2-D raster (rows, columns). Read, never modified.

    transform : GeoTransform, optional
        Pixel to (lon, lat) map. May be omitted for a DataArray, whose
        transform is then derived from its x/y coordinates.

    predicate : callable, optional
        Sample filter; rejected samples never reach the coverage.

    provider : HexGridProvider, optional
        Hex grid implementation. Defaults to H3.

    x_name, y_name : str
        Coordinate names of a DataArray raster.

    axis_order : {"yx", "xy"}
        Axis order of an array raster; "xy" arrays are transposed to
        (rows, columns) before conversion.

    Examples
    --------
    >>> converter = CoverageConverter(array, GeoTransform(0.01, 0, 13.0, 0, -0.01, 52.0))
    >>> res = converter.nearest_resolution(ResolutionSearchMode.MIN_DIFF)
    >>> coverage = converter.to_coverage(res, "sum")
    """

    def __init__(self, raster, transform: Optional[GeoTransform] = None, predicate=None,
                 provider: Optional[HexGridProvider] = None,
                 x_name: str = "x", y_name: str = "y", axis_order: str = "yx"):
        if isinstance(raster, xr.DataArray):
            if transform is None:
                assert_georeferenced(raster, x_name, y_name)
                transform = GeoTransform.from_coords(raster[x_name].values, raster[y_name].values)
            array = raster.values
        else:
            require(
                axis_order in ("yx", "xy"),
                f"axis_order must be 'yx' or 'xy', got {axis_order!r}",
                InvalidInput,
            )
            array = np.asarray(raster)
            if axis_order == "xy":
                array = array.T
        require(transform is not None, "A GeoTransform is required for array input", InvalidInput)

        self.window = RasterWindow.full(array, transform)
        self.transform = transform
        self.predicate = predicate
        self.provider = provider or default_provider()

    @property
    def shape(self) -> Tuple[int, int]:
        return self.window.shape

    def pixel_size(self) -> Tuple[float, float]:
        """Nominal (width, height) of a pixel in metres."""
        return pixel_size_m(self.transform, self.shape)

    def center(self) -> Tuple[float, float]:
        """(lon, lat) of the raster centre, longitude wrapped into [-180, 180)."""
        rows, cols = self.shape
        lon, lat = self.transform.to_world(cols / 2.0, rows / 2.0)
        return normalize_longitude(lon), float(lat)

    def nearest_resolution(self, mode: ResolutionSearchMode,
                           resolution_range: Sequence[int] = (0, 15)) -> int:
        """Resolution best matching the raster's pixel size under ``mode``.

        Cell areas are measured at the raster centre.
        """
        return select_resolution(
            self.pixel_size(), mode, resolution_range, self.provider, center=self.center()
        )

    def _check_resolution(self, resolution) -> int:
        require(
            isinstance(resolution, numbers.Integral) and not isinstance(resolution, bool)
            and self.provider.min_resolution <= resolution <= self.provider.max_resolution,
            f"Resolution must be an integer in [{self.provider.min_resolution}, "
            f"{self.provider.max_resolution}], got {resolution!r}",
            InvalidInput,
        )
        return int(resolution)

    def plan(self, partitioning=None):
        """Normalize and partition the raster.

        Returns
        -------
        list of RasterWindow
            Disjoint chunks covering every sample kept by the predicate.
        """
        partitioning = partitioning or Partitioning()
        windows = normalize(self.window)
        assert_normalized(windows)

        chunks = []
        for window in windows:
            required = None
            if self.predicate is not None:
                required = valid_mask(window.values, self.predicate)
            trim = required if partitioning.skip_empty else None
            window_chunks = plan_chunks(
                window, partitioning.chunk_size, partitioning.chunk_count, valid=trim
            )
            assert_partitioned(window, window_chunks, required)
            chunks.extend(window_chunks)

        logger.info(
            "Partitioned %dx%d raster into %d window(s), %d chunk(s)",
            self.shape[0], self.shape[1], len(windows), len(chunks),
        )
        return chunks

    def to_coverage(self, resolution: int, policy, partitioning=None) -> CellCoverage:
        """Convert the raster at ``resolution``.

        Parameters
        ----------
        resolution : int
            Resolution of the output cells.
        policy : AggregationPolicy or str
            Aggregation policy or the name of a built-in one.
        partitioning : Partitioning or InternalPartitionConfig, optional
            Chunking and scheduling. Defaults to ``Partitioning()``.

        Returns
        -------
        CellCoverage
            Finalized coverage.

        Raises
        ------
        ChunkFailure
            Wrapping the first error raised by any chunk.
        """
        resolution = self._check_resolution(resolution)
        policy: AggregationPolicy = get_policy(policy)
        partitioning = partitioning or Partitioning()
        require(
            partitioning.sampling in SAMPLINGS,
            f"Unknown sampling {partitioning.sampling!r}, expected one of {list(SAMPLINGS)}",
            InvalidInput,
        )

        chunks = self.plan(partitioning)
        scheduler = make_scheduler(partitioning.scheduler, partitioning.max_workers)
        if partitioning.scheduler == "process":
            chunks = [chunk.detached() for chunk in chunks]
        tasks = [
            (chunk, resolution, policy, self.predicate, self.provider, partitioning.sampling)
            for chunk in chunks
        ]

        partials = dict(scheduler.map(_process_chunk, tasks))
        # reduce in chunk order so float results do not depend on completion order
        coverage = reduce_coverages(
            (partials[index] for index in sorted(partials)), policy, resolution
        )
        assert_single_resolution(coverage, self.provider)

        logger.info(
            "Converted %d chunk(s) on %r: %d cells at resolution %d (%s)",
            len(tasks), scheduler, len(coverage), resolution, policy.name,
        )
        return coverage.finalize(policy)


def convert(raster, transform: Optional[GeoTransform], mode: ResolutionSearchMode,
            policy, partitioning=None, *, predicate=None,
            resolution_range: Sequence[int] = (0, 15), resolution: Optional[int] = None,
            provider: Optional[HexGridProvider] = None) -> CellCoverage:
    """Convert a georeferenced raster into a hex cell coverage.

    Parameters
    ----------
    raster : np.ndarray or xr.DataArray
        2-D raster.
    transform : GeoTransform or None
        Pixel to (lon, lat) map; None for a DataArray with x/y coordinates.
    mode : ResolutionSearchMode or str
        Resolution matching rule. Ignored when ``resolution`` is given.
    policy : AggregationPolicy or str
        How samples sharing a cell are combined.
    partitioning : Partitioning, optional
        Chunking and scheduling.
    predicate : callable, optional
        Sample filter, e.g. ``NodataFilter(nodata)``.
    resolution_range : tuple of int
        Inclusive range searched for the resolution.
    resolution : int, optional
        Fixed resolution, skipping the search.
    provider : HexGridProvider, optional
        Hex grid implementation. Defaults to H3.

    Returns
    -------
    CellCoverage
        Finalized coverage. Nothing is returned when any stage fails.
    """
    converter = CoverageConverter(raster, transform, predicate=predicate, provider=provider)
    if resolution is None:
        resolution = converter.nearest_resolution(mode, resolution_range)
    return converter.to_coverage(resolution, policy, partitioning)


def _transform_from_config(config: "InternalConfig") -> Optional[GeoTransform]:
    coefficients = config.raster.geotransform
    if coefficients is None:
        return None
    if config.raster.transform_order == "gdal":
        return GeoTransform.from_gdal(coefficients)
    return GeoTransform.from_rasterio(coefficients)


def convert_with_config(raster, config: "InternalConfig",
                        transform: Optional[GeoTransform] = None,
                        provider: Optional[HexGridProvider] = None) -> CellCoverage:
    """Run ``convert`` with every setting taken from a resolved InternalConfig.

    An explicit ``transform`` takes precedence over the configured
    geotransform.
    """
    transform = transform or _transform_from_config(config)
    predicate = None
    if config.raster.nodata is not None:
        predicate = NodataFilter(config.raster.nodata)

    converter = CoverageConverter(
        raster, transform, predicate=predicate, provider=provider,
        x_name=config.raster.x_name, y_name=config.raster.y_name,
        axis_order=config.raster.axis_order,
    )
    resolution = config.resolution.fixed
    if resolution is None:
        resolution = converter.nearest_resolution(
            config.resolution.mode,
            (config.resolution.min_resolution, config.resolution.max_resolution),
        )
    return converter.to_coverage(resolution, config.aggregation.policy, config.partition)
