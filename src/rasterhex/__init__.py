"""rasterhex: convert georeferenced rasters into hexagonal grid coverages.

A 2-D raster with an affine geotransform (longitude/latitude degrees) is
turned into a mapping of H3 cells to aggregated sample values. The pixel
size selects the resolution, rasters crossing the antimeridian are split,
and the work is partitioned into chunks that may run on a thread or
process pool.

Example
-------
>>> import numpy as np
>>> from rasterhex import GeoTransform, convert
>>> gt = GeoTransform.from_gdal((13.0, 0.01, 0.0, 52.0, 0.0, -0.01))
>>> cov = convert(np.array([[1, 2], [3, 4]]), gt, "min_diff", "sum")
"""

__version__ = "0.1.0"

from rasterhex.errors import (
    RasterHexError,
    InvalidInput,
    GridError,
    AggregationConflict,
    ChunkFailure,
)
from rasterhex.raster import GeoTransform, RasterWindow
from rasterhex.grid import HexGridProvider, H3GridProvider
from rasterhex.coverage import (
    ResolutionSearchMode,
    select_resolution,
    AggregationPolicy,
    CellCoverage,
    NodataFilter,
    get_policy,
)
from rasterhex.pipeline import Partitioning, CoverageConverter, convert, convert_with_config

__all__ = [
    '__version__',
    'RasterHexError',
    'InvalidInput',
    'GridError',
    'AggregationConflict',
    'ChunkFailure',
    'GeoTransform',
    'RasterWindow',
    'HexGridProvider',
    'H3GridProvider',
    'ResolutionSearchMode',
    'select_resolution',
    'AggregationPolicy',
    'CellCoverage',
    'NodataFilter',
    'get_policy',
    'Partitioning',
    'CoverageConverter',
    'convert',
    'convert_with_config',
]
