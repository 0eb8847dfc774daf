"""Raster georeferencing, windowing and partitioning."""

from rasterhex.raster.transform import GeoTransform
from rasterhex.raster.window import RasterWindow, wrap_longitude
from rasterhex.raster.sphere import pixel_size_m
from rasterhex.raster.antimeridian import normalize, normalize_longitude, crosses_antimeridian
from rasterhex.raster.partition import plan_chunks, find_data_boxes

__all__ = [
    'GeoTransform',
    'RasterWindow',
    'wrap_longitude',
    'pixel_size_m',
    'normalize',
    'normalize_longitude',
    'crosses_antimeridian',
    'plan_chunks',
    'find_data_boxes',
]
