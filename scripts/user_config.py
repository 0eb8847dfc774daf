"""rasterhex User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the conversion. Advanced settings are in src/rasterhex/schemas/param.py

Usage:
    python scripts/run_conversion.py scripts/user_config.py raster.npy
    python scripts/run_conversion.py scripts/user_config.py raster.npy --aggregation mean
    python scripts/run_conversion.py scripts/user_config.py raster.npy --chunk-size 256
"""

CONFIG = {
    # ========================================================================
    # GEOREFERENCING
    # ========================================================================
    # GDAL order: (x_origin, pixel_width, row_rotation, y_origin, column_rotation, pixel_height)
    "GEOTRANSFORM": (13.0, 0.01, 0.0, 52.0, 0.0, -0.01),
    "TRANSFORM_ORDER": "gdal",   # "gdal" or "rasterio"
    "AXIS_ORDER": "yx",          # "yx" = (rows, columns); "xy" arrays are transposed
    "NODATA": -9999,             # Samples equal to this are skipped (None = keep all)

    # ========================================================================
    # RESOLUTION
    # ========================================================================
    "RESOLUTION_MODE": "smaller_than_pixel",  # "smaller_than_pixel", "min_diff", "min_ratio"
    "MIN_RESOLUTION": 0,
    "MAX_RESOLUTION": 15,
    "RESOLUTION": None,          # Fixed resolution, skips the search

    # ========================================================================
    # AGGREGATION
    # ========================================================================
    "AGGREGATION": "sum",        # sum, count, min, max, mean, collect, majority, unique

    # ========================================================================
    # PARTITIONING
    # ========================================================================
    "CHUNK_SIZE": None,          # Square tile edge in pixels (None = width / 10, 10..100)
    "CHUNK_COUNT": None,         # Or: number of row bands
    "SCHEDULER": "sequential",   # "sequential", "thread" or "process"
    "MAX_WORKERS": None,         # Pool size (None = CPU count)
    "SKIP_EMPTY": True,          # Trim chunks to the regions holding data
    "SAMPLING": "pixel_center",  # Or "cell_centroid" when cells are smaller than pixels

    # ========================================================================
    # OUTPUT
    # ========================================================================
    "OUTPUT_PATH": None,         # CSV path, e.g. "output/cells.csv"
    "INCLUDE_BOUNDARY": False,
    "LOG_LEVEL": "INFO",
    "LOG_FILE": None,
}
