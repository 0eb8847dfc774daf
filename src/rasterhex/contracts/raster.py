"""Raster stage contracts.

Enforces the guarantees between partitioning stages: labelled input is
georeferenced, normalized windows stay inside [-180, 180], and chunks cover
their parent window without overlap.
"""

import numpy as np
import xarray as xr
from rasterhex.contracts.base import require


def assert_georeferenced(da: xr.DataArray, x_name: str, y_name: str) -> None:
    """Enforce the georeferencing contract for labelled raster input.

    Parameters
    ----------
    da : xr.DataArray
        Raster handed to the converter.

    x_name, y_name : str
        Names of the longitude and latitude coordinates (from config).

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        x_name in da.coords,
        f"Raster contract violated: missing '{x_name}' coordinate"
    )
    require(
        y_name in da.coords,
        f"Raster contract violated: missing '{y_name}' coordinate"
    )
    require(
        da.ndim == 2,
        f"Raster contract violated: raster has {da.ndim} dims, expected 2"
    )
    require(
        da.dims == (y_name, x_name),
        f"Raster contract violated: dims are {da.dims}, expected ({y_name!r}, {x_name!r})"
    )


def assert_normalized(windows) -> None:
    """Enforce the antimeridian contract: every window lies in [-180, 180]."""
    require(
        1 <= len(windows) <= 2,
        f"Antimeridian contract violated: {len(windows)} windows, expected 1 or 2"
    )
    for window in windows:
        west, _, east, _ = window.bounds()
        # half a pixel of slack: samples are assigned by their centre
        half_pixel = abs(window.transform.pixel_size[0]) / 2.0 + 1e-9
        require(
            west >= -180.0 - half_pixel and east <= 180.0 + half_pixel,
            f"Antimeridian contract violated: window spans [{west}, {east}]"
        )


def assert_partitioned(window, chunks, required: np.ndarray = None) -> None:
    """Enforce the partition contract.

    Chunks must lie inside ``window`` and must not overlap. Every sample
    flagged in ``required`` (all samples when None) must be covered by
    exactly one chunk.

    Parameters
    ----------
    window : RasterWindow
        The window that was partitioned.

    chunks : sequence of RasterWindow
        Result of the partitioning.

    required : np.ndarray of bool, optional
        Mask (window shape) of samples that must be covered.
    """
    hits = np.zeros((window.height, window.width), dtype=np.int32)
    for chunk in chunks:
        r0 = chunk.row_off - window.row_off
        c0 = chunk.col_off - window.col_off
        require(
            r0 >= 0 and c0 >= 0
            and r0 + chunk.height <= window.height
            and c0 + chunk.width <= window.width,
            f"Partition contract violated: chunk at ({chunk.row_off}, {chunk.col_off}) "
            f"size {chunk.height}x{chunk.width} outside its window"
        )
        hits[r0:r0 + chunk.height, c0:c0 + chunk.width] += 1

    require(
        hits.max(initial=0) <= 1,
        "Partition contract violated: chunks overlap"
    )
    if required is None:
        required = np.ones_like(hits, dtype=bool)
    missing = int(np.count_nonzero(required & (hits == 0)))
    require(
        missing == 0,
        f"Partition contract violated: {missing} samples not covered by any chunk"
    )
