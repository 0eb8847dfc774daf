"""Partition raster windows into independent chunks.

Chunks are disjoint sub-windows that can be converted on their own. When
a sample filter is known, chunks are additionally shrunk to the boxes that
actually contain valid samples, which avoids hex lookups over large
nodata regions of sparse rasters.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from rasterhex.contracts import require
from rasterhex.errors import InvalidInput
from rasterhex.raster.window import RasterWindow

__all__ = ['plan_chunks', 'tile_window', 'band_window', 'find_data_boxes', 'default_chunk_size']

logger = logging.getLogger(__name__)

# (row_start, row_stop, col_start, col_stop), stops exclusive
Box = Tuple[int, int, int, int]


def default_chunk_size(window: RasterWindow) -> int:
    """Tile edge length used when nothing is configured."""
    return min(max(window.width // 10, 10), 100)


def tile_window(window: RasterWindow, chunk_size: int) -> List[RasterWindow]:
    """Cut ``window`` into square tiles (row-major), clipped at the edges."""
    require(chunk_size >= 1, f"chunk_size must be >= 1, got {chunk_size}", InvalidInput)
    tiles = []
    for r in range(0, window.height, chunk_size):
        for c in range(0, window.width, chunk_size):
            tiles.append(window.subwindow(
                r, c,
                min(chunk_size, window.height - r),
                min(chunk_size, window.width - c),
            ))
    return tiles


def band_window(window: RasterWindow, chunk_count: int) -> List[RasterWindow]:
    """Cut ``window`` into at most ``chunk_count`` row bands of near-equal height."""
    require(chunk_count >= 1, f"chunk_count must be >= 1, got {chunk_count}", InvalidInput)
    n = min(chunk_count, window.height)
    edges = np.linspace(0, window.height, n + 1).round().astype(int)
    return [
        window.subwindow(int(start), 0, int(stop - start), window.width)
        for start, stop in zip(edges[:-1], edges[1:])
        if stop > start
    ]


def _continuous_runs(flags: np.ndarray) -> List[Tuple[int, int]]:
    """Half-open (start, stop) runs of True values in a 1-D boolean array."""
    padded = np.concatenate(([False], flags.astype(bool), [False]))
    changes = np.flatnonzero(padded[1:] != padded[:-1])
    return list(zip(changes[0::2].tolist(), changes[1::2].tolist()))


def find_data_boxes(mask: np.ndarray) -> List[Box]:
    """Find disjoint boxes that together contain every True sample of ``mask``.

    Rows without data split the mask into bands, columns without data split
    each band, and a final pass over rows tightens each box. This is far
    from a minimal cover and often merges separate clusters into one box,
    but it is sufficient to skip large empty regions.

    Parameters
    ----------
    mask : np.ndarray of bool
        2-D validity mask.

    Returns
    -------
    list of tuple
        (row_start, row_stop, col_start, col_stop) boxes, stops exclusive.
    """
    boxes = []
    for r0, r1 in _continuous_runs(mask.any(axis=1)):
        band = mask[r0:r1]
        for c0, c1 in _continuous_runs(band.any(axis=0)):
            for rr0, rr1 in _continuous_runs(band[:, c0:c1].any(axis=1)):
                boxes.append((r0 + rr0, r0 + rr1, c0, c1))
    return boxes


def plan_chunks(window: RasterWindow, chunk_size: Optional[int] = None,
                chunk_count: Optional[int] = None,
                valid: Optional[np.ndarray] = None) -> List[RasterWindow]:
    """Partition ``window`` into disjoint chunks.

    Parameters
    ----------
    window : RasterWindow
        Window to partition (already antimeridian-normalized).
    chunk_size : int, optional
        Edge length of square tiles.
    chunk_count : int, optional
        Number of row bands. Mutually exclusive with ``chunk_size``.
    valid : np.ndarray of bool, optional
        Validity mask of the window's samples. When given, each chunk is
        reduced to the boxes holding valid samples and chunks without any
        are dropped.

    Returns
    -------
    list of RasterWindow
        Chunks in row-major order.
    """
    require(
        chunk_size is None or chunk_count is None,
        "chunk_size and chunk_count are mutually exclusive",
        InvalidInput,
    )
    if chunk_count is not None:
        chunks = band_window(window, chunk_count)
    else:
        if chunk_size is None:
            chunk_size = default_chunk_size(window)
        chunks = tile_window(window, chunk_size)

    if valid is None:
        return chunks

    trimmed = []
    for chunk in chunks:
        r0 = chunk.row_off - window.row_off
        c0 = chunk.col_off - window.col_off
        chunk_mask = valid[r0:r0 + chunk.height, c0:c0 + chunk.width]
        for br0, br1, bc0, bc1 in find_data_boxes(chunk_mask):
            trimmed.append(chunk.subwindow(br0, bc0, br1 - br0, bc1 - bc0))
    logger.debug(
        "Trimmed %d chunks to %d boxes containing valid samples",
        len(chunks), len(trimmed),
    )
    return trimmed
