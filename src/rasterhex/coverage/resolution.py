"""Pick the hex grid resolution that best matches a raster's pixel size.

The pixel footprint ``width * height`` is compared against the area of a
grid cell at every resolution in the requested range. When the raster
centre is known the cell containing it is measured, otherwise the
provider's average cell area is used. Cell areas shrink as the resolution
increases, so scanning from coarse to fine and keeping the first best
candidate gives ties to the coarser resolution.
"""

import logging
import math
from enum import Enum
from typing import Optional, Sequence, Tuple

from rasterhex.contracts import require
from rasterhex.errors import InvalidInput
from rasterhex.grid import HexGridProvider, default_provider

__all__ = ['ResolutionSearchMode', 'select_resolution', 'check_resolution_range']

logger = logging.getLogger(__name__)


class ResolutionSearchMode(str, Enum):
    """How a pixel area is matched against the cell area.

    SMALLER_THAN_PIXEL
        Coarsest resolution whose cells are not larger than a pixel.
    MIN_DIFF
        Smallest absolute difference between cell area and pixel area.
    MIN_RATIO
        Ratio of cell area to pixel area closest to 1.
    """

    SMALLER_THAN_PIXEL = "smaller_than_pixel"
    MIN_DIFF = "min_diff"
    MIN_RATIO = "min_ratio"


def check_resolution_range(resolution_range: Sequence[int],
                           provider: HexGridProvider) -> Tuple[int, int]:
    """Validate an inclusive (low, high) range against the provider's bounds."""
    require(
        len(resolution_range) == 2,
        f"resolution_range must be (low, high), got {resolution_range!r}",
        InvalidInput,
    )
    low, high = (int(r) for r in resolution_range)
    require(low <= high, f"Empty resolution range [{low}, {high}]", InvalidInput)
    require(
        provider.min_resolution <= low and high <= provider.max_resolution,
        f"Resolution range [{low}, {high}] outside the grid's "
        f"[{provider.min_resolution}, {provider.max_resolution}]",
        InvalidInput,
    )
    return low, high


def select_resolution(pixel_size: Tuple[float, float],
                      mode: ResolutionSearchMode,
                      resolution_range: Sequence[int] = (0, 15),
                      provider: Optional[HexGridProvider] = None,
                      center: Optional[Tuple[float, float]] = None) -> int:
    """Select the resolution whose cells best match the pixel footprint.

    Parameters
    ----------
    pixel_size : tuple of float
        (width, height) of one pixel in metres.
    mode : ResolutionSearchMode or str
        Matching rule, see ResolutionSearchMode.
    resolution_range : tuple of int
        Inclusive (low, high) range of candidate resolutions.
    provider : HexGridProvider, optional
        Source of the cell areas. Defaults to H3.
    center : tuple of float, optional
        (lon, lat) where the cell area is measured. Without it the
        provider's average area per resolution is used.

    Returns
    -------
    int
        Selected resolution within ``resolution_range``. SMALLER_THAN_PIXEL
        falls back to the finest resolution when no cell is small enough.

    Raises
    ------
    InvalidInput
        If a pixel dimension is not finite and positive, the range is empty
        or outside the provider's bounds, or the mode is unknown.

    Examples
    --------
    >>> select_resolution((1000.0, 1000.0), ResolutionSearchMode.MIN_DIFF)
    8
    """
    provider = provider or default_provider()
    width, height = (float(v) for v in pixel_size)
    require(
        math.isfinite(width) and math.isfinite(height) and width > 0 and height > 0,
        f"Pixel size must be finite and positive, got ({width}, {height})",
        InvalidInput,
    )
    try:
        mode = ResolutionSearchMode(mode)
    except ValueError as err:
        raise InvalidInput(f"Unknown resolution search mode: {mode!r}") from err
    low, high = check_resolution_range(resolution_range, provider)

    pixel_area = width * height
    if center is None:
        candidates = [(res, provider.average_area(res)) for res in range(low, high + 1)]
    else:
        lon, lat = center
        candidates = [
            (res, provider.cell_area(provider.cell_for(lon, lat, res)))
            for res in range(low, high + 1)
        ]

    if mode is ResolutionSearchMode.SMALLER_THAN_PIXEL:
        fitting = [res for res, area in candidates if area <= pixel_area]
        chosen = fitting[0] if fitting else high
    elif mode is ResolutionSearchMode.MIN_DIFF:
        chosen = min(candidates, key=lambda c: abs(c[1] - pixel_area))[0]
    else:
        chosen = min(candidates, key=lambda c: abs(math.log(c[1] / pixel_area)))[0]

    logger.info(
        "Selected resolution %d (%s) for pixel %.3f x %.3f m (%.1f m2)",
        chosen, mode.value, width, height, pixel_area,
    )
    return chosen
