"""Hex grid capability interface.

The converter never computes hex grid geometry itself. Anything that can
map points to cells and back, tile a lon/lat box, report cell sizes per
resolution and answer boundary/children/compaction queries can be plugged
in.
"""

from typing import Iterable, List, Protocol, Tuple, runtime_checkable


@runtime_checkable
class HexGridProvider(Protocol):
    """Capabilities the converter consumes from a hierarchical hex grid.

    Implementations raise ``rasterhex.errors.GridError`` for resolutions
    outside ``[min_resolution, max_resolution]``, non-finite or out of range
    coordinates and invalid cell ids.
    """

    min_resolution: int
    max_resolution: int

    def cell_for(self, lon: float, lat: float, resolution: int) -> str:
        """Cell containing the point at ``resolution``."""
        ...

    def average_edge_length(self, resolution: int) -> float:
        """Average cell edge length at ``resolution`` in metres."""
        ...

    def average_area(self, resolution: int) -> float:
        """Average cell area at ``resolution`` in square metres."""
        ...

    def cell_area(self, cell: str) -> float:
        """Area of ``cell`` in square metres."""
        ...

    def centroid(self, cell: str) -> Tuple[float, float]:
        """Centre of ``cell`` as (lon, lat)."""
        ...

    def cells_in_box(self, west: float, south: float, east: float, north: float,
                     resolution: int) -> List[str]:
        """Cells at ``resolution`` whose centroids fall inside the lon/lat box."""
        ...

    def boundary(self, cell: str) -> List[Tuple[float, float]]:
        """Boundary ring of ``cell`` as (lon, lat) pairs."""
        ...

    def children(self, cell: str, resolution: int) -> List[str]:
        """Descendants of ``cell`` at the finer ``resolution``."""
        ...

    def resolution_of(self, cell: str) -> int:
        """Resolution encoded in ``cell``."""
        ...

    def compact(self, cells: Iterable[str]) -> List[str]:
        """Replace complete sets of siblings by their parents, recursively."""
        ...
