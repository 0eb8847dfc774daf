"""Deterministic stand-ins for a hex grid provider.

SquareGridProvider tiles the globe with square lat/lon cells that halve
at every resolution, which makes expected cells easy to compute by hand.
Both classes live at module level so process pools can pickle them.
"""

import math

from rasterhex.errors import GridError

METERS_PER_DEGREE = 111_320.0


class SquareGridProvider:
    """Square cells of ``180 / 2**res`` degrees, ids ``"res:col:row"``."""

    min_resolution = 0
    max_resolution = 15

    @staticmethod
    def cell_size(resolution):
        return 180.0 / 2 ** resolution

    def _check_resolution(self, resolution):
        if not (self.min_resolution <= resolution <= self.max_resolution):
            raise GridError(f"bad resolution {resolution}")

    def cell_for(self, lon, lat, resolution):
        self._check_resolution(resolution)
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise GridError(f"non-finite coordinate ({lon}, {lat})")
        size = self.cell_size(resolution)
        return f"{resolution}:{math.floor(lon / size)}:{math.floor(lat / size)}"

    def average_edge_length(self, resolution):
        self._check_resolution(resolution)
        return self.cell_size(resolution) * METERS_PER_DEGREE

    def average_area(self, resolution):
        return self.average_edge_length(resolution) ** 2

    def cell_area(self, cell):
        return self.average_area(self._parse(cell)[0])

    def centroid(self, cell):
        res, col, row = self._parse(cell)
        size = self.cell_size(res)
        return (col + 0.5) * size, (row + 0.5) * size

    def cells_in_box(self, west, south, east, north, resolution):
        self._check_resolution(resolution)
        size = self.cell_size(resolution)
        cols = range(math.ceil(west / size - 0.5), math.floor(east / size - 0.5) + 1)
        rows = range(math.ceil(south / size - 0.5), math.floor(north / size - 0.5) + 1)
        return sorted(f"{resolution}:{c}:{r}" for c in cols for r in rows)

    def _parse(self, cell):
        res, col, row = (int(p) for p in cell.split(":"))
        return res, col, row

    def boundary(self, cell):
        res, col, row = self._parse(cell)
        size = self.cell_size(res)
        west, south = col * size, row * size
        return [
            (west, south), (west + size, south),
            (west + size, south + size), (west, south + size),
        ]

    def children(self, cell, resolution):
        res, col, row = self._parse(cell)
        if resolution < res:
            raise GridError(f"{cell} has no children at {resolution}")
        factor = 2 ** (resolution - res)
        return sorted(
            f"{resolution}:{col * factor + i}:{row * factor + j}"
            for i in range(factor) for j in range(factor)
        )

    def resolution_of(self, cell):
        return self._parse(cell)[0]

    def compact(self, cells):
        cells = set(cells)
        while True:
            by_parent = {}
            for cell in cells:
                res, col, row = self._parse(cell)
                if res == 0:
                    continue
                parent = f"{res - 1}:{col // 2}:{row // 2}"
                by_parent.setdefault(parent, set()).add(cell)
            complete = {p: kids for p, kids in by_parent.items() if len(kids) == 4}
            if not complete:
                return sorted(cells)
            for parent, kids in complete.items():
                cells -= kids
                cells.add(parent)


class FailingGridProvider(SquareGridProvider):
    """Square grid that rejects every point east of ``fail_east_of``."""

    def __init__(self, fail_east_of=0.0):
        self.fail_east_of = fail_east_of

    def cell_for(self, lon, lat, resolution):
        if lon > self.fail_east_of:
            raise GridError(f"refusing lon={lon}")
        return super().cell_for(lon, lat, resolution)
