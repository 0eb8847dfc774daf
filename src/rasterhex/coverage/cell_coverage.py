"""CellCoverage: the result of a conversion, and the folds that build it.

A coverage maps hex cell ids to aggregated values at one resolution. It
only ever grows: samples are inserted, partial coverages are merged, and
``finalize`` produces a new coverage rather than rewriting this one.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

import pandas as pd

from rasterhex.contracts import require
from rasterhex.coverage.aggregation import AggregationPolicy
from rasterhex.errors import InvalidInput

__all__ = ['CellCoverage', 'fold', 'reduce_coverages']

logger = logging.getLogger(__name__)


class CellCoverage:
    """Mapping of hex cell id to aggregated value at a single resolution.

    Parameters
    ----------
    resolution : int
        Resolution shared by every cell of the coverage.

    cells : dict, optional
        Initial content. Copied.

    Examples
    --------
    >>> from rasterhex.coverage.aggregation import SUM
    >>> cov = CellCoverage(9)
    >>> cov.insert("8928308280fffff", 2, SUM)
    >>> cov.insert("8928308280fffff", 3, SUM)
    >>> cov["8928308280fffff"]
    5
    """

    def __init__(self, resolution: int, cells: Optional[Dict[str, Any]] = None):
        self.resolution = int(resolution)
        self._cells: Dict[str, Any] = dict(cells or {})

    def insert(self, cell: str, sample, policy: AggregationPolicy) -> None:
        """Add one raw sample to ``cell``."""
        value = policy.lift(sample)
        if cell in self._cells:
            self._cells[cell] = policy.combine(self._cells[cell], value)
        else:
            self._cells[cell] = value

    def merge(self, other: "CellCoverage", policy: AggregationPolicy) -> None:
        """Merge another coverage of accumulated values into this one."""
        require(
            other.resolution == self.resolution,
            f"Cannot merge coverage at resolution {other.resolution} "
            f"into coverage at resolution {self.resolution}",
        )
        for cell, value in other._cells.items():
            if cell in self._cells:
                self._cells[cell] = policy.combine(self._cells[cell], value)
            else:
                self._cells[cell] = value

    def finalize(self, policy: AggregationPolicy) -> "CellCoverage":
        """New coverage with ``policy.finalize`` applied to every value."""
        return CellCoverage(
            self.resolution,
            {cell: policy.finalize(value) for cell, value in self._cells.items()},
        )

    def items(self) -> Iterator[Tuple[str, Any]]:
        return iter(self._cells.items())

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._cells)

    def group_by_value(self) -> Dict[Any, Set[str]]:
        """Invert the coverage: value -> set of cells holding it.

        Values must be hashable (not the case for ``collect`` before it is
        finalized into something hashable).
        """
        groups: Dict[Any, Set[str]] = defaultdict(set)
        for cell, value in self._cells.items():
            groups[value].add(cell)
        return dict(groups)

    def compacted_by_value(self, provider) -> Dict[Any, List[str]]:
        """Like group_by_value, with each cell set compacted by ``provider``.

        Complete groups of sibling cells sharing a value are replaced by
        their parent, so the lists mix resolutions.
        """
        return {
            value: provider.compact(cells)
            for value, cells in self.group_by_value().items()
        }

    def to_resolution(self, resolution: int, provider) -> "CellCoverage":
        """Uncompact to a finer ``resolution``; children inherit the parent value."""
        require(
            resolution >= self.resolution,
            f"Cannot refine coverage at resolution {self.resolution} "
            f"to coarser resolution {resolution}",
            InvalidInput,
        )
        if resolution == self.resolution:
            return CellCoverage(self.resolution, self._cells)
        refined = {}
        for cell, value in self._cells.items():
            for child in provider.children(cell, resolution):
                refined[child] = value
        return CellCoverage(resolution, refined)

    def to_dataframe(self, provider=None, include_boundary: bool = False) -> pd.DataFrame:
        """Tabular form, one row per cell, sorted by cell id.

        Parameters
        ----------
        provider : HexGridProvider, optional
            Required when ``include_boundary`` is set.
        include_boundary : bool
            Add a ``boundary`` column holding each cell's (lon, lat) ring.

        Returns
        -------
        pd.DataFrame
            Columns ``cell``, ``resolution``, ``value`` (and ``boundary``).
        """
        cells = sorted(self._cells)
        df = pd.DataFrame({
            "cell": cells,
            "resolution": [self.resolution] * len(cells),
            "value": [self._cells[c] for c in cells],
        })
        if include_boundary:
            require(
                provider is not None,
                "A grid provider is required to export cell boundaries",
                InvalidInput,
            )
            df["boundary"] = [provider.boundary(c) for c in cells]
        return df

    def __getitem__(self, cell: str):
        return self._cells[cell]

    def __contains__(self, cell) -> bool:
        return cell in self._cells

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CellCoverage):
            return NotImplemented
        return self.resolution == other.resolution and self._cells == other._cells

    def __repr__(self) -> str:
        return f"CellCoverage(resolution={self.resolution}, cells={len(self._cells)})"


def fold(pairs: Iterable[Tuple[str, Any]], policy: AggregationPolicy,
         resolution: int) -> CellCoverage:
    """Aggregate ``(cell, sample)`` pairs into a new coverage."""
    coverage = CellCoverage(resolution)
    for cell, sample in pairs:
        coverage.insert(cell, sample, policy)
    return coverage


def reduce_coverages(partials: Iterable[CellCoverage], policy: AggregationPolicy,
                     resolution: int) -> CellCoverage:
    """Merge partial coverages into one, in the order given.

    Raises
    ------
    ContractViolation
        If a partial coverage has a different resolution.
    """
    result = CellCoverage(resolution)
    count = 0
    for partial in partials:
        result.merge(partial, policy)
        count += 1
    logger.debug("Reduced %d partial coverages to %d cells", count, len(result))
    return result
