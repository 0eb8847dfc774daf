"""Resolution search, cell enumeration and aggregation into coverages."""

from rasterhex.coverage.resolution import ResolutionSearchMode, select_resolution
from rasterhex.coverage.enumerator import enumerate_cells, NodataFilter, valid_mask
from rasterhex.coverage.aggregation import AggregationPolicy, POLICIES, get_policy
from rasterhex.coverage.cell_coverage import CellCoverage, fold, reduce_coverages

__all__ = [
    'ResolutionSearchMode',
    'select_resolution',
    'enumerate_cells',
    'NodataFilter',
    'valid_mask',
    'AggregationPolicy',
    'POLICIES',
    'get_policy',
    'CellCoverage',
    'fold',
    'reduce_coverages',
]
