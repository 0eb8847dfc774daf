import itertools
import random

import pytest

pytestmark = pytest.mark.unit

from rasterhex.contracts import ContractViolation
from rasterhex.coverage.aggregation import MAJORITY, MEAN, SUM
from rasterhex.coverage.cell_coverage import CellCoverage, fold, reduce_coverages
from rasterhex.errors import InvalidInput


class TestBuilding:

    def test_insert_combines_samples(self):
        cov = CellCoverage(3)
        cov.insert("3:0:0", 2, SUM)
        cov.insert("3:0:0", 5, SUM)
        cov.insert("3:1:0", 1, SUM)
        assert cov.to_dict() == {"3:0:0": 7, "3:1:0": 1}
        assert len(cov) == 2
        assert "3:1:0" in cov and "3:9:9" not in cov

    def test_merge_combines_accumulators(self):
        a = fold([("c1", 1.0), ("c2", 3.0)], MEAN, 5)
        b = fold([("c1", 5.0)], MEAN, 5)
        a.merge(b, MEAN)
        assert a["c1"] == (6.0, 2)
        assert a.finalize(MEAN).to_dict() == {"c1": 3.0, "c2": 3.0}

    def test_merge_rejects_other_resolution(self):
        with pytest.raises(ContractViolation, match="resolution 4"):
            CellCoverage(5).merge(CellCoverage(4, {"x": 1}), SUM)

    def test_finalize_returns_new_coverage(self):
        cov = fold([("c", 1), ("c", 1), ("c", 2)], MAJORITY, 2)
        done = cov.finalize(MAJORITY)
        assert done["c"] == 1
        assert cov["c"] != done["c"]

    def test_initial_cells_are_copied(self):
        cells = {"a": 1}
        cov = CellCoverage(1, cells)
        cov.insert("b", 2, SUM)
        assert cells == {"a": 1}

    def test_equality_and_repr(self):
        assert CellCoverage(2, {"a": 1}) == CellCoverage(2, {"a": 1})
        assert CellCoverage(2, {"a": 1}) != CellCoverage(3, {"a": 1})
        assert repr(CellCoverage(2, {"a": 1})) == "CellCoverage(resolution=2, cells=1)"


class TestReduction:

    def test_order_of_partials_does_not_matter(self):
        rng = random.Random(3)
        pairs = [(f"c{rng.randint(0, 9)}", rng.randint(0, 100)) for _ in range(200)]
        chunks = [pairs[i:i + 37] for i in range(0, len(pairs), 37)]
        partials = [fold(chunk, SUM, 7) for chunk in chunks]
        expected = fold(pairs, SUM, 7)
        for perm in itertools.islice(itertools.permutations(partials), 20):
            assert reduce_coverages(perm, SUM, 7) == expected

    def test_reduce_of_nothing_is_empty(self):
        assert len(reduce_coverages([], SUM, 4)) == 0

    def test_reduce_rejects_mixed_resolutions(self):
        with pytest.raises(ContractViolation):
            reduce_coverages([CellCoverage(4), CellCoverage(5, {"x": 1})], SUM, 4)


class TestViews:

    @pytest.fixture
    def coverage(self):
        return CellCoverage(2, {"2:0:0": 1, "2:1:0": 1, "2:0:1": 1, "2:1:1": 1, "2:2:0": 7})

    def test_group_by_value(self, coverage):
        assert coverage.group_by_value() == {
            1: {"2:0:0", "2:1:0", "2:0:1", "2:1:1"},
            7: {"2:2:0"},
        }

    def test_compacted_by_value_merges_complete_siblings(self, coverage, square_grid):
        assert coverage.compacted_by_value(square_grid) == {1: ["1:0:0"], 7: ["2:2:0"]}

    def test_to_resolution_children_inherit_value(self, square_grid):
        refined = CellCoverage(1, {"1:0:0": 4}).to_resolution(2, square_grid)
        assert refined.resolution == 2
        assert refined.to_dict() == {
            "2:0:0": 4, "2:0:1": 4, "2:1:0": 4, "2:1:1": 4,
        }

    def test_to_resolution_same_resolution_copies(self, coverage, square_grid):
        same = coverage.to_resolution(2, square_grid)
        assert same == coverage and same is not coverage

    def test_to_resolution_rejects_coarser(self, coverage, square_grid):
        with pytest.raises(InvalidInput, match="coarser"):
            coverage.to_resolution(1, square_grid)

    def test_to_dataframe_sorted_by_cell(self, coverage):
        df = coverage.to_dataframe()
        assert list(df.columns) == ["cell", "resolution", "value"]
        assert df["cell"].tolist() == sorted(coverage)
        assert (df["resolution"] == 2).all()

    def test_to_dataframe_with_boundary(self, square_grid):
        df = CellCoverage(1, {"1:0:0": 3}).to_dataframe(square_grid, include_boundary=True)
        assert df.loc[0, "boundary"] == [(0.0, 0.0), (90.0, 0.0), (90.0, 90.0), (0.0, 90.0)]

    def test_to_dataframe_boundary_needs_provider(self, coverage):
        with pytest.raises(InvalidInput, match="grid provider"):
            coverage.to_dataframe(include_boundary=True)

    def test_h3_round_trip_through_parent(self, h3_grid):
        cell = h3_grid.cell_for(13.4, 52.5, 6)
        refined = CellCoverage(6, {cell: 1.5}).to_resolution(7, h3_grid)
        assert len(refined) == 7
        assert refined.compacted_by_value(h3_grid) == {1.5: [cell]}
