import numpy as np
import pytest

pytestmark = pytest.mark.unit

from rasterhex.contracts import assert_partitioned
from rasterhex.errors import InvalidInput
from rasterhex.raster.partition import (
    band_window,
    default_chunk_size,
    find_data_boxes,
    plan_chunks,
    tile_window,
)
from rasterhex.raster.transform import GeoTransform
from rasterhex.raster.window import RasterWindow


def _window(shape):
    return RasterWindow(np.zeros(shape), GeoTransform(0.1, 0.0, 0.0, 0.0, -0.1, 10.0))


class TestTiling:

    def test_tiles_clip_at_edges(self):
        w = _window((5, 7))
        tiles = tile_window(w, 3)
        assert [(t.row_off, t.col_off, t.height, t.width) for t in tiles] == [
            (0, 0, 3, 3), (0, 3, 3, 3), (0, 6, 3, 1),
            (3, 0, 2, 3), (3, 3, 2, 3), (3, 6, 2, 1),
        ]
        assert_partitioned(w, tiles)

    def test_bands_have_near_equal_height(self):
        w = _window((10, 4))
        bands = band_window(w, 3)
        assert [b.height for b in bands] == [3, 4, 3]
        assert all(b.width == 4 for b in bands)
        assert_partitioned(w, bands)

    def test_more_bands_than_rows(self):
        bands = band_window(_window((2, 4)), 5)
        assert len(bands) == 2

    @pytest.mark.parametrize("width, expected", [(5, 10), (250, 25), (5000, 100)])
    def test_default_chunk_size(self, width, expected):
        assert default_chunk_size(_window((1, width))) == expected

    def test_size_and_count_are_exclusive(self):
        with pytest.raises(InvalidInput, match="mutually exclusive"):
            plan_chunks(_window((4, 4)), chunk_size=2, chunk_count=2)

    def test_non_positive_chunk_size_rejected(self):
        with pytest.raises(InvalidInput, match="chunk_size"):
            plan_chunks(_window((4, 4)), chunk_size=0)

    def test_partition_of_offset_window_stays_inside(self):
        parent = _window((8, 8))
        w = parent.subwindow(2, 3, 5, 4)
        chunks = plan_chunks(w, chunk_size=2)
        assert_partitioned(w, chunks)
        assert all(c.lon_offset == w.lon_offset for c in chunks)


class TestDataBoxes:

    def test_empty_mask_has_no_boxes(self):
        assert find_data_boxes(np.zeros((3, 3), dtype=bool)) == []

    def test_full_mask_is_one_box(self):
        assert find_data_boxes(np.ones((3, 4), dtype=bool)) == [(0, 3, 0, 4)]

    def test_separated_clusters(self):
        mask = np.zeros((6, 6), dtype=bool)
        mask[0:2, 0:2] = True
        mask[4:6, 3:5] = True
        assert find_data_boxes(mask) == [(0, 2, 0, 2), (4, 6, 3, 5)]

    def test_boxes_tightened_per_column_run(self):
        mask = np.zeros((4, 5), dtype=bool)
        mask[0, 0] = True
        mask[3, 0] = True
        mask[1:3, 3] = True
        boxes = find_data_boxes(mask)
        assert boxes == [(0, 1, 0, 1), (3, 4, 0, 1), (1, 3, 3, 4)]

    def test_boxes_cover_all_data_without_overlap(self):
        rng = np.random.default_rng(42)
        mask = rng.random((20, 30)) > 0.8
        hits = np.zeros(mask.shape, dtype=int)
        for r0, r1, c0, c1 in find_data_boxes(mask):
            hits[r0:r1, c0:c1] += 1
        assert hits.max() <= 1
        assert np.all(hits[mask] == 1)

    def test_plan_chunks_skips_empty_regions(self):
        w = _window((20, 20))
        valid = np.zeros((20, 20), dtype=bool)
        valid[2:4, 15:18] = True
        chunks = plan_chunks(w, chunk_size=10, valid=valid)
        assert [(c.row_off, c.col_off, c.height, c.width) for c in chunks] == [(2, 15, 2, 3)]
        assert_partitioned(w, chunks, required=valid)
