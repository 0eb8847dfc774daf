import pickle

import numpy as np
import pytest

pytestmark = pytest.mark.unit

from rasterhex.errors import InvalidInput
from rasterhex.raster.transform import GeoTransform
from rasterhex.raster.window import RasterWindow, wrap_longitude


@pytest.fixture
def gt():
    return GeoTransform(1.0, 0.0, 10.0, 0.0, -1.0, 50.0)


@pytest.fixture
def array():
    return np.arange(20).reshape(4, 5)


def test_full_window_covers_array(array, gt):
    w = RasterWindow.full(array, gt)
    assert w.shape == (4, 5)
    assert w.size == 20
    assert w.bounds() == (10.0, 46.0, 15.0, 50.0)


def test_values_is_a_view(array, gt):
    w = RasterWindow(array, gt, 1, 2, 2, 2)
    np.testing.assert_array_equal(w.values, [[7, 8], [12, 13]])
    assert np.shares_memory(w.values, array)


@pytest.mark.parametrize("args", [
    (0, 0, 5, 5),   # too tall
    (0, 4, 1, 2),   # too wide
    (-1, 0, 1, 1),  # negative offset
    (0, 0, 0, 3),   # empty
])
def test_out_of_bounds_window_rejected(array, gt, args):
    with pytest.raises(InvalidInput, match="does not fit"):
        RasterWindow(array, gt, *args)


def test_non_2d_array_rejected(gt):
    with pytest.raises(InvalidInput, match="2-D"):
        RasterWindow(np.zeros((2, 2, 2)), gt)


def test_subwindow_is_relative_and_keeps_offset(array, gt):
    w = RasterWindow(array, gt, 1, 1, 3, 4, lon_offset=-360.0)
    sub = w.subwindow(1, 2, 2, 2)
    assert (sub.row_off, sub.col_off, sub.height, sub.width) == (2, 3, 2, 2)
    assert sub.lon_offset == -360.0
    with pytest.raises(InvalidInput, match="exceeds"):
        w.subwindow(2, 0, 2, 1)


def test_pixel_centres_in_row_major_layout(array, gt):
    w = RasterWindow(array, gt, 0, 0, 2, 3)
    lons, lats = w.pixel_centers()
    np.testing.assert_allclose(lons, [[10.5, 11.5, 12.5], [10.5, 11.5, 12.5]])
    np.testing.assert_allclose(lats, [[49.5, 49.5, 49.5], [48.5, 48.5, 48.5]])


def test_pixel_centres_apply_offset_and_wrap(array):
    gt = GeoTransform(1.0, 0.0, 178.0, 0.0, -1.0, 0.0)
    w = RasterWindow(array, gt, 0, 2, 1, 2, lon_offset=-360.0)
    lons, _ = w.pixel_centers()
    np.testing.assert_allclose(lons, [[-179.5, -178.5]])


def test_bounds_are_not_wrapped():
    gt = GeoTransform(1.0, 0.0, 178.0, 0.0, -1.0, 0.0)
    w = RasterWindow(np.zeros((1, 4)), gt)
    assert w.bounds()[2] == 182.0


@pytest.mark.filterwarnings("error")
def test_detached_window_keeps_world_coordinates(array, gt):
    w = RasterWindow(array, gt, 1, 2, 2, 3, lon_offset=360.0)
    d = w.detached()
    assert (d.row_off, d.col_off) == (0, 0)
    assert d.array.shape == (2, 3)
    assert not np.shares_memory(d.array, array)
    np.testing.assert_array_equal(d.values, w.values)
    for got, expected in zip(d.pixel_centers(), w.pixel_centers()):
        np.testing.assert_allclose(got, expected)
    # small enough to ship to a worker process
    assert pickle.loads(pickle.dumps(d)).shape == (2, 3)


@pytest.mark.parametrize("lon, expected", [
    (180.0, -180.0), (-180.0, -180.0), (190.0, -170.0), (-190.0, 170.0), (0.0, 0.0), (540.0, -180.0),
])
def test_wrap_longitude(lon, expected):
    assert wrap_longitude(lon) == pytest.approx(expected)
