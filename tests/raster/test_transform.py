import math
import pickle

import numpy as np
import pytest

pytestmark = pytest.mark.unit

from rasterhex.errors import InvalidInput
from rasterhex.raster.transform import GeoTransform


class TestConstruction:

    def test_gdal_and_rasterio_orderings_agree(self):
        gdal = GeoTransform.from_gdal((13.0, 0.01, 0.0, 52.0, 0.0, -0.01))
        rio = GeoTransform.from_rasterio((0.01, 0.0, 13.0, 0.0, -0.01, 52.0))
        assert gdal == rio
        assert hash(gdal) == hash(rio)
        assert gdal.to_gdal() == (13.0, 0.01, 0.0, 52.0, 0.0, -0.01)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_coefficient_rejected(self, bad):
        with pytest.raises(InvalidInput, match="finite"):
            GeoTransform(0.01, 0.0, bad, 0.0, -0.01, 52.0)

    def test_degenerate_transform_rejected(self):
        """Zero pixel height makes the map non-invertible."""
        with pytest.raises(InvalidInput, match="not invertible"):
            GeoTransform(0.01, 0.0, 13.0, 0.0, 0.0, 52.0)

    def test_wrong_coefficient_count_rejected(self):
        with pytest.raises(InvalidInput, match="6 coefficients"):
            GeoTransform.from_gdal((13.0, 0.01, 0.0, 52.0))

    def test_invalid_input_is_a_value_error(self):
        with pytest.raises(ValueError):
            GeoTransform(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    def test_immutable(self):
        gt = GeoTransform(1.0, 0.0, 0.0, 0.0, -1.0, 0.0)
        with pytest.raises(AttributeError):
            gt.foo = 1

    def test_from_coords_uses_pixel_centres(self):
        x = np.array([13.005, 13.015, 13.025])
        y = np.array([51.995, 51.985])
        gt = GeoTransform.from_coords(x, y)
        a, b, c, d, e, f = gt.coefficients
        assert a == pytest.approx(0.01)
        assert e == pytest.approx(-0.01)
        assert c == pytest.approx(13.0)
        assert f == pytest.approx(52.0)
        assert b == 0.0 and d == 0.0

    def test_from_coords_rejects_uneven_spacing(self):
        with pytest.raises(InvalidInput, match="evenly spaced"):
            GeoTransform.from_coords(np.array([0.0, 1.0, 3.0]), np.array([0.0, 1.0]))


class TestMapping:

    def test_to_world_of_origin_and_corner(self):
        gt = GeoTransform(0.5, 0.0, 100.0, 0.0, -0.25, 10.0)
        assert gt.to_world(0, 0) == (100.0, 10.0)
        x, y = gt.to_world(4, 2)
        assert x == pytest.approx(102.0)
        assert y == pytest.approx(9.5)

    def test_to_pixel_inverts_to_world_on_arrays(self):
        gt = GeoTransform(0.3, 0.05, -20.0, 0.02, -0.4, 60.0)
        cols, rows = np.meshgrid(np.arange(5.0), np.arange(3.0))
        xs, ys = gt.to_world(cols, rows)
        c2, r2 = gt.to_pixel(xs, ys)
        np.testing.assert_allclose(c2, cols, atol=1e-9)
        np.testing.assert_allclose(r2, rows, atol=1e-9)

    def test_pixel_size_of_rotated_transform(self):
        gt = GeoTransform(0.3, 0.0, 0.0, 0.4, -1.0, 0.0)
        assert gt.pixel_size == pytest.approx((0.5, 1.0))

    def test_pickle_round_trip(self):
        gt = GeoTransform(0.01, 0.0, 13.0, 0.0, -0.01, 52.0)
        assert pickle.loads(pickle.dumps(gt)) == gt

    @pytest.mark.filterwarnings("error")
    def test_mapping_emits_no_warnings(self):
        gt = GeoTransform(0.01, 0.0, 13.0, 0.0, -0.01, 52.0)
        xs, ys = gt.to_world(np.arange(3.0), np.zeros(3))
        cols, rows = gt.to_pixel(xs, ys)
        np.testing.assert_allclose(cols, [0.0, 1.0, 2.0], atol=1e-9)
        np.testing.assert_allclose(rows, 0.0, atol=1e-9)
