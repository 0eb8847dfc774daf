import numpy as np
import pytest

from rasterhex.raster.transform import GeoTransform
from tests.helpers.fake_raster import NODATA, make_raster


@pytest.fixture
def berlin_raster():
    """30x40 integer raster of 0.01 degree pixels near Berlin."""
    return make_raster(shape=(30, 40), seed=7)


@pytest.fixture
def sparse_raster():
    """Raster that is mostly nodata, with two islands of data."""
    array = np.full((25, 25), NODATA, dtype=np.int64)
    array[2:5, 3:7] = np.arange(12).reshape(3, 4)
    array[18:22, 15:24] = 5
    transform = GeoTransform(0.02, 0.0, 13.0, 0.0, -0.02, 52.5)
    return array, transform


@pytest.fixture
def antimeridian_row():
    """One row of 0.5 degree pixels with centres 179, 179.5, 180, 180.5, 181.

    The sample on the 180 line is nodata.
    """
    array = np.array([[1, 2, NODATA, 4, 5]], dtype=np.int64)
    transform = GeoTransform(0.5, 0.0, 178.75, 0.0, -0.5, 10.25)
    return array, transform
