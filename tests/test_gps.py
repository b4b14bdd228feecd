import numpy as np
import pytest

from synthmap.errors import BoundsDegenerateError, DegenerateBoundsError
from synthmap.projection.gps import GPSBounds, to_gps, to_gps_array, to_local, to_local_array, world_size


def test_world_size_is_in_meters(bounds):
    width, height = world_size(bounds)
    # 0.1 deg of longitude at ~46.2N is ~7.7 km, 0.06 deg of latitude ~6.7 km
    assert 7000 < width < 8500
    assert 6000 < height < 7200


def test_corners_map_to_frame_corners(bounds):
    width, height = world_size(bounds)
    assert to_local((bounds.min_lon, bounds.max_lat), bounds) == pytest.approx((0.0, 0.0), abs=1e-9)
    assert to_local((bounds.max_lon, bounds.min_lat), bounds) == pytest.approx((width, height))
    assert to_local((bounds.min_lon, bounds.min_lat), bounds) == pytest.approx((0.0, height))


def test_inverse_transform_law(bounds):
    rng = np.random.default_rng(7)
    lons = rng.uniform(bounds.min_lon - 0.01, bounds.max_lon + 0.01, size=50)
    lats = rng.uniform(bounds.min_lat - 0.01, bounds.max_lat + 0.01, size=50)
    for lon, lat in zip(lons, lats):
        back = to_gps(to_local((lon, lat), bounds), bounds)
        assert back == pytest.approx((lon, lat), abs=1e-9)


def test_array_variants_match_scalar(bounds):
    coords = np.array([[6.11, 46.19], [6.15, 46.21], [6.2, 46.24]])
    local = to_local_array(coords, bounds)
    for row, (lon, lat) in zip(local, coords):
        assert tuple(row) == pytest.approx(to_local((lon, lat), bounds))
    assert np.allclose(to_gps_array(local, bounds), coords, atol=1e-9)
    assert to_local_array(np.zeros((0, 2)), bounds).shape == (0, 2)


@pytest.mark.parametrize(
    "b",
    [
        GPSBounds(6.1, 46.2, 6.1, 46.3),
        GPSBounds(6.1, 46.2, 6.2, 46.2),
        GPSBounds(),
    ],
)
def test_degenerate_bounds_raise(b):
    with pytest.raises(DegenerateBoundsError):
        to_local((6.1, 46.2), b)
    with pytest.raises(BoundsDegenerateError):
        to_gps((0.0, 0.0), b)


def test_bounds_from_points_and_contains():
    b = GPSBounds.from_points([(6.1, 46.2), (6.3, 46.1), (6.2, 46.25)])
    assert b.as_list() == [6.1, 46.1, 6.3, 46.25]
    assert b.contains((6.2, 46.2))
    assert not b.contains((6.0, 46.2))
    assert not b.is_degenerate()
    assert GPSBounds().is_empty()
