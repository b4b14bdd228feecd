import json

import pytest

from synthmap.model.model import Model
from synthmap.projection.gps import GPSBounds


@pytest.fixture
def bounds():
    return GPSBounds(min_lon=6.10, min_lat=46.18, max_lon=6.20, max_lat=46.24)


@pytest.fixture
def small_model():
    """Three intersections in a row, one road between the first two, one building."""
    m = Model(name="small")
    a = m.create_intersection((0.0, 0.0))
    b = m.create_intersection((100.0, 0.0))
    m.create_intersection((100.0, 100.0))
    m.create_road(a, b)
    m.create_building((200.0, 200.0))
    return m


def square(lon, lat, half=0.002):
    return [
        [lon - half, lat - half],
        [lon + half, lat - half],
        [lon + half, lat + half],
        [lon - half, lat + half],
        [lon - half, lat - half],
    ]


@pytest.fixture
def write_geojson(tmp_path):
    def _write(doc, name="regions.geojson"):
        path = tmp_path / name
        path.write_text(json.dumps(doc), encoding="utf-8")
        return path

    return _write
