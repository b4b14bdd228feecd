import pytest

from synthmap.errors import RingConstructionError
from synthmap.regions.rings import build_ring, polygon_from_rings


def test_open_ring_is_closed():
    ring = build_ring([(0, 0), (10, 0), (10, 10)])
    coords = list(ring.coords)
    assert coords[0] == coords[-1]
    assert len(coords) == 4


def test_consecutive_duplicates_collapse():
    ring = build_ring([(0, 0), (0, 0), (10, 0), (10, 10), (10, 10), (0, 0)])
    assert list(ring.coords) == [(0, 0), (10, 0), (10, 10), (0, 0)]


@pytest.mark.parametrize(
    "pts",
    [
        [],
        [(0, 0)],
        [(0, 0), (1, 1), (0, 0)],
        [(0, 0), (1, 1), (1, 1), (0, 0)],
    ],
)
def test_too_few_points(pts):
    with pytest.raises(RingConstructionError):
        build_ring(pts)


def test_repeated_interior_point_rejected():
    with pytest.raises(RingConstructionError, match="repeat"):
        build_ring([(0, 0), (10, 0), (5, 5), (10, 10), (5, 5), (0, 10), (0, 0)])


def test_bowtie_rejected():
    with pytest.raises(RingConstructionError, match="self_intersecting"):
        build_ring([(0, 0), (10, 10), (10, 0), (0, 10), (0, 0)])


def test_polygon_with_hole_and_offset():
    shell = build_ring([(0, 0), (100, 0), (100, 100), (0, 100)])
    hole = build_ring([(40, 40), (60, 40), (60, 60), (40, 60)])
    poly = polygon_from_rings([shell, hole], offset=(-60.0, 140.0))
    assert len(poly.interiors) == 1
    assert poly.area == pytest.approx(100 * 100 - 20 * 20)
    assert poly.bounds == pytest.approx((-60.0, 140.0, 40.0, 240.0))


def test_polygon_needs_a_ring():
    with pytest.raises(RingConstructionError):
        polygon_from_rings([])
