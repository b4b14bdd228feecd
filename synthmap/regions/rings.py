from __future__ import annotations

from typing import List, Sequence, Tuple

from shapely import affinity
from shapely.geometry import LinearRing, Polygon

from synthmap.errors import RingConstructionError

Pt = Tuple[float, float]


def _dedupe_consecutive(points: Sequence[Pt]) -> List[Pt]:
    out: List[Pt] = []
    for p in points:
        pt = (float(p[0]), float(p[1]))
        if out and out[-1] == pt:
            continue
        out.append(pt)
    return out


def build_ring(points: Sequence[Pt]) -> LinearRing:
    pts = _dedupe_consecutive(points)
    if len(pts) > 1 and pts[0] != pts[-1]:
        pts.append(pts[0])
    interior = pts[:-1]
    if len(interior) < 3:
        raise RingConstructionError(f"ring_too_few_points:{len(interior)}")
    if len(set(interior)) != len(interior):
        raise RingConstructionError("ring_repeat_points")
    ring = LinearRing(pts)
    if not ring.is_simple:
        raise RingConstructionError("ring_self_intersecting")
    return ring


def polygon_from_rings(rings: Sequence[LinearRing], offset: Pt = (0.0, 0.0)) -> Polygon:
    """First ring is the shell, the rest are holes. ``offset`` is applied afterwards."""
    if not rings:
        raise RingConstructionError("polygon_without_rings")
    poly = Polygon(rings[0], [list(r.coords) for r in rings[1:]])
    dx, dy = offset
    if dx or dy:
        poly = affinity.translate(poly, xoff=dx, yoff=dy)
    return poly
