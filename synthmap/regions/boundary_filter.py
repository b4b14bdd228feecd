"""Keep candidate polygons that have at least one vertex strictly inside a boundary.

Vertex-only test: a candidate whose edges cross the boundary with every vertex outside,
or one that swallows the boundary whole, is discarded.
"""
from __future__ import annotations

from typing import List, Sequence, Tuple, TypeVar

import numpy as np
from shapely import contains as shp_contains
from shapely import points as shp_points
from shapely.geometry import Polygon, box

from synthmap.projection.gps import GPSBounds, world_size

T = TypeVar("T")


def polygon_vertices(poly: Polygon) -> np.ndarray:
    rings = [poly.exterior] + list(poly.interiors)
    coords = [np.asarray(r.coords, dtype=np.float64)[:, :2] for r in rings if not r.is_empty]
    if not coords:
        return np.zeros((0, 2), dtype=np.float64)
    return np.concatenate(coords, axis=0)


def has_vertex_inside(boundary: Polygon, poly: Polygon) -> bool:
    verts = polygon_vertices(poly)
    if verts.shape[0] == 0:
        return False
    inside = shp_contains(boundary, shp_points(verts))
    return bool(np.any(inside))


def filter_by_boundary(
    boundary: Polygon,
    candidates: Sequence[T],
    key=lambda c: c,
) -> Tuple[List[T], List[T]]:
    """Split ``candidates`` into ``(kept, discarded)``; ``key`` extracts the polygon."""
    kept: List[T] = []
    discarded: List[T] = []
    for cand in candidates:
        if has_vertex_inside(boundary, key(cand)):
            kept.append(cand)
        else:
            discarded.append(cand)
    return kept, discarded


def boundary_from_gps_bounds(bounds: GPSBounds) -> Polygon:
    width, height = world_size(bounds)
    return box(0.0, 0.0, width, height)
