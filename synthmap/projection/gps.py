"""GPS <-> local frame conversion.

The local frame is in meters with the origin at the north-west corner of the bounds and
y growing southward (screen order), so a map drawn top-down needs no flip.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Tuple

import numpy as np
from pyproj import Geod

from synthmap.errors import DegenerateBoundsError

LonLat = Tuple[float, float]
Pt = Tuple[float, float]

_GEOD = Geod(ellps="WGS84")


@dataclass
class GPSBounds:
    min_lon: float = math.inf
    min_lat: float = math.inf
    max_lon: float = -math.inf
    max_lat: float = -math.inf

    @staticmethod
    def from_points(points: Iterable[LonLat]) -> "GPSBounds":
        b = GPSBounds()
        for pt in points:
            b.update(pt)
        return b

    @staticmethod
    def from_list(values) -> "GPSBounds":
        min_lon, min_lat, max_lon, max_lat = (float(v) for v in values)
        return GPSBounds(min_lon, min_lat, max_lon, max_lat)

    def update(self, pt: LonLat) -> None:
        lon, lat = float(pt[0]), float(pt[1])
        self.min_lon = min(self.min_lon, lon)
        self.max_lon = max(self.max_lon, lon)
        self.min_lat = min(self.min_lat, lat)
        self.max_lat = max(self.max_lat, lat)

    def contains(self, pt: LonLat) -> bool:
        lon, lat = pt
        return self.min_lon <= lon <= self.max_lon and self.min_lat <= lat <= self.max_lat

    def is_empty(self) -> bool:
        return self.min_lon > self.max_lon or self.min_lat > self.max_lat

    def is_degenerate(self) -> bool:
        return self.is_empty() or not (self.max_lon > self.min_lon and self.max_lat > self.min_lat)

    def as_list(self) -> list:
        return [self.min_lon, self.min_lat, self.max_lon, self.max_lat]


def _check(bounds: GPSBounds) -> None:
    if bounds.is_degenerate():
        raise DegenerateBoundsError(f"degenerate_gps_bounds:{bounds.as_list()}")


@lru_cache(maxsize=64)
def _world_size(min_lon: float, min_lat: float, max_lon: float, max_lat: float) -> Tuple[float, float]:
    _, _, width = _GEOD.inv(min_lon, min_lat, max_lon, min_lat)
    _, _, height = _GEOD.inv(min_lon, min_lat, min_lon, max_lat)
    return float(width), float(height)


def world_size(bounds: GPSBounds) -> Tuple[float, float]:
    """Width and height in meters of the local frame spanned by ``bounds``."""
    _check(bounds)
    return _world_size(bounds.min_lon, bounds.min_lat, bounds.max_lon, bounds.max_lat)


def to_local(gps: LonLat, bounds: GPSBounds) -> Pt:
    width, height = world_size(bounds)
    lon, lat = float(gps[0]), float(gps[1])
    x = (lon - bounds.min_lon) / (bounds.max_lon - bounds.min_lon) * width
    y = height - (lat - bounds.min_lat) / (bounds.max_lat - bounds.min_lat) * height
    return x, y


def to_gps(pt: Pt, bounds: GPSBounds) -> LonLat:
    width, height = world_size(bounds)
    x, y = float(pt[0]), float(pt[1])
    lon = bounds.min_lon + x / width * (bounds.max_lon - bounds.min_lon)
    lat = bounds.min_lat + (height - y) / height * (bounds.max_lat - bounds.min_lat)
    return lon, lat


def to_local_array(coords: np.ndarray, bounds: GPSBounds) -> np.ndarray:
    width, height = world_size(bounds)
    arr = np.asarray(coords, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    xs = (arr[:, 0] - bounds.min_lon) / (bounds.max_lon - bounds.min_lon) * width
    ys = height - (arr[:, 1] - bounds.min_lat) / (bounds.max_lat - bounds.min_lat) * height
    return np.stack([xs, ys], axis=1)


def to_gps_array(points: np.ndarray, bounds: GPSBounds) -> np.ndarray:
    width, height = world_size(bounds)
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    lons = bounds.min_lon + arr[:, 0] / width * (bounds.max_lon - bounds.min_lon)
    lats = bounds.min_lat + (height - arr[:, 1]) / height * (bounds.max_lat - bounds.min_lat)
    return np.stack([lons, lats], axis=1)
