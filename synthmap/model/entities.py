from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from shapely.geometry import Point, Polygon, box

from synthmap.model.lanes import LaneSpec

Pt = Tuple[float, float]
IntersectionID = int
BuildingID = int
RoadID = Tuple[int, int]
Direction = bool

FORWARDS: Direction = True
BACKWARDS: Direction = False

INTERSECTION_RADIUS = 10.0
BUILDING_LENGTH = 30.0
LANE_THICKNESS = 2.5
CENTER_LINE_THICKNESS = 0.5


class IntersectionType(str, Enum):
    STOP_SIGN = "StopSign"
    TRAFFIC_SIGNAL = "TrafficSignal"
    BORDER = "Border"


def road_id(i1: IntersectionID, i2: IntersectionID) -> RoadID:
    return (i1, i2) if i1 < i2 else (i2, i1)


@dataclass
class Intersection:
    center: Pt
    intersection_type: IntersectionType = IntersectionType.STOP_SIGN
    label: Optional[str] = None

    def contains(self, pt: Pt) -> bool:
        return math.hypot(pt[0] - self.center[0], pt[1] - self.center[1]) <= INTERSECTION_RADIUS


@dataclass
class Road:
    i1: IntersectionID
    i2: IntersectionID
    lanes: LaneSpec = field(default_factory=LaneSpec)
    fwd_label: Optional[str] = None
    back_label: Optional[str] = None

    @property
    def id(self) -> RoadID:
        return road_id(self.i1, self.i2)

    def touches(self, i: IntersectionID) -> bool:
        return self.i1 == i or self.i2 == i

    def label(self, direction: Direction) -> Optional[str]:
        return self.fwd_label if direction else self.back_label


@dataclass
class Building:
    center: Pt
    label: Optional[str] = None
    num_residents: Optional[int] = None

    def polygon(self) -> Polygon:
        half = BUILDING_LENGTH / 2.0
        x, y = self.center
        return box(x - half, y - half, x + half, y + half)

    def contains(self, pt: Pt) -> bool:
        return self.polygon().covers(Point(pt))


def offset_strip(p1: Pt, p2: Pt, near: float, far: float) -> Optional[Polygon]:
    """Band between offsets ``near`` and ``far`` from the line p1->p2.

    Positive offsets go to the right of travel in screen orientation (y down), negative
    to the left. Returns None for a zero-length line.
    """
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    length = math.hypot(dx, dy)
    if length == 0.0 or near == far:
        return None
    nx = -dy / length
    ny = dx / length
    return Polygon(
        [
            (p1[0] + nx * near, p1[1] + ny * near),
            (p2[0] + nx * near, p2[1] + ny * near),
            (p2[0] + nx * far, p2[1] + ny * far),
            (p1[0] + nx * far, p1[1] + ny * far),
        ]
    )


def direction_strip(road: Road, p1: Pt, p2: Pt, direction: Direction) -> Optional[Polygon]:
    if direction:
        return offset_strip(p1, p2, 0.0, LANE_THICKNESS * len(road.lanes.fwd))
    return offset_strip(p1, p2, 0.0, -LANE_THICKNESS * len(road.lanes.back))
