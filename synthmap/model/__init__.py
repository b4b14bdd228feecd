from __future__ import annotations

from synthmap.model.entities import (
    BACKWARDS,
    FORWARDS,
    Building,
    Intersection,
    IntersectionType,
    Road,
    road_id,
)
from synthmap.model.lanes import LaneSpec, LaneType
from synthmap.model.model import Model

__all__ = [
    "BACKWARDS",
    "FORWARDS",
    "Building",
    "Intersection",
    "IntersectionType",
    "LaneSpec",
    "LaneType",
    "Model",
    "Road",
    "road_id",
]
