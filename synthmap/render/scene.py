from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from shapely.geometry import LineString, Point

from synthmap.model.entities import (
    BACKWARDS,
    CENTER_LINE_THICKNESS,
    FORWARDS,
    INTERSECTION_RADIUS,
    LANE_THICKNESS,
    offset_strip,
)
from synthmap.model.model import Model

Pt = Tuple[float, float]

KIND_CENTER_LINE = "center_line"
KIND_BUILDING = "building"


@dataclass
class DrawItem:
    shape: str  # "polygon" | "circle" | "text"
    kind: str
    geometry: Any
    highlight: bool = False
    text: Optional[str] = None
    radius: float = 0.0


def build_scene(model: Model, cursor: Optional[Pt] = None) -> List[DrawItem]:
    """Draw items back to front: roads, intersections, buildings.

    ``cursor`` is a point in the local frame; whatever it hovers is flagged as highlighted.
    """
    current_i = model.hit_test_intersection(cursor) if cursor is not None else None
    current_b = model.hit_test_building(cursor) if cursor is not None else None
    current_r = model.hit_test_road(cursor) if cursor is not None else None

    items: List[DrawItem] = []
    for rid in model.road_ids():
        r = model.roads[rid]
        p1, p2 = model.road_endpoints(rid)
        for direction, lanes, sign in ((FORWARDS, r.lanes.fwd, 1.0), (BACKWARDS, r.lanes.back, -1.0)):
            hl = current_r == (rid, direction)
            for idx, lt in enumerate(lanes):
                poly = offset_strip(p1, p2, sign * idx * LANE_THICKNESS, sign * (idx + 1) * LANE_THICKNESS)
                if poly is not None:
                    items.append(DrawItem("polygon", lt.value, poly, hl))
        if p1 != p2:
            center = LineString([p1, p2]).buffer(CENTER_LINE_THICKNESS / 2.0, cap_style="flat")
            items.append(DrawItem("polygon", KIND_CENTER_LINE, center))
        for direction in (FORWARDS, BACKWARDS):
            label = r.label(direction)
            strip = model.road_polygon(rid, direction)
            if label is not None and strip is not None:
                items.append(DrawItem("text", "road_label", strip.centroid, text=label))

    for iid in model.intersection_ids():
        i = model.intersections[iid]
        items.append(
            DrawItem("circle", i.intersection_type.value, Point(i.center), iid == current_i, radius=INTERSECTION_RADIUS)
        )
        if i.label is not None:
            items.append(DrawItem("text", "intersection_label", Point(i.center), text=i.label))

    for bid in model.building_ids():
        b = model.buildings[bid]
        items.append(DrawItem("polygon", KIND_BUILDING, b.polygon(), bid == current_b))
        if b.label is not None:
            items.append(DrawItem("text", "building_label", Point(b.center), text=b.label))
    return items


def draw(model: Model, sink, cursor: Optional[Pt] = None) -> int:
    """Push the scene into ``sink``; returns the number of items drawn."""
    items = build_scene(model, cursor)
    for item in items:
        if item.shape == "polygon":
            sink.draw_polygon(item.kind, item.geometry, item.highlight)
        elif item.shape == "circle":
            sink.draw_circle(item.kind, (item.geometry.x, item.geometry.y), item.radius, item.highlight)
        else:
            sink.draw_text(item.text, (item.geometry.x, item.geometry.y))
    return len(items)
