from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from shapely.geometry import Point

from synthmap.errors import (
    EntityNotFound,
    LaneSpecParseError,
    ReferentialIntegrityViolation,
    RoadExistsError,
)
from synthmap.model import lanes as lane_codec
from synthmap.model.entities import (
    BACKWARDS,
    FORWARDS,
    Building,
    BuildingID,
    Direction,
    Intersection,
    IntersectionID,
    IntersectionType,
    Pt,
    Road,
    RoadID,
    direction_strip,
    road_id,
)
from synthmap.model.lanes import LaneSpec

LOG = logging.getLogger("model")


def _clean_label(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = str(text)
    return text if text else None


@dataclass
class Model:
    """Editable synthetic map: intersections, roads between them, and buildings.

    Ids of intersections and buildings come from counters that only ever grow, so an id
    is never handed out twice during the life of a model. Roads are keyed by the sorted
    pair of their endpoint ids and hold those ids, not the intersections themselves.
    """

    name: Optional[str] = None
    intersections: Dict[IntersectionID, Intersection] = field(default_factory=dict)
    roads: Dict[RoadID, Road] = field(default_factory=dict)
    buildings: Dict[BuildingID, Building] = field(default_factory=dict)
    next_intersection_id: int = 0
    next_building_id: int = 0

    # lookups

    def _intersection(self, id: IntersectionID) -> Intersection:
        try:
            return self.intersections[id]
        except KeyError:
            raise EntityNotFound(f"intersection_not_found:{id}") from None

    def _road(self, id: RoadID) -> Road:
        try:
            return self.roads[road_id(*id)]
        except (KeyError, TypeError):
            raise EntityNotFound(f"road_not_found:{id}") from None

    def _building(self, id: BuildingID) -> Building:
        try:
            return self.buildings[id]
        except KeyError:
            raise EntityNotFound(f"building_not_found:{id}") from None

    def intersection_ids(self) -> List[IntersectionID]:
        return sorted(self.intersections)

    def road_ids(self) -> List[RoadID]:
        return sorted(self.roads)

    def building_ids(self) -> List[BuildingID]:
        return sorted(self.buildings)

    # intersections

    def create_intersection(self, center: Pt) -> IntersectionID:
        id = self.next_intersection_id
        self.next_intersection_id += 1
        self.intersections[id] = Intersection(center=(float(center[0]), float(center[1])))
        return id

    def move_intersection(self, id: IntersectionID, center: Pt) -> None:
        self._intersection(id).center = (float(center[0]), float(center[1]))

    def intersection_center(self, id: IntersectionID) -> Pt:
        return self._intersection(id).center

    def set_intersection_label(self, id: IntersectionID, label: Optional[str]) -> None:
        self._intersection(id).label = _clean_label(label)

    def get_intersection_label(self, id: IntersectionID) -> Optional[str]:
        return self._intersection(id).label

    def set_intersection_type(self, id: IntersectionID, intersection_type: IntersectionType) -> None:
        self._intersection(id).intersection_type = IntersectionType(intersection_type)

    def roads_touching(self, id: IntersectionID) -> List[RoadID]:
        return [rid for rid in self.road_ids() if self.roads[rid].touches(id)]

    def toggle_intersection_type(self, id: IntersectionID) -> IntersectionType:
        i = self._intersection(id)
        if i.intersection_type == IntersectionType.STOP_SIGN:
            i.intersection_type = IntersectionType.TRAFFIC_SIGNAL
        elif i.intersection_type == IntersectionType.TRAFFIC_SIGNAL:
            if len(self.roads_touching(id)) == 1:
                i.intersection_type = IntersectionType.BORDER
            else:
                i.intersection_type = IntersectionType.STOP_SIGN
        else:
            i.intersection_type = IntersectionType.STOP_SIGN
        return i.intersection_type

    def remove_intersection(self, id: IntersectionID) -> None:
        self._intersection(id)
        used_by = self.roads_touching(id)
        if used_by:
            LOG.warning("can't delete intersection %s used by roads %s", id, used_by)
            raise ReferentialIntegrityViolation(f"intersection_in_use:{id}:{used_by}")
        del self.intersections[id]

    def hit_test_intersection(self, pt: Pt) -> Optional[IntersectionID]:
        for id in self.intersection_ids():
            if self.intersections[id].contains(pt):
                return id
        return None

    # roads

    def create_road(self, i1: IntersectionID, i2: IntersectionID) -> RoadID:
        self._intersection(i1)
        self._intersection(i2)
        if i1 == i2:
            raise ValueError(f"road_to_itself:{i1}")
        id = road_id(i1, i2)
        if id in self.roads:
            LOG.warning("road %s already exists", id)
            raise RoadExistsError(f"road_exists:{id}")
        self.roads[id] = Road(i1=i1, i2=i2)
        return id

    def road_endpoints(self, id: RoadID) -> Tuple[Pt, Pt]:
        r = self._road(id)
        return self.intersections[r.i1].center, self.intersections[r.i2].center

    def edit_lanes(self, id: RoadID, spec: str) -> None:
        r = self._road(id)
        try:
            lanes = lane_codec.decode(spec)
        except LaneSpecParseError:
            LOG.warning("bad lane spec for road %s: %r", id, spec)
            raise
        r.lanes = lanes

    def get_lanes(self, id: RoadID) -> str:
        return lane_codec.encode(self._road(id).lanes)

    def set_lanes(self, id: RoadID, lanes: LaneSpec) -> None:
        self._road(id).lanes = lanes

    def swap_lane_directions(self, id: RoadID) -> None:
        r = self._road(id)
        r.lanes = r.lanes.swapped()

    def set_road_label(self, id: RoadID, direction: Direction, label: Optional[str]) -> None:
        r = self._road(id)
        if direction:
            r.fwd_label = _clean_label(label)
        else:
            r.back_label = _clean_label(label)

    def get_road_label(self, id: RoadID, direction: Direction) -> Optional[str]:
        return self._road(id).label(direction)

    def remove_road(self, id: RoadID) -> None:
        del self.roads[self._road(id).id]

    def road_polygon(self, id: RoadID, direction: Direction):
        r = self._road(id)
        p1, p2 = self.road_endpoints(id)
        return direction_strip(r, p1, p2, direction)

    def hit_test_road(self, pt: Pt) -> Optional[Tuple[RoadID, Direction]]:
        query = Point(pt)
        for id in self.road_ids():
            for direction in (FORWARDS, BACKWARDS):
                poly = self.road_polygon(id, direction)
                if poly is not None and poly.covers(query):
                    return id, direction
        return None

    # buildings

    def create_building(self, center: Pt) -> BuildingID:
        id = self.next_building_id
        self.next_building_id += 1
        self.buildings[id] = Building(center=(float(center[0]), float(center[1])))
        return id

    def move_building(self, id: BuildingID, center: Pt) -> None:
        self._building(id).center = (float(center[0]), float(center[1]))

    def set_building_label(self, id: BuildingID, label: Optional[str]) -> None:
        self._building(id).label = _clean_label(label)

    def get_building_label(self, id: BuildingID) -> Optional[str]:
        return self._building(id).label

    def set_building_residents(self, id: BuildingID, num_residents: Optional[int]) -> None:
        if num_residents is not None and int(num_residents) < 0:
            raise ValueError(f"negative_residents:{num_residents}")
        self._building(id).num_residents = None if num_residents is None else int(num_residents)

    def remove_building(self, id: BuildingID) -> None:
        self._building(id)
        del self.buildings[id]

    def hit_test_building(self, pt: Pt) -> Optional[BuildingID]:
        for id in self.building_ids():
            if self.buildings[id].contains(pt):
                return id
        return None

    # whole model

    def check_integrity(self) -> List[Tuple[RoadID, IntersectionID]]:
        dangling = []
        for id in self.road_ids():
            r = self.roads[id]
            for i in (r.i1, r.i2):
                if i not in self.intersections:
                    dangling.append((id, i))
        return dangling

    def save(self, maps_dir: Path) -> Path:
        from synthmap.model.snapshot import save

        return save(self, maps_dir)

    def export(self, raw_maps_dir: Path, gps_bounds) -> Path:
        from synthmap.interchange.convert import export_to_file

        return export_to_file(self, raw_maps_dir, gps_bounds)
