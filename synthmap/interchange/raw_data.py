from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from synthmap._io import read_json, write_json
from synthmap.errors import DocumentParseError
from synthmap.projection.gps import GPSBounds

LonLat = Tuple[float, float]

RAW_FORMAT = "synthmap.raw"
RAW_VERSION = 1

ROAD_REQUIRED_FIELDS = ["points", "tags", "way_id"]
INTERSECTION_REQUIRED_FIELDS = ["point", "intersection_type"]
BUILDING_REQUIRED_FIELDS = ["points", "tags", "way_id"]


@dataclass
class RawRoad:
    points: List[LonLat]
    tags: Dict[str, str] = field(default_factory=dict)
    way_id: int = 0
    parking_lane_fwd: bool = False
    parking_lane_back: bool = False


@dataclass
class RawIntersection:
    point: LonLat
    intersection_type: str = "StopSign"
    label: Optional[str] = None
    elevation_m: float = 0.0


@dataclass
class RawBuilding:
    points: List[LonLat]
    tags: Dict[str, str] = field(default_factory=dict)
    way_id: int = 0


@dataclass
class RawMap:
    roads: List[RawRoad] = field(default_factory=list)
    intersections: List[RawIntersection] = field(default_factory=list)
    buildings: List[RawBuilding] = field(default_factory=list)

    def gps_bounds(self) -> GPSBounds:
        b = GPSBounds()
        for r in self.roads:
            for pt in r.points:
                b.update(pt)
        for i in self.intersections:
            b.update(i.point)
        for bldg in self.buildings:
            for pt in bldg.points:
                b.update(pt)
        return b

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["format"] = RAW_FORMAT
        out["version"] = RAW_VERSION
        return out


def validate_required_fields(record: Dict[str, Any], required: List[str]) -> List[str]:
    return [key for key in required if key not in record]


def _pt(raw) -> LonLat:
    return float(raw[0]), float(raw[1])


def raw_map_from_dict(data: Dict[str, Any]) -> RawMap:
    if not isinstance(data, dict) or data.get("format") != RAW_FORMAT:
        raise DocumentParseError("not_a_raw_map")
    out = RawMap()
    sections = [
        ("roads", ROAD_REQUIRED_FIELDS),
        ("intersections", INTERSECTION_REQUIRED_FIELDS),
        ("buildings", BUILDING_REQUIRED_FIELDS),
    ]
    for section, required in sections:
        for idx, rec in enumerate(data.get(section, []) or []):
            missing = validate_required_fields(rec, required) if isinstance(rec, dict) else required
            if missing:
                raise DocumentParseError(f"raw_{section}[{idx}]_missing:{missing}")
    try:
        for rec in data.get("roads", []) or []:
            out.roads.append(
                RawRoad(
                    points=[_pt(p) for p in rec["points"]],
                    tags={str(k): str(v) for k, v in (rec.get("tags") or {}).items()},
                    way_id=int(rec["way_id"]),
                    parking_lane_fwd=bool(rec.get("parking_lane_fwd", False)),
                    parking_lane_back=bool(rec.get("parking_lane_back", False)),
                )
            )
        for rec in data.get("intersections", []) or []:
            out.intersections.append(
                RawIntersection(
                    point=_pt(rec["point"]),
                    intersection_type=str(rec["intersection_type"]),
                    label=rec.get("label"),
                    elevation_m=float(rec.get("elevation_m", 0.0)),
                )
            )
        for rec in data.get("buildings", []) or []:
            out.buildings.append(
                RawBuilding(
                    points=[_pt(p) for p in rec["points"]],
                    tags={str(k): str(v) for k, v in (rec.get("tags") or {}).items()},
                    way_id=int(rec["way_id"]),
                )
            )
    except (TypeError, ValueError, IndexError) as exc:
        raise DocumentParseError(f"bad_raw_map:{exc!r}") from exc
    return out


def write_raw_map(path: Path, raw: RawMap) -> Path:
    write_json(Path(path), raw.to_dict(), compact=True)
    return Path(path)


def read_raw_map(path: Path) -> RawMap:
    return raw_map_from_dict(read_json(Path(path)))
