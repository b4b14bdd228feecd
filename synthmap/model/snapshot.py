"""Self-describing JSON snapshot of a Model.

Everything the model holds is written, id counters included, so ``load`` of a saved
file gives back an equal model.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from synthmap._io import read_json, write_json
from synthmap.errors import DocumentParseError, ModelNotNamedError
from synthmap.model.entities import Building, Intersection, IntersectionType, Road, road_id
from synthmap.model.lanes import LaneSpec, LaneType
from synthmap.model.model import Model

LOG = logging.getLogger("model.snapshot")

SNAPSHOT_FORMAT = "synthmap.model"
SNAPSHOT_VERSION = 1
SNAPSHOT_EXT = "json"


def snapshot_path(maps_dir: Path, name: str) -> Path:
    return Path(maps_dir) / f"{name}.{SNAPSHOT_EXT}"


def to_dict(model: Model) -> Dict[str, Any]:
    return {
        "format": SNAPSHOT_FORMAT,
        "version": SNAPSHOT_VERSION,
        "name": model.name,
        "next_intersection_id": model.next_intersection_id,
        "next_building_id": model.next_building_id,
        "intersections": [
            {
                "id": id,
                "center": list(i.center),
                "intersection_type": i.intersection_type.value,
                "label": i.label,
            }
            for id, i in sorted(model.intersections.items())
        ],
        "roads": [
            {
                "i1": r.i1,
                "i2": r.i2,
                "lanes": {
                    "fwd": [lt.value for lt in r.lanes.fwd],
                    "back": [lt.value for lt in r.lanes.back],
                },
                "fwd_label": r.fwd_label,
                "back_label": r.back_label,
            }
            for _, r in sorted(model.roads.items())
        ],
        "buildings": [
            {
                "id": id,
                "center": list(b.center),
                "label": b.label,
                "num_residents": b.num_residents,
            }
            for id, b in sorted(model.buildings.items())
        ],
    }


def from_dict(data: Dict[str, Any]) -> Model:
    if not isinstance(data, dict) or data.get("format") != SNAPSHOT_FORMAT:
        raise DocumentParseError("not_a_model_snapshot")
    try:
        version = int(data.get("version", 0))
    except (TypeError, ValueError) as exc:
        raise DocumentParseError(f"bad_snapshot_version:{data.get('version')!r}") from exc
    if version > SNAPSHOT_VERSION:
        raise DocumentParseError(f"snapshot_version_unsupported:{version}")
    try:
        m = Model(name=data.get("name"))
        for item in data.get("intersections", []):
            m.intersections[int(item["id"])] = Intersection(
                center=(float(item["center"][0]), float(item["center"][1])),
                intersection_type=IntersectionType(item["intersection_type"]),
                label=item.get("label"),
            )
        for item in data.get("roads", []):
            lanes = item["lanes"]
            r = Road(
                i1=int(item["i1"]),
                i2=int(item["i2"]),
                lanes=LaneSpec([LaneType(v) for v in lanes["fwd"]], [LaneType(v) for v in lanes["back"]]),
                fwd_label=item.get("fwd_label"),
                back_label=item.get("back_label"),
            )
            rid = road_id(r.i1, r.i2)
            if r.i1 == r.i2:
                raise DocumentParseError(f"snapshot_road_to_itself:{r.i1}")
            if rid in m.roads:
                raise DocumentParseError(f"snapshot_duplicate_road:{rid}")
            m.roads[rid] = r
        for item in data.get("buildings", []):
            n = item.get("num_residents")
            m.buildings[int(item["id"])] = Building(
                center=(float(item["center"][0]), float(item["center"][1])),
                label=item.get("label"),
                num_residents=None if n is None else int(n),
            )
        m.next_intersection_id = max(
            int(data.get("next_intersection_id", 0)), max(m.intersections, default=-1) + 1
        )
        m.next_building_id = max(int(data.get("next_building_id", 0)), max(m.buildings, default=-1) + 1)
    except (KeyError, TypeError, ValueError, IndexError) as exc:
        raise DocumentParseError(f"bad_snapshot:{exc!r}") from exc
    dangling = m.check_integrity()
    if dangling:
        raise DocumentParseError(f"snapshot_dangling_roads:{dangling}")
    return m


def save(model: Model, maps_dir: Path) -> Path:
    if not model.name:
        raise ModelNotNamedError("Model hasn't been named yet")
    path = snapshot_path(maps_dir, model.name)
    write_json(path, to_dict(model))
    LOG.info("saved %s", path)
    return path


def load(path: Path) -> Model:
    m = from_dict(read_json(Path(path)))
    LOG.info(
        "loaded %s: %d intersections, %d roads, %d buildings",
        path,
        len(m.intersections),
        len(m.roads),
        len(m.buildings),
    )
    return m
