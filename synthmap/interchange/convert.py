"""Model <-> raw interchange records.

These are two separate one-way transforms, not an inverse pair. Export flattens the
model into point-keyed records; import rebuilds what it can from those points and gives
every road the default lanes, because lane layouts and road labels only survive as
free-form tags that the downstream builder reads and import does not.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np

from synthmap.errors import ModelNotNamedError, RoadExistsError
from synthmap.interchange.raw_data import RawBuilding, RawIntersection, RawMap, RawRoad, read_raw_map, write_raw_map
from synthmap.model.entities import IntersectionType
from synthmap.model.lanes import encode
from synthmap.model.model import Model
from synthmap.projection.gps import GPSBounds, to_gps, to_local

LOG = logging.getLogger("interchange.convert")

RAW_EXT = "json"

TAG_LANES = "synthetic_lanes"
TAG_FWD_LABEL = "fwd_label"
TAG_BACK_LABEL = "back_label"
TAG_LABEL = "label"

# Half-width in degrees given to a zero-width or zero-height span of imported points.
IMPORT_PAD_DEG = 0.0005


def raw_map_path(raw_maps_dir: Path, name: str) -> Path:
    return Path(raw_maps_dir) / f"{name}.{RAW_EXT}"


def export_raw(model: Model, gps_bounds: GPSBounds) -> RawMap:
    raw = RawMap()

    def pt(p):
        return to_gps(p, gps_bounds)

    for idx, rid in enumerate(model.road_ids()):
        r = model.roads[rid]
        tags = {TAG_LANES: encode(r.lanes)}
        if r.fwd_label is not None:
            tags[TAG_FWD_LABEL] = r.fwd_label
        if r.back_label is not None:
            tags[TAG_BACK_LABEL] = r.back_label
        raw.roads.append(
            RawRoad(
                points=[pt(model.intersections[r.i1].center), pt(model.intersections[r.i2].center)],
                tags=tags,
                way_id=idx,
                parking_lane_fwd=r.lanes.has_parking(True),
                parking_lane_back=r.lanes.has_parking(False),
            )
        )

    for iid in model.intersection_ids():
        i = model.intersections[iid]
        raw.intersections.append(
            RawIntersection(
                point=pt(i.center),
                intersection_type=i.intersection_type.value,
                label=i.label,
                elevation_m=0.0,
            )
        )

    for idx, bid in enumerate(model.building_ids()):
        b = model.buildings[bid]
        tags = {}
        if b.label is not None:
            tags[TAG_LABEL] = b.label
        corners = list(b.polygon().exterior.coords)[:-1]
        raw.buildings.append(RawBuilding(points=[pt(c) for c in corners], tags=tags, way_id=idx))

    LOG.info(
        "exported %d roads, %d intersections, %d buildings",
        len(raw.roads),
        len(raw.intersections),
        len(raw.buildings),
    )
    return raw


def _intersection_type(value: str, idx: int) -> IntersectionType:
    try:
        return IntersectionType(value)
    except ValueError:
        LOG.warning("raw intersection %d has unknown type %r, using StopSign", idx, value)
        return IntersectionType.STOP_SIGN


def import_bounds(raw: RawMap) -> GPSBounds:
    """Bounds of the raw points, widened on any axis where every point lines up."""
    b = raw.gps_bounds()
    if b.is_empty():
        return b
    if b.max_lon <= b.min_lon:
        b.min_lon -= IMPORT_PAD_DEG
        b.max_lon += IMPORT_PAD_DEG
    if b.max_lat <= b.min_lat:
        b.min_lat -= IMPORT_PAD_DEG
        b.max_lat += IMPORT_PAD_DEG
    return b


def import_raw(raw: RawMap, name: Optional[str] = None) -> Model:
    m = Model(name=name)
    bounds = import_bounds(raw)
    if bounds.is_empty():
        return m

    pt_to_intersection: Dict[Tuple[float, float], int] = {}
    for idx, ri in enumerate(raw.intersections):
        center = to_local(ri.point, bounds)
        iid = m.create_intersection(center)
        m.set_intersection_type(iid, _intersection_type(ri.intersection_type, idx))
        m.set_intersection_label(iid, ri.label)
        pt_to_intersection.setdefault(center, iid)

    for rr in raw.roads:
        if len(rr.points) < 2:
            LOG.warning("raw road %s has %d points, skipped", rr.way_id, len(rr.points))
            continue
        i1 = pt_to_intersection.get(to_local(rr.points[0], bounds))
        i2 = pt_to_intersection.get(to_local(rr.points[-1], bounds))
        if i1 is None or i2 is None or i1 == i2:
            LOG.warning("raw road %s endpoints don't match intersections, skipped", rr.way_id)
            continue
        try:
            m.create_road(i1, i2)
        except RoadExistsError:
            LOG.warning("raw road %s duplicates road %s, skipped", rr.way_id, (i1, i2))

    for rb in raw.buildings:
        if not rb.points:
            LOG.warning("raw building %s has no points, skipped", rb.way_id)
            continue
        local = np.array([to_local(p, bounds) for p in rb.points], dtype=np.float64)
        cx, cy = local.mean(axis=0)
        m.create_building((float(cx), float(cy)))

    LOG.info(
        "imported %d intersections, %d roads, %d buildings",
        len(m.intersections),
        len(m.roads),
        len(m.buildings),
    )
    return m


def export_to_file(model: Model, raw_maps_dir: Path, gps_bounds: GPSBounds) -> Path:
    if not model.name:
        raise ModelNotNamedError("Model hasn't been named yet")
    path = raw_map_path(raw_maps_dir, model.name)
    write_raw_map(path, export_raw(model, gps_bounds))
    LOG.info("exported %s", path)
    return path


def import_from_file(path: Path) -> Model:
    return import_raw(read_raw_map(path), name=Path(path).stem)
