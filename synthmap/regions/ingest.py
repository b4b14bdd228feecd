from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from shapely.geometry import Polygon

from synthmap._io import read_json
from synthmap.errors import DocumentParseError, RingConstructionError, UnsupportedGeometryWarning
from synthmap.projection.gps import GPSBounds, to_local, world_size
from synthmap.regions.boundary_filter import boundary_from_gps_bounds, filter_by_boundary
from synthmap.regions.rings import build_ring, polygon_from_rings

LOG = logging.getLogger("regions.ingest")

GEOMETRY_TYPES = {
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
}

WARN_UNSUPPORTED = "unsupported_geometry"
WARN_RING = "ring_error"
WARN_FILTERED = "filtered_out"


@dataclass
class Region:
    polygon: Polygon
    properties: Optional[Dict[str, Any]]
    feature_index: int
    feature_id: Optional[Any] = None


@dataclass
class IngestWarning:
    kind: str
    feature_index: int
    feature_id: Optional[Any]
    message: str
    error: Optional[BaseException] = None


@dataclass
class IngestResult:
    regions: List[Region] = field(default_factory=list)
    discarded: List[Region] = field(default_factory=list)
    warnings: List[IngestWarning] = field(default_factory=list)

    def warnings_of(self, kind: str) -> List[IngestWarning]:
        return [w for w in self.warnings if w.kind == kind]

    def counts(self) -> Dict[str, int]:
        return {
            "retained": len(self.regions),
            "discarded": len(self.discarded),
            "warnings": len(self.warnings),
            WARN_UNSUPPORTED: len(self.warnings_of(WARN_UNSUPPORTED)),
            WARN_RING: len(self.warnings_of(WARN_RING)),
            WARN_FILTERED: len(self.warnings_of(WARN_FILTERED)),
        }


def read_region_document(path: Path) -> Dict[str, Any]:
    data = read_json(Path(path))
    if not isinstance(data, dict) or "type" not in data:
        raise DocumentParseError(f"not_geojson:{path}")
    return data


def iter_features(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    kind = doc.get("type")
    if kind == "FeatureCollection":
        feats = doc.get("features")
        if not isinstance(feats, list):
            raise DocumentParseError("feature_collection_without_features")
        return feats
    if kind == "Feature":
        return [doc]
    if kind in GEOMETRY_TYPES:
        return [{"type": "Feature", "geometry": doc, "properties": None}]
    raise DocumentParseError(f"unsupported_document_type:{kind}")


def _feature_id(feature: Dict[str, Any]) -> Optional[Any]:
    if feature.get("id") is not None:
        return feature["id"]
    props = feature.get("properties")
    if not isinstance(props, dict):
        return None
    for key in ("id", "ID", "name", "NAME", "NOM"):
        if key in props:
            return props[key]
    return None


def reproject_ring(coords: Sequence[Sequence[float]], bounds: GPSBounds) -> List[Tuple[float, float]]:
    try:
        return [to_local((float(c[0]), float(c[1])), bounds) for c in coords]
    except (TypeError, ValueError, IndexError) as exc:
        raise RingConstructionError(f"bad_coordinates:{exc}") from exc


def polygon_from_gps_rings(
    rings: Sequence[Sequence[Sequence[float]]],
    bounds: GPSBounds,
    offset: Tuple[float, float],
) -> Polygon:
    if not isinstance(rings, (list, tuple)) or not rings:
        raise RingConstructionError("polygon_without_rings")
    built = [build_ring(reproject_ring(ring, bounds)) for ring in rings]
    return polygon_from_rings(built, offset)


def process_features(
    features: Iterable[Dict[str, Any]],
    bounds: GPSBounds,
    offset: Tuple[float, float],
    result: Optional[IngestResult] = None,
) -> IngestResult:
    world_size(bounds)
    result = result if result is not None else IngestResult()
    for idx, feature in enumerate(features):
        if not isinstance(feature, dict):
            raise DocumentParseError(f"feature_not_an_object:{idx}")
        geom = feature.get("geometry")
        if not geom:
            LOG.debug("feature %s has no geometry", idx)
            continue
        fid = _feature_id(feature)
        gtype = geom.get("type") if isinstance(geom, dict) else None
        if gtype != "Polygon":
            msg = f"feature={idx} id={fid} geometry={gtype}: not a polygon"
            LOG.warning(msg)
            result.warnings.append(
                IngestWarning(WARN_UNSUPPORTED, idx, fid, msg, UnsupportedGeometryWarning(msg))
            )
            continue
        try:
            poly = polygon_from_gps_rings(geom.get("coordinates"), bounds, offset)
        except RingConstructionError as exc:
            msg = f"feature={idx} id={fid}: {exc}"
            LOG.warning(msg)
            result.warnings.append(IngestWarning(WARN_RING, idx, fid, msg, exc))
            continue
        props = feature.get("properties")
        result.regions.append(Region(poly, dict(props) if isinstance(props, dict) else None, idx, fid))
    return result


def apply_boundary(result: IngestResult, boundary: Polygon) -> IngestResult:
    kept, discarded = filter_by_boundary(boundary, result.regions, key=lambda r: r.polygon)
    for region in discarded:
        msg = f"feature={region.feature_index} id={region.feature_id}: no vertex inside boundary"
        LOG.info(msg)
        result.warnings.append(IngestWarning(WARN_FILTERED, region.feature_index, region.feature_id, msg))
    result.regions = kept
    result.discarded.extend(discarded)
    return result


def ingest_regions(
    path: Path,
    bounds: GPSBounds,
    boundary: Optional[Polygon] = None,
    offset: Tuple[float, float] = (0.0, 0.0),
) -> IngestResult:
    """Read a GeoJSON document and return its polygons in the local frame of ``bounds``.

    Fatal: DocumentReadError, DocumentParseError, DegenerateBoundsError.
    Per-feature problems are recorded in ``IngestResult.warnings``.
    """
    doc = read_region_document(path)
    result = process_features(iter_features(doc), bounds, offset)
    if boundary is None:
        boundary = boundary_from_gps_bounds(bounds)
    apply_boundary(result, boundary)
    LOG.info("ingested %s: %s", path, result.counts())
    return result
