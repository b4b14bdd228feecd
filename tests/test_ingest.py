import pytest
from shapely.geometry import box

from synthmap.errors import DegenerateBoundsError, DocumentParseError, DocumentReadError, UnsupportedGeometryWarning
from synthmap.projection.gps import GPSBounds, to_local
from synthmap.regions.ingest import (
    WARN_FILTERED,
    WARN_RING,
    WARN_UNSUPPORTED,
    ingest_regions,
    iter_features,
    process_features,
)

from conftest import square


def feature(geometry, properties=None, fid=None):
    out = {"type": "Feature", "geometry": geometry, "properties": properties}
    if fid is not None:
        out["id"] = fid
    return out


def polygon(lon, lat, half=0.002):
    return {"type": "Polygon", "coordinates": [square(lon, lat, half)]}


def test_point_outside_and_inside_scenario(bounds, write_geojson):
    doc = {
        "type": "FeatureCollection",
        "features": [
            feature({"type": "Point", "coordinates": [6.15, 46.21]}, fid="pt"),
            feature(polygon(7.0, 47.0), {"population": 10}, fid="far"),
            feature(polygon(6.15, 46.21), {"population": 25}, fid="near"),
        ],
    }
    result = ingest_regions(write_geojson(doc), bounds)

    assert len(result.regions) == 1
    assert result.regions[0].feature_id == "near"
    assert result.regions[0].properties == {"population": 25}
    assert len(result.discarded) == 1
    assert len(result.warnings) == 2
    assert len(result.warnings_of(WARN_UNSUPPORTED)) == 1
    assert len(result.warnings_of(WARN_RING)) == 0
    assert len(result.warnings_of(WARN_FILTERED)) == 1
    unsupported = result.warnings_of(WARN_UNSUPPORTED)[0]
    assert unsupported.feature_index == 0
    assert unsupported.feature_id == "pt"
    assert isinstance(unsupported.error, UnsupportedGeometryWarning)
    assert result.counts()["retained"] == 1


def test_polygon_is_reprojected_and_offset(bounds, write_geojson):
    doc = {"type": "FeatureCollection", "features": [feature(polygon(6.15, 46.21))]}
    plain = ingest_regions(write_geojson(doc), bounds)
    shifted = ingest_regions(write_geojson(doc, "again.geojson"), bounds, offset=(-60.0, 140.0))

    x, y = to_local((6.148, 46.208), bounds)
    minx, miny, maxx, maxy = plain.regions[0].polygon.bounds
    assert minx == pytest.approx(x)
    assert maxy == pytest.approx(y)
    sminx, sminy, _, _ = shifted.regions[0].polygon.bounds
    assert sminx == pytest.approx(minx - 60.0)
    assert sminy == pytest.approx(miny + 140.0)


def test_ring_error_skips_only_that_feature(bounds, write_geojson):
    bowtie = [[6.14, 46.20], [6.16, 46.22], [6.16, 46.20], [6.14, 46.22], [6.14, 46.20]]
    doc = {
        "type": "FeatureCollection",
        "features": [
            feature({"type": "Polygon", "coordinates": [bowtie]}, fid="bad"),
            feature({"type": "Polygon", "coordinates": [[[6.15, 46.21], [6.151, 46.21]]]}, fid="short"),
            feature(polygon(6.15, 46.21), fid="good"),
        ],
    }
    result = ingest_regions(write_geojson(doc), bounds)
    assert [r.feature_id for r in result.regions] == ["good"]
    assert [w.feature_id for w in result.warnings_of(WARN_RING)] == ["bad", "short"]


def test_polygon_with_hole(bounds, write_geojson):
    geom = {"type": "Polygon", "coordinates": [square(6.15, 46.21, 0.01), square(6.15, 46.21, 0.002)]}
    result = ingest_regions(write_geojson({"type": "FeatureCollection", "features": [feature(geom)]}), bounds)
    assert len(result.regions[0].polygon.interiors) == 1


def test_features_without_geometry_are_skipped_quietly(bounds):
    result = process_features([feature(None, {"a": 1}), feature(polygon(6.15, 46.21))], bounds, (0.0, 0.0))
    assert len(result.regions) == 1
    assert result.regions[0].feature_index == 1
    assert result.warnings == []


def test_multipolygon_is_unsupported(bounds):
    geom = {"type": "MultiPolygon", "coordinates": [[square(6.15, 46.21)]]}
    result = process_features([feature(geom, {"NOM": "Plainpalais"})], bounds, (0.0, 0.0))
    assert result.regions == []
    assert result.warnings[0].kind == WARN_UNSUPPORTED
    assert result.warnings[0].feature_id == "Plainpalais"


def test_single_feature_and_bare_geometry_documents(bounds, write_geojson):
    single = ingest_regions(write_geojson(feature(polygon(6.15, 46.21), {"k": "v"})), bounds)
    assert len(single.regions) == 1
    bare = ingest_regions(write_geojson(polygon(6.15, 46.21), "bare.geojson"), bounds)
    assert len(bare.regions) == 1
    assert bare.regions[0].properties is None


def test_custom_boundary(bounds, write_geojson):
    doc = {"type": "FeatureCollection", "features": [feature(polygon(6.15, 46.21))]}
    result = ingest_regions(write_geojson(doc), bounds, boundary=box(0, 0, 10, 10))
    assert result.regions == []
    assert len(result.discarded) == 1


def test_missing_file_is_fatal(bounds, tmp_path):
    with pytest.raises(DocumentReadError):
        ingest_regions(tmp_path / "nope.geojson", bounds)


def test_malformed_json_is_fatal(bounds, tmp_path):
    path = tmp_path / "broken.geojson"
    path.write_text('{"type": "FeatureCollection", "features": [', encoding="utf-8")
    with pytest.raises(DocumentParseError):
        ingest_regions(path, bounds)


@pytest.mark.parametrize(
    "doc",
    [
        [1, 2, 3],
        {"features": []},
        {"type": "Topology"},
        {"type": "FeatureCollection", "features": {"not": "a list"}},
    ],
)
def test_not_geojson_is_fatal(bounds, write_geojson, doc):
    with pytest.raises(DocumentParseError):
        ingest_regions(write_geojson(doc), bounds)


def test_degenerate_bounds_abort(write_geojson):
    doc = {"type": "FeatureCollection", "features": []}
    with pytest.raises(DegenerateBoundsError):
        ingest_regions(write_geojson(doc), GPSBounds(6.1, 46.2, 6.1, 46.3))


def test_iter_features_wraps_geometry():
    feats = iter_features({"type": "Point", "coordinates": [1, 2]})
    assert feats[0]["geometry"]["type"] == "Point"


@pytest.mark.parametrize("props", [["id", "name"], "NOM", 7])
def test_non_object_properties_do_not_abort(bounds, props):
    features = [
        feature(polygon(6.15, 46.21), props),
        feature({"type": "Point", "coordinates": [6.15, 46.21]}, props),
        feature(polygon(6.16, 46.22), {"NOM": "Jonction"}),
    ]
    result = process_features(features, bounds, (0.0, 0.0))
    assert [r.feature_id for r in result.regions] == [None, "Jonction"]
    assert result.regions[0].properties is None
    assert result.warnings_of(WARN_UNSUPPORTED)[0].feature_id is None
