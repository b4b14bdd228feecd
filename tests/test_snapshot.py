import json

import pytest

from synthmap.errors import DocumentParseError, DocumentReadError, ModelNotNamedError
from synthmap.model import BACKWARDS, FORWARDS, IntersectionType, Model
from synthmap.model.snapshot import load, save, snapshot_path, to_dict


def _decorate(m):
    m.edit_lanes((0, 1), "sdd/bu")
    m.set_road_label((0, 1), FORWARDS, "Rue de Lausanne")
    m.set_intersection_label(1, "Cornavin")
    m.set_intersection_type(2, IntersectionType.TRAFFIC_SIGNAL)
    m.set_building_label(0, "Gare")
    m.set_building_residents(0, 7)
    return m


def test_save_then_load_gives_equal_model(tmp_path, small_model):
    m = _decorate(small_model)
    path = m.save(tmp_path)
    assert path == snapshot_path(tmp_path, "small")
    loaded = load(path)
    assert loaded == m
    assert loaded.get_road_label((0, 1), BACKWARDS) is None
    assert loaded.get_lanes((0, 1)) == "sdd/bu"


def test_counters_survive_deletes(tmp_path, small_model):
    small_model.remove_intersection(2)
    small_model.remove_building(0)
    loaded = load(save(small_model, tmp_path))
    assert loaded.create_intersection((1, 1)) == 3
    assert loaded.create_building((1, 1)) == 1


def test_unnamed_model_cannot_be_saved(tmp_path):
    with pytest.raises(ModelNotNamedError):
        Model().save(tmp_path)


def test_missing_and_bad_files(tmp_path, small_model):
    with pytest.raises(DocumentReadError):
        load(tmp_path / "nope.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(DocumentParseError):
        load(bad)
    other = tmp_path / "other.json"
    other.write_text(json.dumps({"format": "something_else"}), encoding="utf-8")
    with pytest.raises(DocumentParseError):
        load(other)


def test_dangling_road_rejected(tmp_path, small_model):
    data = to_dict(small_model)
    data["intersections"] = [i for i in data["intersections"] if i["id"] != 1]
    path = tmp_path / "dangling.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(DocumentParseError, match="dangling"):
        load(path)


def _write(tmp_path, data):
    path = tmp_path / "edited.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_duplicate_road_rejected(tmp_path, small_model):
    data = to_dict(small_model)
    data["roads"].append(
        {"i1": 1, "i2": 0, "lanes": {"fwd": ["Bus"], "back": []}, "fwd_label": None, "back_label": None}
    )
    with pytest.raises(DocumentParseError, match="duplicate_road"):
        load(_write(tmp_path, data))


def test_road_to_itself_rejected(tmp_path, small_model):
    data = to_dict(small_model)
    data["roads"][0]["i2"] = data["roads"][0]["i1"]
    with pytest.raises(DocumentParseError, match="road_to_itself"):
        load(_write(tmp_path, data))


@pytest.mark.parametrize("version", ["x", None, [1]])
def test_bad_version_rejected(tmp_path, small_model, version):
    data = to_dict(small_model)
    data["version"] = version
    with pytest.raises(DocumentParseError):
        load(_write(tmp_path, data))


def test_newer_version_rejected(tmp_path, small_model):
    data = to_dict(small_model)
    data["version"] = 99
    with pytest.raises(DocumentParseError, match="unsupported"):
        load(_write(tmp_path, data))
