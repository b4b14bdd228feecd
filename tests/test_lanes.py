import pytest

from synthmap.errors import LaneSpecParseError
from synthmap.model.lanes import LaneSpec, LaneType, decode, encode


def test_default_spec_text():
    assert encode(LaneSpec()) == "dps/dps"
    assert str(LaneSpec()) == "dps/dps"


def test_decode_known_text():
    spec = decode("sbdu/dps")
    assert spec.fwd == [LaneType.SIDEWALK, LaneType.BIKING, LaneType.DRIVING, LaneType.BUS]
    assert spec.back == [LaneType.DRIVING, LaneType.PARKING, LaneType.SIDEWALK]


@pytest.mark.parametrize("text", ["dps/dps", "d/", "/s", "dd/", "ubpsd/sdpbu", "ddddd/p"])
def test_round_trip(text):
    spec = decode(text)
    assert decode(encode(spec)) == spec
    assert encode(spec) == text


def test_surrounding_whitespace_ignored():
    assert decode("  dp/ds\n") == LaneSpec([LaneType.DRIVING, LaneType.PARKING], [LaneType.DRIVING, LaneType.SIDEWALK])


@pytest.mark.parametrize("text", ["", "/", "dps", "d/p/s", "dx/dps", "d p/s", "D/S"])
def test_bad_text_rejected(text):
    with pytest.raises(LaneSpecParseError):
        decode(text)


def test_swapped():
    spec = LaneSpec([LaneType.DRIVING], [LaneType.BUS, LaneType.SIDEWALK])
    assert spec.swapped() == LaneSpec([LaneType.BUS, LaneType.SIDEWALK], [LaneType.DRIVING])
    assert spec.has_parking(True) is False
    assert LaneSpec().has_parking(False) is True
