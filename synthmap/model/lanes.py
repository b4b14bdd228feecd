"""Lane composition of a road and its compact text form.

``dps/dps`` reads as driving, parking, sidewalk going forward, then the same going
backward. Lanes are listed from the center line outward.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from synthmap.errors import LaneSpecParseError


class LaneType(str, Enum):
    DRIVING = "Driving"
    PARKING = "Parking"
    SIDEWALK = "Sidewalk"
    BIKING = "Biking"
    BUS = "Bus"


LANE_CHARS = {
    LaneType.DRIVING: "d",
    LaneType.PARKING: "p",
    LaneType.SIDEWALK: "s",
    LaneType.BIKING: "b",
    LaneType.BUS: "u",
}
CHAR_LANES = {c: lt for lt, c in LANE_CHARS.items()}
DIRECTION_SEP = "/"


def default_lanes() -> List[LaneType]:
    return [LaneType.DRIVING, LaneType.PARKING, LaneType.SIDEWALK]


@dataclass
class LaneSpec:
    fwd: List[LaneType] = field(default_factory=default_lanes)
    back: List[LaneType] = field(default_factory=default_lanes)

    def swapped(self) -> "LaneSpec":
        return LaneSpec(list(self.back), list(self.fwd))

    def has_parking(self, forwards: bool) -> bool:
        lanes = self.fwd if forwards else self.back
        return LaneType.PARKING in lanes

    def __str__(self) -> str:
        return encode(self)


def encode(spec: LaneSpec) -> str:
    fwd = "".join(LANE_CHARS[lt] for lt in spec.fwd)
    back = "".join(LANE_CHARS[lt] for lt in spec.back)
    return f"{fwd}{DIRECTION_SEP}{back}"


def decode(text: str) -> LaneSpec:
    raw = str(text).strip()
    if raw.count(DIRECTION_SEP) != 1:
        raise LaneSpecParseError(f"bad_lane_spec:{text!r}: need exactly one '{DIRECTION_SEP}'")
    fwd_raw, back_raw = raw.split(DIRECTION_SEP)
    try:
        fwd = [CHAR_LANES[c] for c in fwd_raw]
        back = [CHAR_LANES[c] for c in back_raw]
    except KeyError as exc:
        raise LaneSpecParseError(f"bad_lane_spec:{text!r}: unknown lane {exc.args[0]!r}") from None
    if not fwd and not back:
        raise LaneSpecParseError(f"bad_lane_spec:{text!r}: no lanes")
    return LaneSpec(fwd, back)
