from __future__ import annotations


class SynthMapError(Exception):
    pass


class DocumentReadError(SynthMapError):
    """Source file is missing or unreadable. Aborts the whole read."""


class DocumentParseError(SynthMapError):
    """Source file is not a well-formed document of the expected kind."""


class RingConstructionError(SynthMapError):
    pass


class DegenerateBoundsError(SynthMapError, ValueError):
    pass


BoundsDegenerateError = DegenerateBoundsError


class ReferentialIntegrityViolation(SynthMapError):
    pass


class LaneSpecParseError(SynthMapError, ValueError):
    pass


class EntityNotFound(SynthMapError, KeyError):
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "entity_not_found"


class RoadExistsError(SynthMapError):
    pass


class ModelNotNamedError(SynthMapError):
    pass


class UnsupportedGeometryWarning(UserWarning):
    pass


__all__ = [
    "BoundsDegenerateError",
    "DegenerateBoundsError",
    "DocumentParseError",
    "DocumentReadError",
    "EntityNotFound",
    "LaneSpecParseError",
    "ModelNotNamedError",
    "ReferentialIntegrityViolation",
    "RingConstructionError",
    "RoadExistsError",
    "SynthMapError",
    "UnsupportedGeometryWarning",
]
