from __future__ import annotations

from synthmap.projection.gps import GPSBounds, to_gps, to_gps_array, to_local, to_local_array, world_size

__all__ = ["GPSBounds", "to_gps", "to_gps_array", "to_local", "to_local_array", "world_size"]
