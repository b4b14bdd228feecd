from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from shapely import contains as shp_contains
from shapely import points as shp_points

from synthmap.model.model import Model
from synthmap.regions.ingest import Region

LOG = logging.getLogger("regions.population")

DEFAULT_SEED = 1312


def region_population(region: Region, key: str) -> Optional[int]:
    props = region.properties or {}
    raw: Any = props.get(key)
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return int(round(value))


def homes_in_region(model: Model, region: Region) -> List[int]:
    ids = model.building_ids()
    if not ids:
        return []
    centers = np.array([model.buildings[b].center for b in ids], dtype=np.float64)
    inside = shp_contains(region.polygon, shp_points(centers))
    return [b for b, ok in zip(ids, np.atleast_1d(inside)) if ok]


def distribute_residents(
    model: Model,
    regions: Sequence[Region],
    population_key: str = "population",
    seed: int = DEFAULT_SEED,
) -> Dict[int, int]:
    """Spread each region's population over the buildings inside it.

    Every resident picks a home uniformly at random among the buildings whose center lies
    in the region. Buildings outside every usable region keep their current count.
    """
    rng = np.random.default_rng(seed)
    assigned: Dict[int, int] = {}
    for region in regions:
        pop = region_population(region, population_key)
        if pop is None:
            LOG.warning("region %s has no usable %r, skipped", region.feature_id, population_key)
            continue
        homes = homes_in_region(model, region)
        if not homes:
            LOG.warning("region %s has no buildings, %d residents unassigned", region.feature_id, pop)
            continue
        counts = rng.multinomial(pop, np.full(len(homes), 1.0 / len(homes)))
        for bid, n in zip(homes, counts):
            model.set_building_residents(bid, int(n))
            assigned[bid] = int(n)
        LOG.info("region %s: %d residents over %d buildings", region.feature_id, pop, len(homes))
    return assigned
