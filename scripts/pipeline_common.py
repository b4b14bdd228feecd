from __future__ import annotations

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import geopandas as gpd

from synthmap._io import ensure_dir, write_json
from synthmap.projection.gps import GPSBounds
from synthmap.regions.ingest import IngestWarning, Region
from synthmap.utils.config_resolve import load_yaml, resolve_config

LOG = logging.getLogger("pipeline_common")


def setup_logging(log_path: Path) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=[
            logging.FileHandler(log_path, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def ensure_overwrite(path: Path) -> None:
    if not path.exists():
        return
    if path.is_dir():
        shutil.rmtree(path)
    else:
        path.unlink()


def now_ts() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def prepare_run(config_path: str, prefix: str, run_id: str = "") -> tuple:
    """Create ``runs/<prefix>_<run_id>``, start logging there and resolve the config."""
    run_id = run_id or now_ts()
    run_dir = Path("runs") / f"{prefix}_{run_id}"
    base = load_yaml(Path(config_path))
    if bool(base.get("OVERWRITE", True)):
        ensure_overwrite(run_dir)
    ensure_dir(run_dir)
    setup_logging(run_dir / "run.log")
    LOG.info("run_id=%s", run_id)
    cfg = resolve_config(base, run_dir)
    return run_id, run_dir, cfg


def gps_bounds_from_config(cfg: Dict[str, Any]) -> Optional[GPSBounds]:
    if cfg.get("GPS_BOUNDS") is None:
        return None
    return GPSBounds.from_list(cfg["GPS_BOUNDS"])


def regions_gdf(regions: Sequence[Region]) -> gpd.GeoDataFrame:
    rows = [
        {
            "feature_index": r.feature_index,
            "feature_id": None if r.feature_id is None else str(r.feature_id),
            "properties_json": json.dumps(r.properties or {}, ensure_ascii=False, default=str),
        }
        for r in regions
    ]
    if not rows:
        return gpd.GeoDataFrame(
            columns=["feature_index", "feature_id", "properties_json", "geometry"], geometry=[]
        )
    return gpd.GeoDataFrame(rows, geometry=[r.polygon for r in regions])


def write_gpkg_layer(path: Path, layer: str, gdf: gpd.GeoDataFrame) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if gdf.empty:
        LOG.info("layer %s is empty, not written", layer)
        return
    gdf.to_file(path, layer=layer, driver="GPKG")


def write_warnings(path: Path, warnings: List[IngestWarning]) -> None:
    payload = [
        {
            "kind": w.kind,
            "feature_index": w.feature_index,
            "feature_id": None if w.feature_id is None else str(w.feature_id),
            "message": w.message,
        }
        for w in warnings
    ]
    write_json(path, payload)


__all__ = [
    "LOG",
    "ensure_overwrite",
    "gps_bounds_from_config",
    "now_ts",
    "prepare_run",
    "regions_gdf",
    "setup_logging",
    "write_gpkg_layer",
    "write_warnings",
]
