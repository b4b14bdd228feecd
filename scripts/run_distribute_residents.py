from __future__ import annotations

import argparse
from pathlib import Path

from scripts.pipeline_common import LOG, gps_bounds_from_config, prepare_run, write_warnings
from synthmap._report import write_run_card
from synthmap.errors import SynthMapError
from synthmap.model.snapshot import load, save, snapshot_path
from synthmap.regions.ingest import ingest_regions
from synthmap.regions.population import distribute_residents
from synthmap.runmeta import write_runmeta
from synthmap.utils.config_resolve import calibration_offset, get_params_hash, resolve_path


def main() -> int:
    ap = argparse.ArgumentParser(description="Assign residents to a saved map's buildings from sub-area stats.")
    ap.add_argument("--config", default="configs/synthmap.yaml")
    ap.add_argument("--map", required=True, help="model name under MAPS_DIR")
    ap.add_argument("--geojson", default="", help="overrides REGION_GEOJSON")
    ap.add_argument("--run-id", default="")
    args = ap.parse_args()

    run_id, run_dir, cfg = prepare_run(args.config, "residents", args.run_id)
    bounds = gps_bounds_from_config(cfg)
    if bounds is None:
        LOG.error("GPS_BOUNDS is not set.")
        return 2
    maps_dir = resolve_path(cfg, "MAPS_DIR")
    map_path = snapshot_path(maps_dir, args.map)
    src = Path(args.geojson) if args.geojson else resolve_path(cfg, "REGION_GEOJSON")

    try:
        model = load(map_path)
        result = ingest_regions(src, bounds, offset=calibration_offset(cfg))
    except SynthMapError as exc:
        LOG.error("residents run failed: %s", exc)
        return 3
    LOG.info("number of sub regions: %d", len(result.regions))

    assigned = distribute_residents(
        model,
        result.regions,
        population_key=str(cfg["POPULATION_KEY"]),
        seed=int(cfg["RNG_SEED"]),
    )
    model.name = args.map
    out = save(model, maps_dir)
    write_warnings(run_dir / "warnings.json", result.warnings)

    write_run_card(
        run_dir / "RunCard.md",
        {
            "run_id": run_id,
            "map": str(map_path),
            "source": str(src),
            "counts": result.counts(),
            "buildings_assigned": len(assigned),
            "residents_total": sum(assigned.values()),
        },
        warnings=result.warnings,
    )
    write_runmeta(
        run_dir,
        run_id,
        "distribute_residents",
        get_params_hash(cfg),
        inputs={"map": map_path, "geojson": src},
        outputs={"map": out},
    )
    LOG.info("completed residents run: %s", run_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
