from __future__ import annotations

import argparse

from scripts.pipeline_common import LOG, gps_bounds_from_config, prepare_run
from synthmap._report import write_run_card
from synthmap.errors import SynthMapError
from synthmap.interchange.convert import export_to_file
from synthmap.model.snapshot import load, snapshot_path
from synthmap.runmeta import write_runmeta
from synthmap.utils.config_resolve import get_params_hash, resolve_path


def main() -> int:
    ap = argparse.ArgumentParser(description="Export a saved synthetic map to the raw interchange format.")
    ap.add_argument("--config", default="configs/synthmap.yaml")
    ap.add_argument("--map", required=True, help="model name under MAPS_DIR")
    ap.add_argument("--run-id", default="")
    args = ap.parse_args()

    run_id, run_dir, cfg = prepare_run(args.config, "export", args.run_id)
    bounds = gps_bounds_from_config(cfg)
    if bounds is None:
        LOG.error("GPS_BOUNDS is not set.")
        return 2
    map_path = snapshot_path(resolve_path(cfg, "MAPS_DIR"), args.map)
    try:
        model = load(map_path)
        model.name = args.map
        out = export_to_file(model, resolve_path(cfg, "RAW_MAPS_DIR"), bounds)
    except SynthMapError as exc:
        LOG.error("export failed: %s", exc)
        return 3

    write_run_card(
        run_dir / "RunCard.md",
        {
            "run_id": run_id,
            "map": str(map_path),
            "raw_map": str(out),
            "intersections": len(model.intersections),
            "roads": len(model.roads),
            "buildings": len(model.buildings),
        },
    )
    write_runmeta(run_dir, run_id, "export_raw", get_params_hash(cfg), {"map": map_path}, {"raw_map": out})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
