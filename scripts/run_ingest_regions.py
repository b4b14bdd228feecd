from __future__ import annotations

import argparse
from pathlib import Path

from scripts.pipeline_common import (
    LOG,
    gps_bounds_from_config,
    prepare_run,
    regions_gdf,
    write_gpkg_layer,
    write_warnings,
)
from synthmap._report import write_run_card
from synthmap.errors import DegenerateBoundsError, DocumentParseError, DocumentReadError
from synthmap.regions.ingest import ingest_regions
from synthmap.runmeta import write_runmeta
from synthmap.utils.config_resolve import calibration_offset, get_params_hash, resolve_path


def main() -> int:
    ap = argparse.ArgumentParser(description="Reproject GeoJSON sub-areas into the local map frame.")
    ap.add_argument("--config", default="configs/synthmap.yaml")
    ap.add_argument("--geojson", default="", help="overrides REGION_GEOJSON")
    ap.add_argument("--run-id", default="")
    args = ap.parse_args()

    run_id, run_dir, cfg = prepare_run(args.config, "ingest", args.run_id)
    bounds = gps_bounds_from_config(cfg)
    if bounds is None:
        LOG.error("GPS_BOUNDS is not set.")
        return 2
    src = Path(args.geojson) if args.geojson else resolve_path(cfg, "REGION_GEOJSON")

    try:
        result = ingest_regions(src, bounds, offset=calibration_offset(cfg))
    except (DocumentReadError, DocumentParseError, DegenerateBoundsError) as exc:
        LOG.error("ingestion failed: %s", exc)
        return 3

    out_gpkg = run_dir / "regions_local.gpkg"
    write_gpkg_layer(out_gpkg, "retained", regions_gdf(result.regions))
    write_gpkg_layer(out_gpkg, "discarded", regions_gdf(result.discarded))
    write_warnings(run_dir / "warnings.json", result.warnings)

    write_run_card(
        run_dir / "RunCard.md",
        {
            "run_id": run_id,
            "source": str(src),
            "gps_bounds": bounds.as_list(),
            "calibration_offset": list(calibration_offset(cfg)),
            "counts": result.counts(),
        },
        warnings=result.warnings,
    )
    write_runmeta(
        run_dir,
        run_id,
        "ingest_regions",
        get_params_hash(cfg),
        inputs={"geojson": src},
        outputs={"gpkg": out_gpkg},
    )
    LOG.info("completed ingest run: %s", run_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
