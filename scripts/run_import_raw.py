from __future__ import annotations

import argparse
from pathlib import Path

from scripts.pipeline_common import LOG, prepare_run
from synthmap._report import write_run_card
from synthmap.errors import SynthMapError
from synthmap.interchange.convert import import_from_file
from synthmap.model.snapshot import save
from synthmap.runmeta import write_runmeta
from synthmap.utils.config_resolve import get_params_hash, resolve_path


def main() -> int:
    ap = argparse.ArgumentParser(description="Rebuild an editable synthetic map from a raw interchange file.")
    ap.add_argument("--config", default="configs/synthmap.yaml")
    ap.add_argument("--raw", required=True, help="raw map file")
    ap.add_argument("--name", default="", help="model name, defaults to the raw file stem")
    ap.add_argument("--run-id", default="")
    args = ap.parse_args()

    run_id, run_dir, cfg = prepare_run(args.config, "import", args.run_id)
    raw_path = Path(args.raw)
    try:
        model = import_from_file(raw_path)
        if args.name:
            model.name = args.name
        out = save(model, resolve_path(cfg, "MAPS_DIR"))
    except SynthMapError as exc:
        LOG.error("import failed: %s", exc)
        return 3

    write_run_card(
        run_dir / "RunCard.md",
        {
            "run_id": run_id,
            "raw_map": str(raw_path),
            "map": str(out),
            "intersections": len(model.intersections),
            "roads": len(model.roads),
            "buildings": len(model.buildings),
            "note": "lanes reset to defaults, road labels dropped",
        },
    )
    write_runmeta(run_dir, run_id, "import_raw", get_params_hash(cfg), {"raw_map": raw_path}, {"map": out})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
