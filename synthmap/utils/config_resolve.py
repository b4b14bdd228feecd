from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

import yaml


REQUIRED_KEYS = [
    "DATA_ROOT",
    "MAPS_DIR",
    "RAW_MAPS_DIR",
    "REGION_GEOJSON",
    "GPS_BOUNDS",
    "CALIBRATION_OFFSET",
    "POPULATION_KEY",
    "RNG_SEED",
    "OVERWRITE",
]

# Offset that lines the Geneva GIREC sub-areas up with the imported map. Hand-tuned for
# that one data source; other sources should set CALIBRATION_OFFSET explicitly.
DEFAULT_CALIBRATION_OFFSET = (-60.0, 140.0)

DEFAULTS: Dict[str, Any] = {
    "DATA_ROOT": "data",
    "MAPS_DIR": "synthetic_maps",
    "RAW_MAPS_DIR": "raw_maps",
    "REGION_GEOJSON": "system/ch/geneva/additional_data/GEO_GIREC_simplified.json",
    "GPS_BOUNDS": None,
    "CALIBRATION_OFFSET": list(DEFAULT_CALIBRATION_OFFSET),
    "POPULATION_KEY": "population",
    "RNG_SEED": 1312,
    "OVERWRITE": True,
}


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return dict(data)


def _detect_data_root(cfg: Dict[str, Any]) -> str:
    env_var = os.environ.get("SYNTHMAP_DATA_ROOT", "").strip()
    if env_var:
        return env_var
    return str(cfg.get("DATA_ROOT") or DEFAULTS["DATA_ROOT"]).strip()


def _normalize(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _normalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [_normalize(v) for v in obj]
    return obj


def get_params_hash(cfg: Dict[str, Any]) -> str:
    payload = _normalize(dict(cfg))
    raw = json.dumps(payload, sort_keys=True, ensure_ascii=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha1(raw).hexdigest()


def _write_resolved(run_dir: Path, cfg: Dict[str, Any]) -> None:
    run_dir.mkdir(parents=True, exist_ok=True)
    out_path = run_dir / "resolved_config.yaml"
    with out_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(_normalize(cfg), f, sort_keys=False, allow_unicode=False)
    params_hash = get_params_hash(cfg)
    (run_dir / "params_hash.txt").write_text(params_hash + "\n", encoding="utf-8")


def _assert_required(cfg: Dict[str, Any], required: Iterable[str]) -> None:
    missing = [k for k in required if k not in cfg]
    if missing:
        raise KeyError(f"Missing required keys: {missing}")


def _check_types(cfg: Dict[str, Any]) -> None:
    offset = cfg["CALIBRATION_OFFSET"]
    if not isinstance(offset, (list, tuple)) or len(offset) != 2:
        raise ValueError(f"CALIBRATION_OFFSET must be [dx, dy], got {offset!r}")
    bounds = cfg["GPS_BOUNDS"]
    if bounds is not None and (not isinstance(bounds, (list, tuple)) or len(bounds) != 4):
        raise ValueError(f"GPS_BOUNDS must be [min_lon, min_lat, max_lon, max_lat], got {bounds!r}")


def resolve_config(base_cfg: Dict[str, Any], run_dir: Path) -> Dict[str, Any]:
    cfg = dict(base_cfg)
    for k, v in DEFAULTS.items():
        if k not in cfg:
            cfg[k] = v

    cfg["DATA_ROOT"] = _detect_data_root(cfg)

    _assert_required(cfg, REQUIRED_KEYS)
    _check_types(cfg)
    _write_resolved(run_dir, cfg)
    return cfg


def resolve_path(cfg: Dict[str, Any], key: str) -> Path:
    p = Path(str(cfg[key]))
    if p.is_absolute():
        return p
    return Path(str(cfg["DATA_ROOT"])) / p


def calibration_offset(cfg: Dict[str, Any]) -> Tuple[float, float]:
    dx, dy = cfg["CALIBRATION_OFFSET"]
    return float(dx), float(dy)


__all__ = [
    "DEFAULT_CALIBRATION_OFFSET",
    "REQUIRED_KEYS",
    "calibration_offset",
    "get_params_hash",
    "load_yaml",
    "resolve_config",
    "resolve_path",
]
