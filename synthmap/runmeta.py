from __future__ import annotations

import json
import platform
import subprocess
import sys
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from synthmap import __version__


def _try_git_commit(repo_root: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], cwd=str(repo_root), stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8", errors="ignore").strip()


@dataclass
class RunMeta:
    run_id: str
    created_at: str
    tool: str
    synthmap_version: str
    repo_commit: Optional[str]
    python: str
    platform: str
    params_hash: str
    inputs: Dict[str, Any]
    outputs: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def write_runmeta(
    run_dir: Path,
    run_id: str,
    tool: str,
    params_hash: str,
    inputs: Dict[str, Any],
    outputs: Dict[str, Any],
    repo_root: Optional[Path] = None,
) -> Path:
    meta = RunMeta(
        run_id=run_id,
        created_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        tool=tool,
        synthmap_version=__version__,
        repo_commit=_try_git_commit(repo_root) if repo_root is not None else None,
        python=sys.version.replace("\n", " "),
        platform=f"{platform.system()} {platform.release()}",
        params_hash=params_hash,
        inputs={k: str(v) for k, v in inputs.items()},
        outputs={k: str(v) for k, v in outputs.items()},
    )
    out = run_dir / "RunMeta.json"
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(meta.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    return out
