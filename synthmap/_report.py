from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


def _plain(v: Any) -> Any:
    if isinstance(v, Path):
        return str(v)
    if isinstance(v, dict):
        return {str(k): _plain(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_plain(x) for x in v]
    return v


def md_kv(title: str, kv: Dict[str, Any]) -> str:
    lines = [f"# {title}", ""]
    for k, v in kv.items():
        v = _plain(v)
        if isinstance(v, (dict, list)):
            vv = json.dumps(v, ensure_ascii=False, indent=2)
            lines.append(f"## {k}\n```json\n{vv}\n```")
        else:
            lines.append(f"- {k}: {v}")
    lines.append("")
    return "\n".join(lines)


def md_warnings_table(rows: Iterable[Any]) -> str:
    """Markdown table of ingestion warnings (anything with kind/feature_index/feature_id/message)."""
    rows = list(rows)
    if not rows:
        return "## warnings\n\nnone\n"
    out: List[str] = ["## warnings", "", "| kind | feature | id | message |", "|---|---|---|---|"]
    for w in rows:
        msg = str(w.message).replace("|", "\\|")
        out.append(f"| {w.kind} | {w.feature_index} | {w.feature_id if w.feature_id is not None else ''} | {msg} |")
    out.append("")
    return "\n".join(out)


def write_run_card(path: Path, kv: Dict[str, Any], warnings: Optional[Iterable[Any]] = None) -> None:
    text = md_kv("RunCard", kv)
    if warnings is not None:
        text += "\n" + md_warnings_table(warnings)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
