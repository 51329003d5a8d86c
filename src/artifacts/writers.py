from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from src.utils.io import write_bytes, write_text


def write_car_info(path: Path, clean_json: bytes) -> None:
    write_bytes(path, clean_json + b"\n")


def write_run_summary(path: Path, summary: Dict[str, object], error: Optional[str] = None) -> None:
    lines: List[str] = ["# Recognition Run", ""]
    for key in ("run_id", "started_at", "mode", "provider", "photo", "mime_type"):
        if key in summary:
            lines.append(f"- {key}: {summary[key]}")
    if summary.get("text_source"):
        lines.extend(["", "## Extraction"])
        lines.append(f"- text_source: {summary['text_source']}")
        if summary.get("strategy"):
            lines.append(f"- strategy: {summary['strategy']}")
    usage = summary.get("usage")
    if isinstance(usage, dict) and usage:
        lines.extend(["", "## Usage"])
        lines.extend([f"- {key}: {value}" for key, value in usage.items()])
    if error:
        lines.extend(["", "## Error", error])
    write_text(path, "\n".join(lines) + "\n")
