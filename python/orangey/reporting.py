from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


def append_jsonl(path: Path, row: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(row, separators=(",", ":")))
        handle.write("\n")


def read_jsonl(path: Path) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            payload = json.loads(line)
            if not isinstance(payload, dict):
                raise RuntimeError(f"Expected JSON object rows in {path.as_posix()}")
            rows.append(payload)
    return rows


class JsonlReportLogger:
    """Appends one timestamped JSON row per tool report."""

    def __init__(self, *, path: Path, tool: str) -> None:
        self.path = path
        self.tool = tool

    def log_report(self, payload: dict[str, Any]) -> None:
        row = {"tool": self.tool, "generated_at": now_iso()}
        row.update(payload)
        append_jsonl(self.path, row)
