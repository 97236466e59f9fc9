from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import yaml

from .results import RunReport

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def report_document(report: RunReport, *, profile: str) -> Dict[str, Any]:
    doc = report.to_dict()
    doc["profile"] = profile
    doc["finished_at"] = datetime.now(timezone.utc).isoformat(timespec="seconds")
    return doc


def save_report(path: str, report: RunReport, *, profile: str) -> None:
    """Write the run's results as JSON or YAML (by extension)."""

    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)

    doc = report_document(report, profile=profile)
    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(doc, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(doc, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.info("Run report written to %s", p)


def load_report(path: str) -> Dict[str, Any]:
    p = Path(path).expanduser()
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text) if _detect_format(p) in {"yaml", "yml"} else json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Report file must be an object/dict, got {type(data)}")
    return data
