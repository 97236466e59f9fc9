from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def has_line(path: str | Path, line: str, *, marker: str | None = None) -> bool:
    """True when ``path`` contains ``marker`` (default: the whole line)."""

    p = Path(path)
    if not p.exists():
        return False
    needle = marker or line.strip()
    return needle in p.read_text(encoding="utf-8", errors="replace")


def append_line(path: str | Path, line: str, *, dry_run: bool = False) -> None:
    p = Path(path)
    if dry_run:
        logger.info("Would append to %s: %s", p, line)
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    existing = p.read_text(encoding="utf-8", errors="replace") if p.exists() else ""
    prefix = "" if not existing or existing.endswith("\n") else "\n"
    with p.open("a", encoding="utf-8") as f:
        f.write(f"{prefix}{line}\n")
    logger.info("Appended to %s: %s", p, line)
