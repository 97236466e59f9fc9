from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from typing import List

from ..errors import NotFound, PrerequisiteMissing
from .command import probe, run_cmd

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^\s*(\d+)\s+(.+?)(?:\s+\([^()]*\))?\s*$")


@dataclass(frozen=True)
class StoreApp:
    app_id: int
    name: str


def parse_listing(text: str) -> List[StoreApp]:
    """Parse ``mas list`` / ``mas search`` output (``<id>  <name>  (<version>)``)."""

    apps: List[StoreApp] = []
    for line in text.splitlines():
        m = _LINE_RE.match(line)
        if m:
            apps.append(StoreApp(app_id=int(m.group(1)), name=m.group(2).strip()))
    return apps


def is_available() -> bool:
    return shutil.which("mas") is not None


def installed_apps() -> List[StoreApp]:
    r = probe(["mas", "list"])
    if r is None or not r.ok:
        return []
    return parse_listing(r.stdout)


def is_installed(*, app_id: int | None = None, name: str | None = None) -> bool:
    apps = installed_apps()
    if app_id is not None:
        return any(a.app_id == app_id for a in apps)
    if name:
        wanted = name.strip().lower()
        return any(a.name.lower() == wanted for a in apps)
    return False


def search(name: str) -> int:
    """Return the first numeric match for ``name``.

    Best-effort only: the first hit of an App Store search is not guaranteed
    to be the intended app. Prefer explicit ids in configuration.
    """

    if not is_available():
        raise PrerequisiteMissing("mas is not installed; cannot search the App Store")
    r = run_cmd(["mas", "search", name], check=False)
    hits = parse_listing(r.stdout) if r.ok else []
    if not hits:
        raise NotFound(f"App Store app '{name}' not found")
    logger.info("App Store search '%s' -> %s (%s)", name, hits[0].app_id, hits[0].name)
    return hits[0].app_id


def install(app_id: int, *, dry_run: bool = False) -> None:
    if not dry_run and not is_available():
        raise PrerequisiteMissing("mas is not installed; skipping App Store install")
    run_cmd(["mas", "install", str(app_id)], dry_run=dry_run)
