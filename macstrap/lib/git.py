from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ActionFailed
from .command import run_cmd

logger = logging.getLogger(__name__)


def is_cloned(dest: str) -> bool:
    return Path(dest).is_dir()


def clone(url: str, dest: str, *, dry_run: bool = False) -> bool:
    """Clone ``url`` into ``dest`` unless ``dest`` already exists.

    Returns True when a clone was performed. A destination that exists but is
    not a directory is an error rather than a finished clone.
    """

    d = Path(dest)
    if d.exists() and not d.is_dir():
        raise ActionFailed(f"{d} exists and is not a directory")
    if d.exists():
        logger.info("Repository already present: %s", d)
        return False
    if not dry_run:
        d.parent.mkdir(parents=True, exist_ok=True)
    run_cmd(["git", "clone", url, str(d)], dry_run=dry_run)
    return True
