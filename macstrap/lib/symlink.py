from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..errors import ActionFailed, PrerequisiteMissing

logger = logging.getLogger(__name__)

BACKUP_TS_FORMAT = "%Y%m%d%H%M%S"


@dataclass(frozen=True)
class LinkResult:
    source: Path
    dest: Path
    backup: Optional[Path] = None
    replaced_link: bool = False


def is_linked(source: str | Path, dest: str | Path) -> bool:
    """True when ``dest`` is a symlink whose target is exactly ``source``."""

    d = Path(dest)
    if not d.is_symlink():
        return False
    try:
        return os.readlink(d) == str(source)
    except OSError:
        return False


def backup_path(dest: Path, *, now: Optional[datetime] = None) -> Path:
    """``<dest>.backup.<timestamp>``, suffixed ``.1``, ``.2``... if already taken."""

    ts = (now or datetime.now()).strftime(BACKUP_TS_FORMAT)
    base = f"{dest.name}.backup.{ts}"
    candidate = dest.with_name(base)
    n = 1
    while candidate.exists() or candidate.is_symlink():
        candidate = dest.with_name(f"{base}.{n}")
        n += 1
    return candidate


def _replace_with_symlink(source: Path, dest: Path) -> None:
    # Build the link beside dest, then rename over it so dest is never missing.
    tmp = dest.with_name(f".{dest.name}.macstrap-{os.getpid()}.tmp")
    if tmp.is_symlink() or tmp.exists():
        tmp.unlink()
    os.symlink(str(source), str(tmp))
    try:
        os.replace(tmp, dest)
    except OSError:
        tmp.unlink()
        raise


def backup_and_link(
    source: str | Path,
    dest: str | Path,
    *,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> LinkResult:
    """Point ``dest`` at ``source``, moving any real file/dir at ``dest`` aside first.

    - The parent of ``dest`` is created if needed.
    - An existing symlink at ``dest`` is replaced unconditionally.
    - An existing file or directory is renamed to a timestamped backup.
    - A missing ``source`` is refused (nothing is moved) outside dry-run.
    """

    src = Path(source)
    d = Path(dest)

    if not src.exists() and not src.is_symlink():
        if not dry_run:
            raise PrerequisiteMissing(f"Link source does not exist: {src}")
        logger.info("Link source %s missing (dry-run)", src)

    backup: Optional[Path] = None
    replaced_link = d.is_symlink()

    if dry_run:
        if not replaced_link and d.exists():
            backup = backup_path(d, now=now)
            logger.info("Would back up %s -> %s", d, backup)
        logger.info("Would link %s -> %s", d, src)
        return LinkResult(source=src, dest=d, backup=backup, replaced_link=replaced_link)

    try:
        d.parent.mkdir(parents=True, exist_ok=True)
        if not replaced_link and d.exists():
            backup = backup_path(d, now=now)
            d.rename(backup)
            logger.info("Backed up %s -> %s", d, backup)
        _replace_with_symlink(src, d)
    except OSError as e:
        raise ActionFailed(f"Could not link {d} -> {src}: {e}") from e

    logger.info("Linked %s -> %s", d, src)
    return LinkResult(source=src, dest=d, backup=backup, replaced_link=replaced_link)
