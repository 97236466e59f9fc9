from __future__ import annotations

import logging
import platform
import shutil
from pathlib import Path

from ..errors import PrerequisiteMissing
from .command import probe, run_cmd

logger = logging.getLogger(__name__)

INSTALL_SCRIPT_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"


def default_prefix(machine: str | None = None) -> str:
    """Homebrew prefix for the running architecture."""

    arch = (machine or platform.machine()).lower()
    if arch in {"arm64", "aarch64"}:
        return "/opt/homebrew"
    return "/usr/local"


def brew_bin(prefix: str | None = None) -> str | None:
    """Locate brew on PATH, then under the prefix (covers a fresh install in this run)."""

    found = shutil.which("brew")
    if found:
        return found
    candidate = Path(prefix or default_prefix()) / "bin" / "brew"
    if candidate.exists():
        return str(candidate)
    return None


def _require_brew(prefix: str | None = None, *, dry_run: bool = False) -> str:
    b = brew_bin(prefix)
    if b:
        return b
    if dry_run:
        return "brew"
    raise PrerequisiteMissing("Homebrew is not installed (brew not found)")


def is_brew_installed(prefix: str | None = None) -> bool:
    return brew_bin(prefix) is not None


def install_brew(*, dry_run: bool = False) -> None:
    """Run the official Homebrew installer script."""

    run_cmd(
        ["/bin/bash", "-c", f'/bin/bash -c "$(curl -fsSL {INSTALL_SCRIPT_URL})"'],
        env={"NONINTERACTIVE": "1"},
        dry_run=dry_run,
    )


def formula_installed(name: str, *, prefix: str | None = None) -> bool:
    b = brew_bin(prefix)
    if not b:
        return False
    r = probe([b, "list", "--formula", name])
    return r is not None and r.ok


def cask_installed(name: str, *, prefix: str | None = None) -> bool:
    b = brew_bin(prefix)
    if not b:
        return False
    r = probe([b, "list", "--cask", name])
    return r is not None and r.ok


def install_formula(name: str, *, prefix: str | None = None, dry_run: bool = False) -> None:
    run_cmd([_require_brew(prefix, dry_run=dry_run), "install", name], dry_run=dry_run)


def install_cask(name: str, *, prefix: str | None = None, dry_run: bool = False) -> None:
    run_cmd([_require_brew(prefix, dry_run=dry_run), "install", "--cask", name], dry_run=dry_run)


def tapped(tap: str, *, prefix: str | None = None) -> bool:
    b = brew_bin(prefix)
    if not b:
        return False
    r = probe([b, "tap"])
    if r is None or not r.ok:
        return False
    return tap.lower() in {line.strip().lower() for line in r.stdout.splitlines()}


def tap(name: str, *, prefix: str | None = None, dry_run: bool = False) -> None:
    run_cmd([_require_brew(prefix, dry_run=dry_run), "tap", name], dry_run=dry_run)


def update(*, prefix: str | None = None, dry_run: bool = False) -> None:
    run_cmd([_require_brew(prefix, dry_run=dry_run), "update"], dry_run=dry_run)


def upgrade(*, prefix: str | None = None, dry_run: bool = False) -> None:
    run_cmd([_require_brew(prefix, dry_run=dry_run), "upgrade"], dry_run=dry_run)


def cleanup(*, prefix: str | None = None, dry_run: bool = False) -> None:
    run_cmd([_require_brew(prefix, dry_run=dry_run), "cleanup"], dry_run=dry_run)
