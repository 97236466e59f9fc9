from __future__ import annotations

import getpass
import logging
import os
from pathlib import Path

from ..errors import ActionFailed, PermissionDenied, PrerequisiteMissing
from .command import probe, run_cmd

logger = logging.getLogger(__name__)

SHELLS_FILE = "/etc/shells"


def current_shell() -> str:
    """Login shell of the current account.

    Uses the directory service record on macOS and falls back to ``$SHELL``.
    """

    r = probe(["dscl", ".", "-read", os.path.expanduser("~"), "UserShell"])
    if r is not None and r.ok:
        for line in r.stdout.splitlines():
            if line.startswith("UserShell:"):
                return line.split(":", 1)[1].strip()
    return os.environ.get("SHELL", "")


def is_registered(shell_path: str, *, shells_file: str = SHELLS_FILE) -> bool:
    p = Path(shells_file)
    if not p.exists():
        return False
    lines = {line.strip() for line in p.read_text(encoding="utf-8").splitlines()}
    return shell_path in lines


def register(shell_path: str, *, shells_file: str = SHELLS_FILE, dry_run: bool = False) -> None:
    """Append ``shell_path`` to the allowed-shells list (needs sudo)."""

    if is_registered(shell_path, shells_file=shells_file):
        return
    try:
        run_cmd(["sudo", "tee", "-a", shells_file], input_text=shell_path + "\n", dry_run=dry_run)
    except ActionFailed as e:
        raise PermissionDenied(f"Could not register {shell_path} in {shells_file}: {e}") from e
    logger.info("Registered %s in %s", shell_path, shells_file)


def change_default(shell_path: str, *, shells_file: str = SHELLS_FILE, dry_run: bool = False) -> None:
    """Make ``shell_path`` the account's login shell."""

    if not dry_run and not Path(shell_path).exists():
        raise PrerequisiteMissing(f"Shell {shell_path} does not exist")

    register(shell_path, shells_file=shells_file, dry_run=dry_run)
    try:
        run_cmd(["chsh", "-s", shell_path, getpass.getuser()], dry_run=dry_run)
    except ActionFailed as e:
        raise PermissionDenied(f"chsh rejected {shell_path}: {e}") from e
