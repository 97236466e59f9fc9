from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import ActionFailed, PrerequisiteMissing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
    quiet: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Logs the command (at DEBUG when ``quiet``, for read-only probes).
    - Captures stdout/stderr.
    - A missing executable raises PrerequisiteMissing.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.log(logging.DEBUG if quiet else logging.INFO, "CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise PrerequisiteMissing(f"{argv_list[0]}: command not found") from e
    except subprocess.TimeoutExpired as e:
        raise ActionFailed(f"Command timed out after {timeout}s: {_fmt_argv(argv_list)}") from e

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        detail = (p.stderr or p.stdout or "").strip()
        raise ActionFailed(f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{detail}".rstrip())

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def probe(argv: Sequence[str], **kwargs) -> CmdResult | None:
    """Run a read-only query; None when the executable is missing."""

    try:
        return run_cmd(argv, check=False, quiet=True, **kwargs)
    except PrerequisiteMissing:
        logger.debug("Probe skipped, %s not available", argv[0])
        return None
