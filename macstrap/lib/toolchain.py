from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Dict

from ..errors import ActionFailed, PrerequisiteMissing
from .command import run_cmd

logger = logging.getLogger(__name__)

SUPPORTED_TOOLS = ("go",)


def go_env(home: str | None = None) -> Dict[str, str]:
    gopath = str(Path(home or os.path.expanduser("~")) / "go")
    return {"GOPATH": gopath, "GOBIN": str(Path(gopath) / "bin")}


def binary_present(binary: str, *, home: str | None = None) -> bool:
    if shutil.which(binary):
        return True
    return (Path(go_env(home)["GOBIN"]) / binary).exists()


def install(tool: str, module: str, *, home: str | None = None, dry_run: bool = False) -> None:
    """Install ``module`` with a secondary language toolchain."""

    if tool not in SUPPORTED_TOOLS:
        raise ActionFailed(f"Unsupported toolchain: {tool}")
    if not dry_run and shutil.which(tool) is None:
        raise PrerequisiteMissing(f"{tool} is not installed; cannot install {module}")
    run_cmd([tool, "install", module], env=go_env(home), dry_run=dry_run)
