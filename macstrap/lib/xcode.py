from __future__ import annotations

import logging
import time
from typing import Callable

from ..errors import ActionFailed
from .command import probe, run_cmd

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 1800.0
DEFAULT_POLL_INTERVAL_S = 5.0


def cli_tools_installed() -> bool:
    r = probe(["xcode-select", "-p"])
    return r is not None and r.ok


def install_cli_tools(
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    dry_run: bool = False,
    is_installed: Callable[[], bool] = cli_tools_installed,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """Trigger the Command Line Tools installer and wait for it to finish.

    The GUI installer runs asynchronously, so completion is polled at a fixed
    interval until ``timeout_s`` elapses.
    """

    run_cmd(["xcode-select", "--install"], check=False, dry_run=dry_run)
    if dry_run:
        return

    deadline = clock() + timeout_s
    while not is_installed():
        if clock() >= deadline:
            raise ActionFailed(f"Timed out after {timeout_s:.0f}s waiting for Xcode Command Line Tools")
        logger.info("Waiting for Xcode Command Line Tools to install...")
        sleep(poll_interval_s)
    logger.info("Xcode Command Line Tools installed")
