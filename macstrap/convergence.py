from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .logging_utils import RunLogger
from .results import ActionOutcome, ExecutionResult, Outcome

logger = logging.getLogger(__name__)


class Category(str, Enum):
    PREREQUISITE = "prerequisite"
    MAINTENANCE = "maintenance"
    PACKAGE = "package"
    TOOLCHAIN = "toolchain"
    CASK = "cask"
    STORE_APP = "store-app"
    VCS_CLONE = "vcs-clone"
    SYMLINK = "symlink"
    SHELL_CONFIG = "shell-config"
    SHELL_DEFAULT = "shell-default"


@dataclass(frozen=True)
class ConvergenceStep:
    """A named desired-state check paired with the action that converges it.

    ``check`` is None for unconditional steps (e.g. ``brew update``), which
    act on every run.
    """

    name: str
    category: Category
    check: Optional[Callable[[], bool]]
    act: Callable[[], ActionOutcome]


def execute_step(step: ConvergenceStep, log: RunLogger, *, phase: Optional[str] = None) -> ExecutionResult:
    """Run one step, converting any failure into a Failed result.

    Failures are reported through ``log.fail`` (which records them in the
    run's FailureLog); nothing escapes to the caller.
    """

    category = step.category.value

    try:
        if step.check is not None and step.check():
            log.info("%s: already satisfied", step.name)
            return ExecutionResult(step.name, category, Outcome.ALREADY_SATISFIED, phase=phase)
        outcome = step.act()
        if not isinstance(outcome, ActionOutcome):
            outcome = ActionOutcome.failed(f"action returned {type(outcome).__name__}", kind="error")
    except Exception as e:
        logger.debug("Step %s raised", step.name, exc_info=True)
        outcome = ActionOutcome.from_exception(e)

    if outcome.success:
        log.info("%s: %s", step.name, outcome.detail or "done")
        return ExecutionResult(step.name, category, Outcome.SUCCESS, reason=outcome.detail, phase=phase)

    result = ExecutionResult(
        step.name,
        category,
        Outcome.FAILED,
        reason=outcome.detail or "failed",
        kind=outcome.kind or "action_failed",
        phase=phase,
    )
    log.fail("%s: %s", step.name, result.reason, result=result)
    return result
