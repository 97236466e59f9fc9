from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .actions import ActionRegistry
from .config import Profile
from .convergence import ConvergenceStep, execute_step
from .errors import ConfigError
from .logging_utils import RunLogger
from .results import ExecutionResult, FailureLog, Outcome, RunReport

logger = logging.getLogger(__name__)


class Phase(Protocol):
    """Builds the convergence steps of one phase from the profile."""

    phase_id: str
    title: str

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        ...


@dataclass(frozen=True)
class PlannedPhase:
    phase_id: str
    title: str
    steps: List[ConvergenceStep]


def build_plan(profile: Profile, actions: ActionRegistry, phases: Sequence[Phase]) -> List[PlannedPhase]:
    """Expand every phase into its steps, in declaration order."""

    return [PlannedPhase(p.phase_id, p.title, list(p.build(profile, actions))) for p in phases]


def _check_phase_id(plan: Sequence[PlannedPhase], phase_id: Optional[str], flag: str) -> None:
    if phase_id is not None and phase_id not in {p.phase_id for p in plan}:
        known = ", ".join(p.phase_id for p in plan)
        raise ConfigError(f"{flag}: unknown phase '{phase_id}' (known: {known})")


def run_pipeline(
    *,
    plan: Sequence[PlannedPhase],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    log: Optional[RunLogger] = None,
) -> RunReport:
    """Execute every step of every phase exactly once, in order.

    A failed step is recorded and the run continues with the next step;
    phases never abort each other.
    """

    _check_phase_id(plan, start_at, "--start-at")
    _check_phase_id(plan, stop_after, "--stop-after")

    failures = log.failures if log is not None else FailureLog()
    log = log or RunLogger(failures)

    results: List[ExecutionResult] = []
    ran: List[str] = []

    started = start_at is None

    for phase in plan:
        if not started:
            if phase.phase_id == start_at:
                started = True
            else:
                continue

        if phase.steps:
            log.info("== %s (%s): %d step(s)", phase.title, phase.phase_id, len(phase.steps))
            for step in phase.steps:
                results.append(execute_step(step, log, phase=phase.phase_id))
        else:
            logger.debug("Phase %s has nothing to do", phase.phase_id)
        ran.append(phase.phase_id)

        if stop_after is not None and phase.phase_id == stop_after:
            log.info("Stopping after %s", stop_after)
            break

    return RunReport(results=results, failures=failures, ran_phases=ran, dry_run=dry_run)


def render_summary(report: RunReport) -> List[str]:
    total = len(report.results)
    satisfied = report.count(Outcome.ALREADY_SATISFIED)
    changed = report.count(Outcome.SUCCESS)
    prefix = "[dry-run] " if report.dry_run else ""

    if report.ok:
        return [f"{prefix}All {total} steps satisfied ({satisfied} already in place, {changed} converged)."]

    lines = [f"{prefix}{len(report.failures)} of {total} steps failed, listed below:"]
    for r in report.failures:
        kind = f" [{r.kind}]" if r.kind else ""
        lines.append(f"  - {r.step}{kind}: {r.reason}")
    lines.append("Re-run after fixing the issues above; completed steps will be skipped.")
    return lines


def log_summary(report: RunReport, *, log: Optional[logging.Logger] = None) -> None:
    """Emit the end-of-run summary (not recorded as further failures)."""

    out = log or logging.getLogger("macstrap.run")
    lines = render_summary(report)
    level = logging.INFO if report.ok else logging.ERROR
    for line in lines:
        out.log(level, line)
