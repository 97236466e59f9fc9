from __future__ import annotations

import logging

import pytest

from macstrap.convergence import Category, ConvergenceStep, execute_step
from macstrap.errors import NotFound, PermissionDenied
from macstrap.logging_utils import RunLogger
from macstrap.results import ActionOutcome, FailureLog, Outcome


def _boom() -> bool:
    raise RuntimeError("check exploded")


class TestExecuteStep:
    def test_satisfied_check_skips_action(self, run_log: RunLogger) -> None:
        acted = []
        step = ConvergenceStep("package:bat", Category.PACKAGE, lambda: True, lambda: acted.append(1))

        r = execute_step(step, run_log)

        assert r.outcome is Outcome.ALREADY_SATISFIED
        assert acted == []
        assert len(run_log.failures) == 0

    def test_unsatisfied_check_runs_action(self, run_log: RunLogger) -> None:
        step = ConvergenceStep("package:bat", Category.PACKAGE, lambda: False, lambda: ActionOutcome.ok("installed"))

        r = execute_step(step, run_log, phase="30_packages")

        assert r.outcome is Outcome.SUCCESS
        assert r.reason == "installed"
        assert r.phase == "30_packages"
        assert r.category == "package"

    def test_failed_action_is_recorded_once(self, run_log: RunLogger) -> None:
        step = ConvergenceStep(
            "package:zzz-nonexistent",
            Category.PACKAGE,
            lambda: False,
            lambda: ActionOutcome.failed("not found", kind="not_found"),
        )

        r = execute_step(step, run_log)

        assert r.outcome is Outcome.FAILED
        assert r.reason == "not found"
        assert r.kind == "not_found"
        assert list(run_log.failures) == [r]

    def test_raising_check_becomes_failure(self, run_log: RunLogger) -> None:
        step = ConvergenceStep("weird", Category.PACKAGE, _boom, lambda: ActionOutcome.ok())

        r = execute_step(step, run_log)

        assert r.failed
        assert r.kind == "error"
        assert "check exploded" in r.reason

    @pytest.mark.parametrize(
        "exc, kind",
        [
            (NotFound("no such app"), "not_found"),
            (PermissionDenied("chsh refused"), "permission_denied"),
            (OSError("disk full"), "error"),
        ],
    )
    def test_raising_action_keeps_error_kind(self, run_log: RunLogger, exc: Exception, kind: str) -> None:
        def act() -> ActionOutcome:
            raise exc

        r = execute_step(ConvergenceStep("s", Category.SHELL_DEFAULT, lambda: False, act), run_log)

        assert r.failed
        assert r.kind == kind

    def test_non_outcome_return_is_a_failure(self, run_log: RunLogger) -> None:
        r = execute_step(ConvergenceStep("s", Category.PACKAGE, None, lambda: None), run_log)  # type: ignore[arg-type, return-value]

        assert r.failed
        assert "NoneType" in r.reason

    def test_unconditional_step_always_acts(self, run_log: RunLogger) -> None:
        calls = []

        def act() -> ActionOutcome:
            calls.append(1)
            return ActionOutcome.ok()

        step = ConvergenceStep("brew-update", Category.MAINTENANCE, None, act)
        execute_step(step, run_log)
        execute_step(step, run_log)

        assert len(calls) == 2

    def test_failure_is_logged_at_error(self, caplog: pytest.LogCaptureFixture) -> None:
        log = RunLogger(FailureLog())
        step = ConvergenceStep("cask:iterm2", Category.CASK, lambda: False, lambda: ActionOutcome.failed("offline"))

        with caplog.at_level(logging.INFO):
            execute_step(step, log)

        errors = [rec for rec in caplog.records if rec.levelno == logging.ERROR]
        assert [rec.getMessage() for rec in errors] == ["cask:iterm2: offline"]
