from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .actions import ActionRegistry, SystemActions
from .config import DEFAULT_PROFILE, Profile, available_profiles, load_config, load_profile
from .errors import ConfigError
from .logging_utils import DEFAULT_LOG_PATH, RunLogger, configure_logging
from .phases import (
    CasksPhase,
    CleanupPhase,
    DefaultShellPhase,
    PackagesPhase,
    PrerequisitesPhase,
    RepositoriesPhase,
    SelfUpdatePhase,
    ShellConfigPhase,
    StoreAppsPhase,
    SymlinksPhase,
    ToolchainPhase,
)
from .pipeline import PlannedPhase, build_plan, log_summary, run_pipeline
from .report_store import save_report
from .results import FailureLog, RunReport

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG = 2


def build_phases():
    return [
        PrerequisitesPhase(),
        SelfUpdatePhase(),
        PackagesPhase(),
        ToolchainPhase(),
        CasksPhase(),
        StoreAppsPhase(),
        RepositoriesPhase(),
        SymlinksPhase(),
        ShellConfigPhase(),
        DefaultShellPhase(),
        CleanupPhase(),
    ]


def load(profile: str = DEFAULT_PROFILE, config_path: Optional[str] = None, **kwargs) -> Profile:
    if config_path:
        return load_config(config_path, **kwargs)
    return load_profile(profile, **kwargs)


def plan_for(profile: Profile, actions: ActionRegistry) -> List[PlannedPhase]:
    return build_plan(profile, actions, build_phases())


def run(
    *,
    profile: Profile,
    actions: Optional[ActionRegistry] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    dry_run: bool = False,
    report_path: Optional[str] = None,
) -> RunReport:
    """Converge the machine towards ``profile`` and report what happened."""

    actions = actions or SystemActions(dry_run=dry_run, brew_prefix=profile.brew_prefix, home=profile.home)
    log = RunLogger(FailureLog())

    log.info("Starting bootstrap (profile=%s, dry_run=%s)", profile.name, dry_run)
    report = run_pipeline(
        plan=plan_for(profile, actions),
        start_at=start_at,
        stop_after=stop_after,
        dry_run=dry_run,
        log=log,
    )
    log_summary(report)

    if report_path:
        try:
            save_report(report_path, report, profile=profile.name)
        except OSError as e:
            logger.warning("Could not write run report %s: %s", report_path, e)
    return report


def _print_plan(plan: List[PlannedPhase]) -> None:
    for phase in plan:
        print(f"{phase.phase_id}  {phase.title}")
        for step in phase.steps:
            print(f"    {step.name}")


def main(argv: Optional[list[str]] = None, *, actions: Optional[ActionRegistry] = None) -> int:
    p = argparse.ArgumentParser(prog="macstrap", description="Idempotent macOS workstation bootstrap")
    src = p.add_mutually_exclusive_group()
    src.add_argument(
        "--profile",
        default=DEFAULT_PROFILE,
        help=f"Built-in profile ({', '.join(available_profiles())})",
    )
    src.add_argument("--config", default=None, help="Path to a YAML profile")
    p.add_argument("--log", default=None, help=f"Append-only log file (default: profile log_path or {DEFAULT_LOG_PATH})")
    p.add_argument("--start-at", default=None, help="Start at phase_id (e.g. 70_symlinks)")
    p.add_argument("--stop-after", default=None, help="Stop after phase_id")
    p.add_argument("--dry-run", action="store_true", help="Check state but only log the actions")
    p.add_argument("--report", default=None, help="Write a run report (json|yaml)")
    p.add_argument("--list-phases", action="store_true", help="Print the plan and exit")
    p.add_argument("--allow-failures", action="store_true", help="Exit 0 even when steps failed")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.INFO

    try:
        profile = load(args.profile, args.config)
    except ConfigError as e:
        configure_logging(log_path=args.log or DEFAULT_LOG_PATH, level=level)
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG

    configure_logging(log_path=args.log or profile.log_path, level=level)

    if args.list_phases:
        _print_plan(plan_for(profile, actions or SystemActions(dry_run=True, brew_prefix=profile.brew_prefix)))
        return EXIT_OK

    try:
        report = run(
            profile=profile,
            actions=actions,
            start_at=args.start_at,
            stop_after=args.stop_after,
            dry_run=bool(args.dry_run),
            report_path=args.report,
        )
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG

    if report.ok or args.allow_failures:
        return EXIT_OK
    return EXIT_FAILURES


if __name__ == "__main__":
    raise SystemExit(main())
