from __future__ import annotations

import logging
from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep

logger = logging.getLogger(__name__)


class PrerequisitesPhase:
    phase_id = "10_prerequisites"
    title = "Prerequisite tools"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        steps: List[ConvergenceStep] = []

        if profile.install_xcode_cli:
            timeout_s = profile.xcode_timeout_s
            interval_s = profile.xcode_poll_interval_s
            steps.append(
                ConvergenceStep(
                    name="xcode-cli-tools",
                    category=Category.PREREQUISITE,
                    check=actions.xcode_installed,
                    act=lambda: actions.install_xcode(timeout_s=timeout_s, poll_interval_s=interval_s),
                )
            )

        if profile.install_homebrew:
            steps.append(
                ConvergenceStep(
                    name="homebrew",
                    category=Category.PREREQUISITE,
                    check=actions.brew_installed,
                    act=actions.install_brew,
                )
            )
        return steps
