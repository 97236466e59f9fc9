from __future__ import annotations

from functools import partial
from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep


class SelfUpdatePhase:
    """Package manager update/upgrade and third-party taps."""

    phase_id = "20_self_update"
    title = "Package manager self-update"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        steps: List[ConvergenceStep] = []
        if profile.maintenance("update"):
            steps.append(ConvergenceStep("brew-update", Category.MAINTENANCE, None, actions.brew_update))
        if profile.maintenance("upgrade"):
            steps.append(ConvergenceStep("brew-upgrade", Category.MAINTENANCE, None, actions.brew_upgrade))
        for name in profile.taps:
            steps.append(
                ConvergenceStep(
                    name=f"tap:{name}",
                    category=Category.MAINTENANCE,
                    check=partial(actions.is_tapped, name),
                    act=partial(actions.tap, name),
                )
            )
        return steps
