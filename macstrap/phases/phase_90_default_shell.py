from __future__ import annotations

from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep


class DefaultShellPhase:
    phase_id = "90_default_shell"
    title = "Default shell"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        desired = profile.default_shell
        if not desired:
            return []
        return [
            ConvergenceStep(
                name=f"default-shell:{desired}",
                category=Category.SHELL_DEFAULT,
                check=lambda: actions.current_shell() == desired,
                act=lambda: actions.set_default_shell(desired),
            )
        ]
