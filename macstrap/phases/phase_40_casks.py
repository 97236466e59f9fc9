from __future__ import annotations

from functools import partial
from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep


class CasksPhase:
    phase_id = "40_casks"
    title = "GUI applications"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        return [
            ConvergenceStep(
                name=f"cask:{name}",
                category=Category.CASK,
                check=partial(actions.is_cask_installed, name),
                act=partial(actions.install_cask, name),
            )
            for name in profile.casks
        ]
