from __future__ import annotations

from functools import partial
from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep


class PackagesPhase:
    phase_id = "30_packages"
    title = "Command-line packages"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        return [
            ConvergenceStep(
                name=f"package:{name}",
                category=Category.PACKAGE,
                check=partial(actions.is_installed, name),
                act=partial(actions.install, name),
            )
            for name in profile.packages
        ]
