from __future__ import annotations

from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep


class CleanupPhase:
    phase_id = "95_cleanup"
    title = "Package manager cleanup"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        if not profile.maintenance("cleanup"):
            return []
        return [ConvergenceStep("brew-cleanup", Category.MAINTENANCE, None, actions.brew_cleanup)]
