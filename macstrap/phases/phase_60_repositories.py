from __future__ import annotations

from functools import partial
from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep


class RepositoriesPhase:
    phase_id = "60_repositories"
    title = "Repository clones"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        return [
            ConvergenceStep(
                name=f"clone:{repo.dest}",
                category=Category.VCS_CLONE,
                check=partial(actions.is_cloned, repo.dest),
                act=partial(actions.clone, repo.url, repo.dest),
            )
            for repo in profile.repositories
        ]
