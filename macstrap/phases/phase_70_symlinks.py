from __future__ import annotations

from functools import partial
from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep


class SymlinksPhase:
    """Backup-and-link each configured source/destination pair.

    A destination already linked to its source is left alone.
    """

    phase_id = "70_symlinks"
    title = "Configuration symlinks"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        return [
            ConvergenceStep(
                name=f"link:{spec.dest}",
                category=Category.SYMLINK,
                check=partial(actions.is_linked, spec.source, spec.dest),
                act=partial(actions.link, spec.source, spec.dest),
            )
            for spec in profile.symlinks
        ]
