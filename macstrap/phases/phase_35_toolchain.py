from __future__ import annotations

from functools import partial
from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep


class ToolchainPhase:
    """Packages the primary package manager does not carry (e.g. ``go install``)."""

    phase_id = "35_toolchain"
    title = "Toolchain packages"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        return [
            ConvergenceStep(
                name=f"{spec.tool}:{spec.binary}",
                category=Category.TOOLCHAIN,
                check=partial(actions.toolchain_binary_present, spec.binary),
                act=partial(actions.toolchain_install, spec.tool, spec.module),
            )
            for spec in profile.toolchain
        ]
