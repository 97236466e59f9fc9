from __future__ import annotations

from functools import partial
from typing import List

from ..actions import ActionRegistry
from ..config import Profile
from ..convergence import Category, ConvergenceStep


class ShellConfigPhase:
    phase_id = "80_shell_config"
    title = "Shell configuration"

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        return [
            ConvergenceStep(
                name=f"line:{spec.file}:{spec.marker or spec.line}",
                category=Category.SHELL_CONFIG,
                check=partial(actions.has_shell_line, spec.file, spec.line, spec.marker),
                act=partial(actions.append_shell_line, spec.file, spec.line),
            )
            for spec in profile.shell_lines
        ]
