from __future__ import annotations

import logging
from functools import partial
from typing import List

from ..actions import ActionRegistry
from ..config import Profile, StoreAppSpec
from ..convergence import Category, ConvergenceStep
from ..results import ActionOutcome

logger = logging.getLogger(__name__)


def _install_by_name(actions: ActionRegistry, name: str) -> ActionOutcome:
    # Name lookups take the first search hit; ids in configuration are preferred.
    found = actions.search_store_app(name)
    if not found.success:
        return found
    outcome = actions.install_store_app(int(found.value))
    if outcome.success:
        return ActionOutcome.ok(f"{outcome.detail} ({found.detail})")
    return outcome


class StoreAppsPhase:
    phase_id = "50_store_apps"
    title = "App Store applications"

    def _step(self, spec: StoreAppSpec, actions: ActionRegistry) -> ConvergenceStep:
        if spec.app_id is not None:
            return ConvergenceStep(
                name=f"store-app:{spec.label}",
                category=Category.STORE_APP,
                check=partial(actions.store_app_installed, app_id=spec.app_id),
                act=partial(actions.install_store_app, spec.app_id),
            )
        logger.debug("App Store entry %r has no id; falling back to name search", spec.name)
        return ConvergenceStep(
            name=f"store-app:{spec.label}",
            category=Category.STORE_APP,
            check=partial(actions.store_app_installed, name=spec.name),
            act=partial(_install_by_name, actions, str(spec.name)),
        )

    def build(self, profile: Profile, actions: ActionRegistry) -> List[ConvergenceStep]:
        return [self._step(spec, actions) for spec in profile.store_apps]
