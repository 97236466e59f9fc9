from .phase_10_prerequisites import PrerequisitesPhase
from .phase_20_self_update import SelfUpdatePhase
from .phase_30_packages import PackagesPhase
from .phase_35_toolchain import ToolchainPhase
from .phase_40_casks import CasksPhase
from .phase_50_store_apps import StoreAppsPhase
from .phase_60_repositories import RepositoriesPhase
from .phase_70_symlinks import SymlinksPhase
from .phase_80_shell_config import ShellConfigPhase
from .phase_90_default_shell import DefaultShellPhase
from .phase_95_cleanup import CleanupPhase

__all__ = [
    "PrerequisitesPhase",
    "SelfUpdatePhase",
    "PackagesPhase",
    "ToolchainPhase",
    "CasksPhase",
    "StoreAppsPhase",
    "RepositoriesPhase",
    "SymlinksPhase",
    "ShellConfigPhase",
    "DefaultShellPhase",
    "CleanupPhase",
]
