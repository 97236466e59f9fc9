from __future__ import annotations


class MacstrapError(Exception):
    """Base class for errors raised by macstrap."""

    kind = "error"


class PrerequisiteMissing(MacstrapError):
    """A required tool (package manager, mas, go, sudo...) is not available."""

    kind = "prerequisite_missing"


class ActionFailed(MacstrapError):
    kind = "action_failed"


class NotFound(MacstrapError):
    """A lookup (e.g. an App Store search) produced no match."""

    kind = "not_found"


class PermissionDenied(MacstrapError):
    kind = "permission_denied"


class ConfigError(MacstrapError):
    """Configuration could not be read or validated; aborts before any step runs."""

    kind = "config_error"


def error_kind(exc: BaseException) -> str:
    return getattr(exc, "kind", "error")
