"""macstrap: declarative, idempotent macOS workstation bootstrap.

Core design goals:
- Check current state before acting
- One failed step never aborts the run
- Configuration-driven profiles instead of script variants
- Centralized logging with an end-of-run failure summary
"""

__all__ = []
