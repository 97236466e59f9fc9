from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .errors import error_kind


class Outcome(str, Enum):
    SUCCESS = "success"
    ALREADY_SATISFIED = "already_satisfied"
    FAILED = "failed"


@dataclass(frozen=True)
class ActionOutcome:
    """Normalized result of a collaborator adapter call."""

    success: bool
    detail: str = ""
    kind: Optional[str] = None
    value: Any = None

    @classmethod
    def ok(cls, detail: str = "", value: Any = None) -> "ActionOutcome":
        return cls(success=True, detail=detail, value=value)

    @classmethod
    def failed(cls, detail: str, kind: str = "action_failed") -> "ActionOutcome":
        return cls(success=False, detail=detail, kind=kind)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ActionOutcome":
        return cls(success=False, detail=str(exc) or type(exc).__name__, kind=error_kind(exc))


@dataclass(frozen=True)
class ExecutionResult:
    step: str
    category: str
    outcome: Outcome
    reason: str = ""
    kind: Optional[str] = None
    phase: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAILED

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "step": self.step,
            "category": self.category,
            "outcome": self.outcome.value,
        }
        if self.phase:
            d["phase"] = self.phase
        if self.reason:
            d["reason"] = self.reason
        if self.kind:
            d["kind"] = self.kind
        return d


@dataclass
class FailureLog:
    """Ordered failed results for a single run."""

    entries: List[ExecutionResult] = field(default_factory=list)

    def append(self, result: ExecutionResult) -> None:
        self.entries.append(result)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ExecutionResult]:
        return iter(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)


@dataclass(frozen=True)
class RunReport:
    results: List[ExecutionResult]
    failures: FailureLog
    ran_phases: List[str]
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures

    def count(self, outcome: Outcome) -> int:
        return sum(1 for r in self.results if r.outcome is outcome)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "ran_phases": list(self.ran_phases),
            "summary": {
                "total": len(self.results),
                "success": self.count(Outcome.SUCCESS),
                "already_satisfied": self.count(Outcome.ALREADY_SATISFIED),
                "failed": len(self.failures),
            },
            "results": [r.to_dict() for r in self.results],
            "failures": [r.to_dict() for r in self.failures],
        }
