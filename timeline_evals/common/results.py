from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple

from timeline_evals.common.enums import FailureKind, SubspecKind


@dataclass(frozen=True)
class FailureReason:
    subspec: SubspecKind
    expected: Any
    observed: Any
    reason: str
    kind: FailureKind = FailureKind.unmet

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subspec": self.subspec.value,
            "expected": self.expected,
            "observed": self.observed,
            "reason": self.reason,
            "kind": self.kind.value,
        }


@dataclass(frozen=True)
class MatchResult:
    passed: bool
    failures: Tuple[FailureReason, ...] = ()
    notes: Tuple[str, ...] = ()

    @classmethod
    def from_failures(cls, failures: Iterable[FailureReason], notes: Iterable[str] = ()) -> "MatchResult":
        collected = tuple(failures)
        return cls(passed=not collected, failures=collected, notes=tuple(notes))
