from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from timeline_evals.common.hashing import stable_hash
from timeline_evals.common.results import FailureReason


@dataclass(frozen=True)
class AlternativeResult:
    index: int
    label: Optional[str]
    passed: bool
    failures: Tuple[FailureReason, ...] = ()
    notes: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "label": self.label,
            "passed": self.passed,
            "failures": [failure.to_dict() for failure in self.failures],
            "notes": list(self.notes),
        }


@dataclass(frozen=True)
class ScenarioResult:
    scenario_id: str
    passed: bool
    passing_alternative_index: Optional[int]
    alternatives: Tuple[AlternativeResult, ...]

    @property
    def failures(self) -> List[FailureReason]:
        if self.passed:
            return []
        return [failure for alternative in self.alternatives for failure in alternative.failures]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario_id": self.scenario_id,
            "passed": self.passed,
            "passing_alternative_index": self.passing_alternative_index,
            "alternatives": [alternative.to_dict() for alternative in self.alternatives],
        }

    def fingerprint(self) -> str:
        return stable_hash(self.to_dict())
