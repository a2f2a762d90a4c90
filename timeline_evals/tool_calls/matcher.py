from __future__ import annotations

from typing import Iterable, List, Optional

from timeline_evals.common.enums import SubspecKind
from timeline_evals.common.results import FailureReason, MatchResult
from timeline_evals.tool_calls.models import ToolCallSpec


def match_tool_calls(observed: Iterable[str], spec: Optional[ToolCallSpec]) -> MatchResult:
    """Check the set of invoked tool names; order and repetition are ignored."""
    if spec is None:
        return MatchResult(passed=True)

    observed_set = frozenset(observed)
    called = sorted(observed_set)
    failures: List[FailureReason] = []

    for tool in sorted(spec.required - observed_set):
        failures.append(
            FailureReason(
                subspec=SubspecKind.tool_calls,
                expected=tool,
                observed=called,
                reason=f"Required tool '{tool}' was not called",
            )
        )

    for tool in sorted(spec.forbidden & observed_set):
        failures.append(
            FailureReason(
                subspec=SubspecKind.tool_calls,
                expected="not called",
                observed=tool,
                reason=f"Forbidden tool '{tool}' was called",
            )
        )

    notes = [f"optional tool '{tool}' was called" for tool in sorted(spec.optional & observed_set)]
    return MatchResult.from_failures(failures, notes)
