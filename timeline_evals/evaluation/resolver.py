"""Resolve a scenario's alternatives against one execution trace.

Alternatives are tried in declaration order and the first one whose parts
all pass decides the verdict. Declaration order carries no preference
beyond that. When nothing passes, every alternative's failures are kept.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from timeline_evals.behavior.classifier import match_behavior
from timeline_evals.common.enums import FailureKind, SubspecKind
from timeline_evals.common.results import FailureReason, MatchResult
from timeline_evals.entity_diff.matcher import match_final_state
from timeline_evals.evaluation.models import AlternativeResult, ScenarioResult
from timeline_evals.evaluation.observability import EvaluationObservability
from timeline_evals.reference_tags.matcher import match_reference_tags
from timeline_evals.scenarios.models import ExpectationAlternative, Scenario
from timeline_evals.tool_calls.matcher import match_tool_calls
from timeline_evals.traces.models import ExecutionTrace

logger = logging.getLogger(__name__)


def _incomplete(subspec: SubspecKind, expected: object, reason: str) -> FailureReason:
    return FailureReason(
        subspec=subspec,
        expected=expected,
        observed=None,
        reason=reason,
        kind=FailureKind.incomplete_trace,
    )


def _timed_out(index: int, alternative: ExpectationAlternative, timeout_ms: int) -> AlternativeResult:
    failure = _incomplete(SubspecKind.trace, "run completed", f"agent run timed out after {timeout_ms} ms")
    return AlternativeResult(index=index, label=alternative.label, passed=False, failures=(failure,))


def evaluate_alternative(
    index: int,
    alternative: ExpectationAlternative,
    trace: ExecutionTrace,
    *,
    timeout_ms: int,
) -> AlternativeResult:
    if trace.timed_out:
        return _timed_out(index, alternative, timeout_ms)

    results: List[MatchResult] = []

    if alternative.tool_calls is not None:
        observed = trace.tool_names
        if observed is None:
            failure = _incomplete(SubspecKind.tool_calls, "tool call log", "trace has no tool call log")
            results.append(MatchResult.from_failures([failure]))
        else:
            results.append(match_tool_calls(observed, alternative.tool_calls))

    if alternative.final_state is not None:
        if trace.before is None or trace.after is None:
            missing = "before" if trace.before is None else "after"
            failure = _incomplete(SubspecKind.final_state, "before and after snapshots", f"trace has no {missing} snapshot")
            results.append(MatchResult.from_failures([failure]))
        else:
            results.append(match_final_state(trace.before, trace.after, alternative.final_state))

    if alternative.agent_behavior is not None:
        results.append(match_behavior(trace, alternative.agent_behavior))

    if alternative.reference_tags is not None:
        results.append(match_reference_tags(trace.final_message, alternative.reference_tags))

    failures = tuple(failure for result in results for failure in result.failures)
    notes = tuple(note for result in results for note in result.notes)
    return AlternativeResult(
        index=index,
        label=alternative.label,
        passed=not failures,
        failures=failures,
        notes=notes,
    )


def evaluate(
    scenario: Scenario,
    trace: ExecutionTrace,
    *,
    observability: Optional[EvaluationObservability] = None,
) -> ScenarioResult:
    recorder = observability or EvaluationObservability()
    logger.debug("evaluating scenario %s against trace %s", scenario.id, trace.summary())
    evaluated: List[AlternativeResult] = []
    passing_index: Optional[int] = None

    for index, alternative in enumerate(scenario.alternatives):
        result = evaluate_alternative(index, alternative, trace, timeout_ms=scenario.timeout_ms)
        evaluated.append(result)
        recorder.record(
            "alternative_evaluated",
            scenario_id=scenario.id,
            index=index,
            label=alternative.label,
            passed=result.passed,
            failure_count=len(result.failures),
        )
        if result.passed:
            passing_index = index
            break

    passed = passing_index is not None
    recorder.record(
        "scenario_resolved",
        scenario_id=scenario.id,
        passed=passed,
        passing_alternative_index=passing_index,
        alternatives_evaluated=len(evaluated),
    )
    if passed:
        logger.info("scenario %s passed on alternative %d", scenario.id, passing_index)
    else:
        logger.info(
            "scenario %s failed: %d alternatives, %d failures",
            scenario.id,
            len(evaluated),
            sum(len(result.failures) for result in evaluated),
        )

    return ScenarioResult(
        scenario_id=scenario.id,
        passed=passed,
        passing_alternative_index=passing_index,
        alternatives=tuple(evaluated),
    )
