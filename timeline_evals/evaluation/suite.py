from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from timeline_evals.common.hashing import stable_hash
from timeline_evals.evaluation.models import ScenarioResult
from timeline_evals.evaluation.observability import EvaluationEvent, EvaluationObservability
from timeline_evals.evaluation.resolver import evaluate
from timeline_evals.scenarios.models import Scenario
from timeline_evals.scenarios.registry import ScenarioRegistry
from timeline_evals.traces.models import ExecutionTrace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuiteSummary:
    total: int
    passed: int
    failed: int
    pass_rate: float
    failed_ids: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "pass_rate": self.pass_rate,
            "failed_ids": list(self.failed_ids),
        }


@dataclass(frozen=True)
class SuiteReport:
    results: Tuple[ScenarioResult, ...]
    summary: SuiteSummary
    skipped_ids: Tuple[str, ...]
    output_hash: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "results": [result.to_dict() for result in self.results],
            "summary": self.summary.to_dict(),
            "skipped_ids": list(self.skipped_ids),
            "output_hash": self.output_hash,
        }


def summarize_results(results: Iterable[ScenarioResult]) -> SuiteSummary:
    collected = list(results)
    passed = sum(1 for result in collected if result.passed)
    total = len(collected)
    return SuiteSummary(
        total=total,
        passed=passed,
        failed=total - passed,
        pass_rate=passed / total if total else 0.0,
        failed_ids=tuple(sorted(result.scenario_id for result in collected if not result.passed)),
    )


def format_summary(summary: SuiteSummary) -> str:
    lines = [
        f"Scenarios: {summary.total}",
        f"Passed:    {summary.passed}",
        f"Failed:    {summary.failed}",
        f"Pass rate: {summary.pass_rate * 100:.1f}%",
    ]
    if summary.failed_ids:
        lines.append("Failed scenarios:")
        lines.extend(f"  - {scenario_id}" for scenario_id in summary.failed_ids)
    return "\n".join(lines)


def _evaluate_one(scenario: Scenario, trace: ExecutionTrace) -> Tuple[ScenarioResult, List[EvaluationEvent]]:
    recorder = EvaluationObservability()
    result = evaluate(scenario, trace, observability=recorder)
    return result, recorder.events()


def evaluate_suite(
    registry: ScenarioRegistry,
    traces: Mapping[str, ExecutionTrace],
    *,
    max_workers: int = 4,
    observability: Optional[EvaluationObservability] = None,
) -> SuiteReport:
    """Evaluate every scenario that has a trace; results keep registry order."""
    pending = [(registry.get(scenario_id), traces[scenario_id]) for scenario_id in sorted(traces)]
    skipped = tuple(scenario.id for scenario in registry if scenario.id not in traces)

    by_id: Dict[str, ScenarioResult] = {}
    events: Dict[str, List[EvaluationEvent]] = {}
    if pending:
        workers = max(1, min(max_workers, len(pending)))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(_evaluate_one, scenario, trace): scenario.id for scenario, trace in pending
            }
            for future in concurrent.futures.as_completed(futures):
                scenario_id = futures[future]
                by_id[scenario_id], events[scenario_id] = future.result()

    ordered = tuple(by_id[scenario.id] for scenario in registry if scenario.id in by_id)
    if observability is not None:
        for result in ordered:
            observability.extend(events[result.scenario_id])

    summary = summarize_results(ordered)
    logger.info(
        "suite finished: %d/%d passed, %d skipped",
        summary.passed,
        summary.total,
        len(skipped),
    )
    output_hash = stable_hash({"results": [result.to_dict() for result in ordered]})
    return SuiteReport(results=ordered, summary=summary, skipped_ids=skipped, output_hash=output_hash)
