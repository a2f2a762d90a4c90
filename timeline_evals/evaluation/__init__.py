"""Scenario evaluation: alternative resolution, suites and reporting."""

from timeline_evals.evaluation.models import AlternativeResult, ScenarioResult
from timeline_evals.evaluation.observability import EvaluationObservability
from timeline_evals.evaluation.resolver import evaluate, evaluate_alternative
from timeline_evals.evaluation.suite import SuiteReport, SuiteSummary, evaluate_suite, format_summary, summarize_results

__all__ = [
    "AlternativeResult",
    "EvaluationObservability",
    "ScenarioResult",
    "SuiteReport",
    "SuiteSummary",
    "evaluate",
    "evaluate_alternative",
    "evaluate_suite",
    "format_summary",
    "summarize_results",
]
