from __future__ import annotations

import pytest

from timeline_evals.common.errors import ScenarioNotFoundError
from timeline_evals.evaluation.observability import EvaluationObservability
from timeline_evals.evaluation.suite import evaluate_suite, format_summary, summarize_results
from timeline_evals.scenarios.registry import get_default_registry
from timeline_evals.traces.loader import parse_trace


def _traces():
    return {
        "montage-info-resize-mode-001": parse_trace(
            {"tool_calls": ["getBlocks"], "final_message": "The block's resizeMode is set to contain."}
        ),
        "montage-move-block-ambiguous-001": parse_trace({"final_message": "Should I move it earlier or later?"}),
        "montage-remove-second-block-001": parse_trace({"tool_calls": ["getBlocks"], "timed_out": True}),
    }


def test_suite_results_follow_registry_order_and_summary():
    registry = get_default_registry()
    report = evaluate_suite(registry, _traces(), max_workers=3)
    registry_order = [scenario_id for scenario_id in registry.ids() if scenario_id in _traces()]
    assert [result.scenario_id for result in report.results] == registry_order
    assert report.summary.total == 3
    assert report.summary.passed == 2
    assert report.summary.failed_ids == ("montage-remove-second-block-001",)
    assert "montage-select-hook-clips-001" in report.skipped_ids


def test_suite_is_deterministic_across_worker_counts():
    registry = get_default_registry()
    serial = evaluate_suite(registry, _traces(), max_workers=1)
    parallel = evaluate_suite(registry, _traces(), max_workers=8)
    assert serial.output_hash == parallel.output_hash
    assert serial.results == parallel.results


def test_suite_collects_observability_events():
    recorder = EvaluationObservability()
    evaluate_suite(get_default_registry(), _traces(), observability=recorder)
    resolved = [event for event in recorder.events() if event.event_type == "scenario_resolved"]
    assert len(resolved) == 3


def test_suite_rejects_unknown_scenarios():
    with pytest.raises(ScenarioNotFoundError):
        evaluate_suite(get_default_registry(), {"missing-scenario": parse_trace({})})


def test_summary_formatting():
    report = evaluate_suite(get_default_registry(), _traces())
    text = format_summary(report.summary)
    assert "Scenarios: 3" in text
    assert "Pass rate: 66.7%" in text
    assert "  - montage-remove-second-block-001" in text


def test_summarize_empty_results():
    summary = summarize_results([])
    assert summary.total == 0
    assert summary.pass_rate == 0.0
    assert format_summary(summary).splitlines()[0] == "Scenarios: 0"
