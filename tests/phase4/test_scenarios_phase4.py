from __future__ import annotations

import json

import pytest

from timeline_evals.common.errors import MalformedSpecError, ScenarioNotFoundError
from timeline_evals.scenarios.models import DEFAULT_TIMEOUT_MS
from timeline_evals.scenarios.registry import build_registry, get_default_registry, load_scenario_files
from timeline_evals.scenarios.validation import parse_scenario


def test_parse_scenario_builds_frozen_model(scenario_payload):
    payload = scenario_payload(
        [
            {
                "label": "remove",
                "tool_calls": {"required": ["removeBlocks"]},
                "final_state": {"blocks": {"deleted": ["b2"], "unchanged": ["b1"]}},
            }
        ]
    )
    payload["input"]["context"]["context_refs"] = [{"type": "block", "id": "b2"}]
    scenario = parse_scenario(payload)
    assert scenario.timeout_ms == DEFAULT_TIMEOUT_MS
    assert scenario.input.context.context_refs[0].id == "b2"
    alternative = scenario.alternatives[0]
    assert alternative.label == "remove"
    assert alternative.declared == ("tool_calls", "final_state")
    assert alternative.tool_calls.required == frozenset({"removeBlocks"})
    with pytest.raises(AttributeError):
        scenario.id = "other"


def test_default_timeout_can_be_overridden(scenario_payload):
    payload = scenario_payload([{"agent_behavior": {"type": "completion"}}])
    assert parse_scenario(payload, default_timeout_ms=5000).timeout_ms == 5000
    payload["timeout"] = 40000
    assert parse_scenario(payload, default_timeout_ms=5000).timeout_ms == 40000


@pytest.mark.parametrize(
    "expectations",
    [
        [],
        [{"tool_calls": {"required": ["moveBlocks"], "forbidden": ["moveBlocks"]}}],
        [{"final_state": {"blocks": {"deleted": ["a"], "unchanged": ["a"]}}}],
        [{"final_state": {"blocks": {"added": [{"match": {}}]}}}],
        [{"agent_behavior": {"type": "celebration"}}],
        [{"agent_behavior": {"type": "completion", "pattern": "(oops"}}],
        [{"toolCalls": {"required": ["moveBlocks"]}}],
    ],
)
def test_malformed_scenarios_are_rejected(scenario_payload, expectations):
    with pytest.raises(MalformedSpecError):
        parse_scenario(scenario_payload(expectations))


def test_malformed_error_names_the_scenario(scenario_payload):
    payload = scenario_payload([{"final_state": {"blocks": {"deleted": ["a"], "unchanged": ["a"]}}}])
    with pytest.raises(MalformedSpecError) as excinfo:
        parse_scenario(payload)
    assert "scenario-under-test" in str(excinfo.value)


def test_registry_lookup_and_filters(scenario_payload):
    first = scenario_payload([{"agent_behavior": {"type": "completion"}}], id="one", tags=["info"])
    second = scenario_payload([{"agent_behavior": {"type": "completion"}}], id="two", agent="media-scout")
    registry = build_registry([first, second])
    assert registry.ids() == ["one", "two"]
    assert registry.get("two").agent == "media-scout"
    assert [scenario.id for scenario in registry.by_agent("montage")] == ["one"]
    assert [scenario.id for scenario in registry.by_tag("info")] == ["one"]
    assert "one" in registry
    with pytest.raises(ScenarioNotFoundError) as excinfo:
        registry.get("three")
    assert excinfo.value.scenario_id == "three"


def test_registry_rejects_duplicate_ids(scenario_payload):
    payload = scenario_payload([{"agent_behavior": {"type": "completion"}}])
    with pytest.raises(MalformedSpecError):
        build_registry([payload, dict(payload)])


def test_default_registry_is_built_once():
    registry = get_default_registry()
    assert registry is get_default_registry()
    assert "montage-remove-second-block-001" in registry
    ambiguous = registry.get("montage-move-block-ambiguous-001")
    assert len(ambiguous.alternatives) == 3
    assert len(registry.by_agent("montage")) == len(registry)


def test_load_scenario_files(tmp_path, scenario_payload):
    nested = tmp_path / "montage" / "remove"
    nested.mkdir(parents=True)
    payload = scenario_payload([{"tool_calls": {"required": ["removeBlocks"]}}], id="from-file")
    (nested / "remove.scenario.json").write_text(json.dumps(payload), encoding="utf-8")
    (tmp_path / "notes.json").write_text("{}", encoding="utf-8")
    scenarios = load_scenario_files(tmp_path)
    assert [scenario.id for scenario in scenarios] == ["from-file"]


def test_load_scenario_files_reports_bad_file(tmp_path):
    (tmp_path / "broken.scenario.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(MalformedSpecError) as excinfo:
        load_scenario_files(tmp_path)
    assert "broken.scenario.json" in str(excinfo.value)
