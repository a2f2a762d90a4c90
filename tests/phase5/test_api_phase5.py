from __future__ import annotations

from fastapi.testclient import TestClient

from timeline_evals.common.api import scenario_not_found_response, validation_error_response
from timeline_evals.common.errors import ScenarioNotFoundError, TraceValidationError
from timeline_evals.evaluation.app import app
from timeline_evals.fixtures.montage import SURROUNDINGS_BLOCK_1, SURROUNDINGS_BLOCK_2

client = TestClient(app)


def test_list_and_filter_scenarios():
    response = client.get("/scenarios")
    assert response.status_code == 200
    body = response.json()
    assert body["schema_version"] == "v1"
    assert body["status"] == "ok"
    ids = [item["id"] for item in body["data"]["scenarios"]]
    assert "montage-remove-second-block-001" in ids

    filtered = client.get("/scenarios", params={"tag": "deletion"}).json()
    assert [item["id"] for item in filtered["data"]["scenarios"]] == ["montage-remove-second-block-001"]


def test_fetch_scenario_and_not_found():
    response = client.get("/scenarios/montage-move-first-block-001")
    assert response.status_code == 200
    scenario = response.json()["data"]["scenario"]
    assert scenario["timeout"] == 40000
    assert scenario["expectations"][0]["agent_behavior"]["type"] == "clarification_question"

    missing = client.get("/scenarios/nope")
    assert missing.status_code == 404
    error = missing.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["details"] == {"scenario_id": "nope"}


def test_evaluate_scenario_endpoint():
    payload = {"tool_calls": ["getBlocks", "trimBlock"], "final_message": "Done."}
    response = client.post("/scenarios/montage-remove-second-block-001/evaluate", json=payload)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["result"]["passed"] is False
    reasons = [failure["reason"] for failure in data["result"]["alternatives"][0]["failures"]]
    assert "Required tool 'removeBlocks' was not called" in reasons
    assert len(data["fingerprint"]) == 64


def test_evaluate_scenario_rejects_invalid_trace():
    payload = {"before": {"blocks": [{"durationInFrames": 1}]}}
    response = client.post("/scenarios/montage-remove-second-block-001/evaluate", json=payload)
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "requires a string id" in error["message"]
    assert error["details"] == {"source": "trace", "error_type": "TraceValidationError"}


def test_suite_endpoint():
    request = {
        "traces": {
            "montage-move-block-ambiguous-001": {"final_message": "Which direction should I move it?"},
        },
        "options": {"max_workers": 2},
    }
    response = client.post("/suite/evaluate", json=request)
    assert response.status_code == 200
    report = response.json()["data"]["report"]
    assert report["summary"]["passed"] == 1

    unknown = client.post("/suite/evaluate", json={"traces": {"nope": {}}})
    assert unknown.status_code == 404
    assert unknown.json()["error"]["details"] == {"scenario_id": "nope"}

    bad_trace = {"after": {"clips": []}}
    rejected = client.post("/suite/evaluate", json={"traces": {"montage-move-block-ambiguous-001": bad_trace}})
    assert rejected.status_code == 400
    assert rejected.json()["error"]["details"]["source"] == "traces"


def test_evaluate_scenario_reports_entity_diff():
    first = {"id": SURROUNDINGS_BLOCK_1, "timelineOffsetInFrames": 62, "durationInFrames": 400}
    second = {"id": SURROUNDINGS_BLOCK_2, "timelineOffsetInFrames": 535, "durationInFrames": 90}
    payload = {
        "tool_calls": ["removeBlocks"],
        "final_message": "Removed the second block.",
        "before": {"blocks": [first, second]},
        "after": {"blocks": [first]},
    }
    response = client.post("/scenarios/montage-remove-second-block-001/evaluate", json=payload)
    data = response.json()["data"]
    assert data["result"]["passed"] is True
    assert data["result"]["passing_alternative_index"] == 0
    assert data["diff"] == {"blocks": {"added": [], "modified": [], "deleted": [SURROUNDINGS_BLOCK_2]}}


def test_error_envelopes_carry_service_details():
    missing = scenario_not_found_response(ScenarioNotFoundError("montage-unknown"))
    assert missing == {
        "schema_version": "v1",
        "status": "error",
        "error": {
            "code": "NOT_FOUND",
            "message": "Scenario not found: montage-unknown",
            "details": {"scenario_id": "montage-unknown"},
        },
    }
    rejected = validation_error_response(TraceValidationError("after: unknown entity kind 'clips'"), source="trace")
    assert rejected["error"]["code"] == "VALIDATION_ERROR"
    assert rejected["error"]["details"] == {"source": "trace", "error_type": "TraceValidationError"}
