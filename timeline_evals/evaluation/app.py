from typing import Any, Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from timeline_evals.common.api import ok_response, scenario_not_found_response, validation_error_response
from timeline_evals.common.errors import ScenarioNotFoundError, TraceValidationError
from timeline_evals.entity_diff.diff import compute_entity_diff, summarize_diff
from timeline_evals.evaluation.api_models import SuiteEvaluateRequestModel
from timeline_evals.evaluation.config import EvalConfig, load_eval_config
from timeline_evals.evaluation.resolver import evaluate
from timeline_evals.evaluation.suite import evaluate_suite
from timeline_evals.scenarios.models import Scenario
from timeline_evals.scenarios.registry import (
    ScenarioRegistry,
    build_registry,
    get_default_registry,
    load_scenario_files,
)
from timeline_evals.traces.loader import parse_trace


def load_registry(config: EvalConfig) -> ScenarioRegistry:
    scenarios: List[Scenario] = list(get_default_registry())
    if config.scenarios_dir:
        scenarios.extend(load_scenario_files(config.scenarios_dir, default_timeout_ms=config.default_timeout_ms))
    return build_registry(scenarios)


app = FastAPI(title="Timeline Agent Evals", docs_url=None, redoc_url=None)

_config = load_eval_config()
_registry = load_registry(_config)


def _not_found(exc: ScenarioNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=scenario_not_found_response(exc))


def _invalid(exc: ValueError, source: str) -> JSONResponse:
    return JSONResponse(status_code=400, content=validation_error_response(exc, source=source))


@app.get("/scenarios")
def list_scenarios(agent: Optional[str] = None, tag: Optional[str] = None):
    scenarios = list(_registry)
    if agent is not None:
        scenarios = [scenario for scenario in scenarios if scenario.agent == agent]
    if tag is not None:
        scenarios = [scenario for scenario in scenarios if tag in scenario.tags]
    return ok_response({"scenarios": [scenario.summary() for scenario in scenarios]})


@app.get("/scenarios/{scenario_id}")
def fetch_scenario(scenario_id: str):
    try:
        scenario = _registry.get(scenario_id)
    except ScenarioNotFoundError as exc:
        return _not_found(exc)
    return ok_response({"scenario": scenario.to_dict()})


@app.post("/scenarios/{scenario_id}/evaluate")
def evaluate_scenario(scenario_id: str, payload: Dict[str, Any]):
    try:
        scenario = _registry.get(scenario_id)
    except ScenarioNotFoundError as exc:
        return _not_found(exc)
    try:
        trace = parse_trace(payload)
    except TraceValidationError as exc:
        return _invalid(exc, "trace")
    result = evaluate(scenario, trace)
    data: Dict[str, Any] = {"result": result.to_dict(), "fingerprint": result.fingerprint()}
    if trace.before is not None and trace.after is not None:
        data["diff"] = summarize_diff(compute_entity_diff(trace.before, trace.after))
    return ok_response(data)


@app.post("/suite/evaluate")
def evaluate_scenario_suite(request: SuiteEvaluateRequestModel):
    try:
        traces = {scenario_id: parse_trace(payload) for scenario_id, payload in request.traces.items()}
    except TraceValidationError as exc:
        return _invalid(exc, "traces")
    max_workers = _config.max_workers
    if request.options is not None and request.options.max_workers is not None:
        max_workers = request.options.max_workers
    try:
        report = evaluate_suite(_registry, traces, max_workers=max_workers)
    except ScenarioNotFoundError as exc:
        return _not_found(exc)
    return ok_response({"report": report.to_dict()})

