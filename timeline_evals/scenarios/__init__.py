from timeline_evals.scenarios.models import ExpectationAlternative, Scenario, ScenarioContext, ScenarioInput
from timeline_evals.scenarios.registry import (
    ScenarioRegistry,
    build_registry,
    get_default_registry,
    load_scenario_files,
)
from timeline_evals.scenarios.validation import parse_scenario

__all__ = [
    "ExpectationAlternative",
    "Scenario",
    "ScenarioContext",
    "ScenarioInput",
    "ScenarioRegistry",
    "build_registry",
    "get_default_registry",
    "load_scenario_files",
    "parse_scenario",
]
