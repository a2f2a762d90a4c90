from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Set, Tuple, Union

from timeline_evals.common.errors import MalformedSpecError, ScenarioNotFoundError
from timeline_evals.fixtures.montage import montage_scenario_payloads
from timeline_evals.scenarios.models import Scenario
from timeline_evals.scenarios.validation import parse_scenario

logger = logging.getLogger(__name__)

SCENARIO_FILE_GLOB = "*.scenario.json"


@dataclass(frozen=True)
class ScenarioRegistry:
    scenarios: Tuple[Scenario, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {scenario.id: scenario for scenario in self.scenarios})

    def __iter__(self) -> Iterator[Scenario]:
        return iter(self.scenarios)

    def __len__(self) -> int:
        return len(self.scenarios)

    def __contains__(self, scenario_id: object) -> bool:
        return scenario_id in self._by_id

    def ids(self) -> List[str]:
        return [scenario.id for scenario in self.scenarios]

    def get(self, scenario_id: str) -> Scenario:
        scenario = self._by_id.get(scenario_id)
        if scenario is None:
            raise ScenarioNotFoundError(scenario_id)
        return scenario

    def by_agent(self, agent: str) -> List[Scenario]:
        return [scenario for scenario in self.scenarios if scenario.agent == agent]

    def by_tag(self, tag: str) -> List[Scenario]:
        return [scenario for scenario in self.scenarios if tag in scenario.tags]


def build_registry(
    items: Iterable[Union[Scenario, Mapping[str, Any]]],
    *,
    default_timeout_ms: Optional[int] = None,
) -> ScenarioRegistry:
    scenarios: List[Scenario] = []
    seen: Set[str] = set()
    for item in items:
        scenario = item if isinstance(item, Scenario) else parse_scenario(item, default_timeout_ms=default_timeout_ms)
        if scenario.id in seen:
            raise MalformedSpecError(f"Duplicate scenario id: {scenario.id}")
        seen.add(scenario.id)
        scenarios.append(scenario)
    return ScenarioRegistry(scenarios=tuple(scenarios))


def load_scenario_files(root: Union[str, Path], *, default_timeout_ms: Optional[int] = None) -> List[Scenario]:
    base = Path(root)
    if not base.is_dir():
        raise MalformedSpecError(f"Scenario directory not found: {base}")
    scenarios: List[Scenario] = []
    for path in sorted(base.rglob(SCENARIO_FILE_GLOB)):
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise MalformedSpecError(f"{path}: invalid JSON: {exc}") from exc
        try:
            scenarios.append(parse_scenario(payload, default_timeout_ms=default_timeout_ms))
        except MalformedSpecError as exc:
            raise MalformedSpecError(f"{path}: {exc}") from exc
    logger.info("loaded %d scenario files from %s", len(scenarios), base)
    return scenarios


@lru_cache(maxsize=1)
def get_default_registry() -> ScenarioRegistry:
    return build_registry(montage_scenario_payloads())
