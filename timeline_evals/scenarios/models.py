from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from timeline_evals.behavior.models import AgentBehaviorSchema, AgentBehaviorSpec
from timeline_evals.entity_diff.models import FinalStateSchema, FinalStateSpec
from timeline_evals.reference_tags.models import ReferenceTagSpec, ReferenceTagSpecSchema
from timeline_evals.tool_calls.models import ToolCallSpec, ToolCallSpecSchema

DEFAULT_TIMEOUT_MS = 60000


class ContextRefSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    type: str = Field(min_length=1)
    id: str = Field(min_length=1)


class ScenarioContextSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    project_id: str = Field(min_length=1)
    chapter_id: str = Field(min_length=1)
    context_refs: List[ContextRefSchema] = Field(default_factory=list)
    custom_fps: Optional[float] = Field(default=None, gt=0)


class ScenarioInputSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    user_message: str = Field(min_length=1)
    context: ScenarioContextSchema


class ExpectationAlternativeSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    label: Optional[str] = None
    tool_calls: Optional[ToolCallSpecSchema] = None
    final_state: Optional[FinalStateSchema] = None
    agent_behavior: Optional[AgentBehaviorSchema] = None
    reference_tags: Optional[ReferenceTagSpecSchema] = None


class ScenarioSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    agent: str = Field(min_length=1)
    tags: List[str] = Field(default_factory=list)
    description: str = ""
    input: ScenarioInputSchema
    expectations: List[ExpectationAlternativeSchema]
    timeout: Optional[int] = Field(default=None, gt=0)


@dataclass(frozen=True)
class ContextRef:
    type: str
    id: str


@dataclass(frozen=True)
class ScenarioContext:
    project_id: str
    chapter_id: str
    context_refs: Tuple[ContextRef, ...] = ()
    custom_fps: Optional[float] = None


@dataclass(frozen=True)
class ScenarioInput:
    user_message: str
    context: ScenarioContext


@dataclass(frozen=True)
class ExpectationAlternative:
    """One self-sufficient acceptable outcome; absent parts are unconstrained."""

    label: Optional[str] = None
    tool_calls: Optional[ToolCallSpec] = None
    final_state: Optional[FinalStateSpec] = None
    agent_behavior: Optional[AgentBehaviorSpec] = None
    reference_tags: Optional[ReferenceTagSpec] = None

    @property
    def declared(self) -> Tuple[str, ...]:
        parts = (
            ("tool_calls", self.tool_calls),
            ("final_state", self.final_state),
            ("agent_behavior", self.agent_behavior),
            ("reference_tags", self.reference_tags),
        )
        return tuple(name for name, value in parts if value is not None)


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    agent: str
    input: ScenarioInput
    alternatives: Tuple[ExpectationAlternative, ...]
    tags: Tuple[str, ...] = ()
    description: str = ""
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    definition: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "agent": self.agent,
            "tags": list(self.tags),
            "alternatives": len(self.alternatives),
            "timeout_ms": self.timeout_ms,
        }

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.definition)
        payload["timeout"] = self.timeout_ms
        return payload
