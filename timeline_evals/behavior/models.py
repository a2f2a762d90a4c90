from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict

from timeline_evals.common.enums import BehaviorType
from timeline_evals.common.errors import MalformedSpecError
from timeline_evals.predicates.models import Pattern


class AgentBehaviorSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    type: BehaviorType
    pattern: Optional[str] = None
    tool: Optional[str] = None


@dataclass(frozen=True)
class AgentBehaviorSpec:
    type: BehaviorType
    pattern: Optional[Pattern] = None
    tool: Optional[str] = None

    def __post_init__(self) -> None:
        if self.tool is not None and self.type != BehaviorType.tool_call:
            raise MalformedSpecError(f"agent_behavior.tool is only valid for type 'tool_call', got {self.type.value!r}")

    @classmethod
    def from_schema(cls, schema: AgentBehaviorSchema) -> "AgentBehaviorSpec":
        if schema.pattern is not None and not schema.pattern:
            raise MalformedSpecError("agent_behavior.pattern requires a non-empty string")
        return cls(
            type=schema.type,
            pattern=Pattern(schema.pattern) if schema.pattern else None,
            tool=schema.tool,
        )


@dataclass(frozen=True)
class Classification:
    behavior: Optional[BehaviorType]
    reason: Optional[str] = None

    @property
    def ambiguous(self) -> bool:
        return self.behavior is None
