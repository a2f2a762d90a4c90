from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List

from pydantic import BaseModel, ConfigDict, Field

from timeline_evals.common.errors import MalformedSpecError


class ToolCallSpecSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    required: List[str] = Field(default_factory=list)
    optional: List[str] = Field(default_factory=list)
    forbidden: List[str] = Field(default_factory=list)


@dataclass(frozen=True)
class ToolCallSpec:
    required: FrozenSet[str] = frozenset()
    optional: FrozenSet[str] = frozenset()
    forbidden: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        overlap = self.required & self.forbidden
        if overlap:
            raise MalformedSpecError(f"Tools both required and forbidden: {sorted(overlap)}")

    @classmethod
    def from_schema(cls, schema: ToolCallSpecSchema) -> "ToolCallSpec":
        return cls(
            required=frozenset(schema.required),
            optional=frozenset(schema.optional),
            forbidden=frozenset(schema.forbidden),
        )
