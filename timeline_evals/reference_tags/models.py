from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field

from timeline_evals.common.errors import MalformedSpecError
from timeline_evals.predicates.evaluator import parse_conditions, parse_field_predicates
from timeline_evals.predicates.models import FieldPredicate


class TagExpectationSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    tag: str = Field(min_length=1)
    attrs: Dict[str, Any] = Field(default_factory=dict)
    label: Any = None


class TagCountSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    tag: str = Field(min_length=1)
    count: int = Field(ge=0)


class ReferenceTagSpecSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    required: List[TagExpectationSchema] = Field(default_factory=list)
    forbidden: List[TagExpectationSchema] = Field(default_factory=list)
    min_count: List[TagCountSchema] = Field(default_factory=list)
    max_count: List[TagCountSchema] = Field(default_factory=list)


@dataclass(frozen=True)
class ReferenceTag:
    """One citation found in the agent's message, e.g. ``<block id="b1">Intro</block>``."""

    tag: str
    attrs: Mapping[str, str]
    label: str
    raw: str
    position: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"tag": self.tag, "attrs": dict(self.attrs), "label": self.label}


@dataclass(frozen=True)
class TagExpectation:
    tag: str
    attrs: Mapping[str, Tuple[FieldPredicate, ...]] = field(default_factory=dict)
    label: Tuple[FieldPredicate, ...] = ()

    @classmethod
    def from_schema(cls, schema: TagExpectationSchema, *, path: str) -> "TagExpectation":
        label: Tuple[FieldPredicate, ...] = ()
        if "label" in schema.model_fields_set and schema.label is not None:
            label = parse_field_predicates(schema.label, path=f"{path}/label")
        return cls(
            tag=schema.tag,
            attrs=parse_conditions(schema.attrs, path=f"{path}/attrs"),
            label=label,
        )


@dataclass(frozen=True)
class TagCount:
    tag: str
    count: int


@dataclass(frozen=True)
class ReferenceTagSpec:
    required: Tuple[TagExpectation, ...] = ()
    forbidden: Tuple[TagExpectation, ...] = ()
    min_count: Tuple[TagCount, ...] = ()
    max_count: Tuple[TagCount, ...] = ()

    def __post_init__(self) -> None:
        floors = {bound.tag: bound.count for bound in self.min_count}
        for ceiling in self.max_count:
            floor = floors.get(ceiling.tag)
            if floor is not None and floor > ceiling.count:
                raise MalformedSpecError(
                    f"reference_tags: min_count {floor} exceeds max_count {ceiling.count} for <{ceiling.tag}>"
                )

    @property
    def needs_message(self) -> bool:
        return bool(self.required) or any(bound.count > 0 for bound in self.min_count)

    @classmethod
    def from_schema(cls, schema: ReferenceTagSpecSchema, *, path: str = "reference_tags") -> "ReferenceTagSpec":
        return cls(
            required=tuple(
                TagExpectation.from_schema(item, path=f"{path}/required/{index}")
                for index, item in enumerate(schema.required)
            ),
            forbidden=tuple(
                TagExpectation.from_schema(item, path=f"{path}/forbidden/{index}")
                for index, item in enumerate(schema.forbidden)
            ),
            min_count=tuple(TagCount(tag=item.tag, count=item.count) for item in schema.min_count),
            max_count=tuple(TagCount(tag=item.tag, count=item.count) for item in schema.max_count),
        )

