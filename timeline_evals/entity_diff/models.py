from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from timeline_evals.common.enums import EntityKind
from timeline_evals.common.errors import MalformedSpecError
from timeline_evals.predicates.models import FieldPredicate

Conditions = Mapping[str, Tuple[FieldPredicate, ...]]


class AddedSelectorSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    match: Dict[str, Any]


class ModifiedExpectationSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    id: str
    changes: Dict[str, Any] = Field(default_factory=dict)


class EntityExpectationsSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    added: List[AddedSelectorSchema] = Field(default_factory=list)
    modified: List[ModifiedExpectationSchema] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)
    unchanged: List[str] = Field(default_factory=list)


class FinalStateSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    blocks: Optional[EntityExpectationsSchema] = None
    timelines: Optional[EntityExpectationsSchema] = None
    chapters: Optional[EntityExpectationsSchema] = None
    persons: Optional[EntityExpectationsSchema] = None
    mediaAssets: Optional[EntityExpectationsSchema] = None


@dataclass(frozen=True)
class AddedSelector:
    conditions: Conditions

    def __post_init__(self) -> None:
        if not self.conditions:
            raise MalformedSpecError("added selector must declare at least one field condition")


@dataclass(frozen=True)
class ModifiedExpectation:
    entity_id: str
    changes: Conditions = field(default_factory=dict)


@dataclass(frozen=True)
class EntityExpectations:
    kind: EntityKind
    added: Tuple[AddedSelector, ...] = ()
    modified: Tuple[ModifiedExpectation, ...] = ()
    deleted: Tuple[str, ...] = ()
    unchanged: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        seen: Dict[str, str] = {}
        declared = (
            ("modified", [item.entity_id for item in self.modified]),
            ("deleted", list(self.deleted)),
            ("unchanged", list(self.unchanged)),
        )
        for bucket, ids in declared:
            for entity_id in ids:
                previous = seen.get(entity_id)
                if previous is not None and previous != bucket:
                    raise MalformedSpecError(
                        f"{self.kind.value} id {entity_id!r} declared as both {previous} and {bucket}"
                    )
                seen[entity_id] = bucket


@dataclass(frozen=True)
class FinalStateSpec:
    kinds: Tuple[EntityExpectations, ...]


@dataclass(frozen=True)
class EntityChange:
    entity_id: str
    before: Optional[Mapping[str, Any]]
    after: Optional[Mapping[str, Any]]


@dataclass(frozen=True)
class KindDiff:
    added: Tuple[EntityChange, ...] = ()
    modified: Tuple[EntityChange, ...] = ()
    deleted: Tuple[EntityChange, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.modified or self.deleted)
