"""Scenario payload validation.

Payloads are checked with pydantic first and then converted into the frozen
dataclasses the matchers work on. Any authoring mistake surfaces here as a
``MalformedSpecError``; nothing is defaulted past this point.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from timeline_evals.behavior.models import AgentBehaviorSpec
from timeline_evals.common.enums import EntityKind
from timeline_evals.common.errors import MalformedSpecError
from timeline_evals.entity_diff.models import (
    AddedSelector,
    EntityExpectations,
    EntityExpectationsSchema,
    FinalStateSchema,
    FinalStateSpec,
    ModifiedExpectation,
)
from timeline_evals.predicates.evaluator import parse_conditions
from timeline_evals.reference_tags.models import ReferenceTagSpec
from timeline_evals.scenarios.models import (
    DEFAULT_TIMEOUT_MS,
    ContextRef,
    ExpectationAlternative,
    ExpectationAlternativeSchema,
    Scenario,
    ScenarioContext,
    ScenarioInput,
    ScenarioSchema,
)
from timeline_evals.tool_calls.models import ToolCallSpec


def _entity_expectations(kind: EntityKind, schema: EntityExpectationsSchema, path: str) -> EntityExpectations:
    added: List[AddedSelector] = []
    for index, selector in enumerate(schema.added):
        if not selector.match:
            raise MalformedSpecError(f"{path}/added/{index}: match must declare at least one field")
        added.append(AddedSelector(conditions=parse_conditions(selector.match, path=f"{path}/added/{index}")))

    modified = tuple(
        ModifiedExpectation(
            entity_id=item.id,
            changes=parse_conditions(item.changes, path=f"{path}/modified/{item.id}"),
        )
        for item in schema.modified
    )
    return EntityExpectations(
        kind=kind,
        added=tuple(added),
        modified=modified,
        deleted=tuple(schema.deleted),
        unchanged=tuple(schema.unchanged),
    )


def build_final_state(schema: FinalStateSchema, *, path: str = "final_state") -> FinalStateSpec:
    kinds = []
    for kind in EntityKind:
        expectations = getattr(schema, kind.value)
        if expectations is None:
            continue
        kinds.append(_entity_expectations(kind, expectations, f"{path}/{kind.value}"))
    return FinalStateSpec(kinds=tuple(kinds))


def _alternative(schema: ExpectationAlternativeSchema, path: str) -> ExpectationAlternative:
    tool_calls = None
    if schema.tool_calls is not None:
        tool_calls = ToolCallSpec.from_schema(schema.tool_calls)
    final_state = None
    if schema.final_state is not None:
        final_state = build_final_state(schema.final_state, path=f"{path}/final_state")
    agent_behavior = None
    if schema.agent_behavior is not None:
        agent_behavior = AgentBehaviorSpec.from_schema(schema.agent_behavior)
    reference_tags = None
    if schema.reference_tags is not None:
        reference_tags = ReferenceTagSpec.from_schema(schema.reference_tags, path=f"{path}/reference_tags")
    return ExpectationAlternative(
        label=schema.label,
        tool_calls=tool_calls,
        final_state=final_state,
        agent_behavior=agent_behavior,
        reference_tags=reference_tags,
    )


def parse_scenario(payload: Mapping[str, Any], *, default_timeout_ms: Optional[int] = None) -> Scenario:
    try:
        schema = ScenarioSchema.model_validate(payload)
    except ValidationError as exc:
        raise MalformedSpecError(str(exc)) from exc

    if not schema.expectations:
        raise MalformedSpecError(f"{schema.id}: at least one expectation alternative is required")

    try:
        alternatives = tuple(
            _alternative(item, f"{schema.id}/expectations/{index}") for index, item in enumerate(schema.expectations)
        )
    except MalformedSpecError as exc:
        raise MalformedSpecError(f"{schema.id}: {exc}") from exc

    context = schema.input.context
    return Scenario(
        id=schema.id,
        name=schema.name,
        agent=schema.agent,
        tags=tuple(schema.tags),
        description=schema.description,
        input=ScenarioInput(
            user_message=schema.input.user_message,
            context=ScenarioContext(
                project_id=context.project_id,
                chapter_id=context.chapter_id,
                context_refs=tuple(ContextRef(type=ref.type, id=ref.id) for ref in context.context_refs),
                custom_fps=context.custom_fps,
            ),
        ),
        alternatives=alternatives,
        timeout_ms=schema.timeout or default_timeout_ms or DEFAULT_TIMEOUT_MS,
        definition=schema.model_dump(mode="json", exclude_none=True),
    )
