from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from timeline_evals.common.enums import EntityKind
from timeline_evals.common.errors import TraceValidationError
from timeline_evals.traces.models import ExecutionTrace, Snapshot, ToolCallRecord, TraceSchema


def _freeze_snapshot(raw: Optional[Dict[str, List[Dict[str, Any]]]], label: str) -> Optional[Snapshot]:
    if raw is None:
        return None
    kinds: Dict[str, Mapping[str, Mapping[str, Any]]] = {}
    for name, entities in raw.items():
        try:
            EntityKind(name)
        except ValueError as exc:
            raise TraceValidationError(f"{label}: unknown entity kind {name!r}") from exc
        by_id: Dict[str, Mapping[str, Any]] = {}
        for position, entity in enumerate(entities):
            entity_id = entity.get("id")
            if not isinstance(entity_id, str) or not entity_id:
                raise TraceValidationError(f"{label}.{name}[{position}] requires a string id")
            if entity_id in by_id:
                raise TraceValidationError(f"{label}.{name} contains duplicate id {entity_id!r}")
            by_id[entity_id] = MappingProxyType(copy.deepcopy(entity))
        kinds[name] = MappingProxyType(by_id)
    return MappingProxyType(kinds)


def parse_trace(payload: Dict[str, Any]) -> ExecutionTrace:
    try:
        schema = TraceSchema.model_validate(payload)
    except ValidationError as exc:
        raise TraceValidationError(str(exc)) from exc

    tool_calls = None
    if schema.tool_calls is not None:
        tool_calls = tuple(
            ToolCallRecord(name=call)
            if isinstance(call, str)
            else ToolCallRecord(name=call.name, arguments=MappingProxyType(copy.deepcopy(call.arguments)))
            for call in schema.tool_calls
        )

    return ExecutionTrace(
        tool_calls=tool_calls,
        final_message=schema.final_message,
        final_turn_tool_calls=tuple(schema.final_turn_tool_calls),
        before=_freeze_snapshot(schema.before, "before"),
        after=_freeze_snapshot(schema.after, "after"),
        timed_out=schema.timed_out,
    )
