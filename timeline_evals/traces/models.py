from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class ToolCallSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    output: Any = None
    duration_ms: Optional[float] = None


class TraceSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    tool_calls: Optional[List[Union[str, ToolCallSchema]]] = None
    final_message: Optional[str] = None
    final_turn_tool_calls: List[str] = Field(default_factory=list)
    before: Optional[Dict[str, List[Dict[str, Any]]]] = None
    after: Optional[Dict[str, List[Dict[str, Any]]]] = None
    timed_out: bool = False


@dataclass(frozen=True)
class ToolCallRecord:
    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FinalTurn:
    """The agent's last turn: its text and any tools it invoked in that turn."""

    text: Optional[str]
    tool_calls: Tuple[str, ...] = ()


Snapshot = Mapping[str, Mapping[str, Mapping[str, Any]]]


@dataclass(frozen=True)
class ExecutionTrace:
    tool_calls: Optional[Tuple[ToolCallRecord, ...]]
    final_message: Optional[str]
    final_turn_tool_calls: Tuple[str, ...] = ()
    before: Optional[Snapshot] = None
    after: Optional[Snapshot] = None
    timed_out: bool = False

    @property
    def tool_names(self) -> Optional[Tuple[str, ...]]:
        if self.tool_calls is None:
            return None
        return tuple(call.name for call in self.tool_calls)

    @property
    def final_turn(self) -> FinalTurn:
        return FinalTurn(text=self.final_message, tool_calls=self.final_turn_tool_calls)

    def summary(self) -> Dict[str, Any]:
        names: List[str] = list(self.tool_names or ())
        return {
            "tool_calls": names,
            "final_message": self.final_message,
            "final_turn_tool_calls": list(self.final_turn_tool_calls),
            "timed_out": self.timed_out,
            "has_snapshots": self.before is not None and self.after is not None,
        }
