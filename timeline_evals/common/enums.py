from enum import Enum


class EntityKind(str, Enum):
    blocks = "blocks"
    timelines = "timelines"
    chapters = "chapters"
    persons = "persons"
    mediaAssets = "mediaAssets"


class BehaviorType(str, Enum):
    completion = "completion"
    clarification_question = "clarification_question"
    tool_call = "tool_call"


class SubspecKind(str, Enum):
    tool_calls = "tool_calls"
    final_state = "final_state"
    agent_behavior = "agent_behavior"
    reference_tags = "reference_tags"
    trace = "trace"


class FailureKind(str, Enum):
    unmet = "unmet"
    missing_field = "missing_field"
    incomplete_trace = "incomplete_trace"
    ambiguous_classification = "ambiguous_classification"
