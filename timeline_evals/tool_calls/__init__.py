from timeline_evals.tool_calls.matcher import match_tool_calls
from timeline_evals.tool_calls.models import ToolCallSpec

__all__ = ["ToolCallSpec", "match_tool_calls"]
