"""Before/after entity diffs and final-state expectations."""

from timeline_evals.entity_diff.diff import compute_entity_diff
from timeline_evals.entity_diff.matcher import match_final_state
from timeline_evals.entity_diff.models import EntityExpectations, FinalStateSpec
from timeline_evals.entity_diff.projection import relevant_projection

__all__ = [
    "EntityExpectations",
    "FinalStateSpec",
    "compute_entity_diff",
    "match_final_state",
    "relevant_projection",
]
