from timeline_evals.reference_tags.matcher import match_reference_tags, parse_reference_tags
from timeline_evals.reference_tags.models import ReferenceTag, ReferenceTagSpec, TagCount, TagExpectation

__all__ = [
    "ReferenceTag",
    "ReferenceTagSpec",
    "TagCount",
    "TagExpectation",
    "match_reference_tags",
    "parse_reference_tags",
]
