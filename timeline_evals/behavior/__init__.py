"""Terminal-turn behavior classification."""

from timeline_evals.behavior.classifier import classify, is_interrogative, match_behavior
from timeline_evals.behavior.models import AgentBehaviorSpec, Classification

__all__ = ["AgentBehaviorSpec", "Classification", "classify", "is_interrogative", "match_behavior"]
