"""Field predicates: equals, gte, lte and pattern."""

from timeline_evals.predicates.evaluator import (
    evaluate,
    evaluate_conditions,
    evaluate_field,
    parse_field_predicates,
)
from timeline_evals.predicates.models import Equals, FieldPredicate, Gte, Lte, Pattern, PredicateOutcome

__all__ = [
    "Equals",
    "FieldPredicate",
    "Gte",
    "Lte",
    "Pattern",
    "PredicateOutcome",
    "evaluate",
    "evaluate_conditions",
    "evaluate_field",
    "parse_field_predicates",
]
