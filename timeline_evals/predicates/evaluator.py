"""Field-level predicate matching shared by every matcher."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from timeline_evals.common.enums import FailureKind
from timeline_evals.common.errors import MalformedSpecError
from timeline_evals.predicates.models import (
    Equals,
    FieldPredicate,
    Gte,
    Lte,
    Pattern,
    PredicateOutcome,
    PredicateSchema,
)


_PREDICATE_KEYS = ("equals", "gte", "lte", "pattern")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and not math.isnan(value)


def _strict_equals(actual: Any, expected: Any) -> bool:
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    if _is_number(actual) and _is_number(expected):
        return actual == expected
    if isinstance(actual, Mapping) and isinstance(expected, Mapping):
        if set(actual) != set(expected):
            return False
        return all(_strict_equals(actual[key], expected[key]) for key in expected)
    if isinstance(actual, (list, tuple)) and isinstance(expected, (list, tuple)):
        if len(actual) != len(expected):
            return False
        return all(_strict_equals(item, other) for item, other in zip(actual, expected))
    if type(actual) is not type(expected):
        return False
    return actual == expected


def describe(predicate: FieldPredicate) -> Dict[str, Any]:
    if isinstance(predicate, Equals):
        return {"equals": predicate.value}
    if isinstance(predicate, Gte):
        return {"gte": predicate.value}
    if isinstance(predicate, Lte):
        return {"lte": predicate.value}
    if isinstance(predicate, Pattern):
        return {"pattern": predicate.source}
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def describe_all(predicates: Sequence[FieldPredicate]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for predicate in predicates:
        merged.update(describe(predicate))
    return merged


def evaluate(value: Any, predicate: Optional[FieldPredicate]) -> PredicateOutcome:
    if predicate is None:
        return PredicateOutcome.ok()

    if isinstance(predicate, Equals):
        if _strict_equals(value, predicate.value):
            return PredicateOutcome.ok()
        return PredicateOutcome.fail(f"expected {predicate.value!r}, got {value!r}")

    if isinstance(predicate, (Gte, Lte)):
        if not _is_number(value):
            return PredicateOutcome.fail(f"expected a number, got {value!r}")
        if isinstance(predicate, Gte):
            if value >= predicate.value:
                return PredicateOutcome.ok()
            return PredicateOutcome.fail(f"expected >= {predicate.value}, got {value!r}")
        if value <= predicate.value:
            return PredicateOutcome.ok()
        return PredicateOutcome.fail(f"expected <= {predicate.value}, got {value!r}")

    if isinstance(predicate, Pattern):
        if not isinstance(value, str):
            return PredicateOutcome.fail(f"expected text matching /{predicate.source}/, got {value!r}")
        if predicate.compiled.search(value):
            return PredicateOutcome.ok()
        return PredicateOutcome.fail(f"text does not match /{predicate.source}/")

    raise TypeError(f"Unsupported predicate: {predicate!r}")


def evaluate_field(
    entity: Mapping[str, Any],
    field_name: str,
    predicates: Sequence[FieldPredicate],
) -> PredicateOutcome:
    if not predicates:
        return PredicateOutcome.ok()
    if field_name not in entity:
        return PredicateOutcome.fail(f"field '{field_name}' is missing", FailureKind.missing_field)
    value = entity[field_name]
    for predicate in predicates:
        outcome = evaluate(value, predicate)
        if not outcome.passed:
            return PredicateOutcome.fail(f"field '{field_name}': {outcome.reason}", outcome.kind or FailureKind.unmet)
    return PredicateOutcome.ok()


def evaluate_conditions(
    entity: Mapping[str, Any],
    conditions: Mapping[str, Sequence[FieldPredicate]],
) -> List[PredicateOutcome]:
    """Return the failing outcomes for a conjunction of field conditions."""
    failures: List[PredicateOutcome] = []
    for field_name in sorted(conditions):
        outcome = evaluate_field(entity, field_name, conditions[field_name])
        if not outcome.passed:
            failures.append(outcome)
    return failures


def parse_field_predicates(raw: Any, *, path: str = "") -> Tuple[FieldPredicate, ...]:
    if not isinstance(raw, dict):
        return (Equals(raw),)
    if not raw:
        raise MalformedSpecError(f"{path or 'predicate'}: at least one of {', '.join(_PREDICATE_KEYS)} is required")
    try:
        schema = PredicateSchema.model_validate(raw)
    except ValidationError as exc:
        raise MalformedSpecError(f"{path or 'predicate'}: {exc}") from exc

    predicates: List[FieldPredicate] = []
    provided = schema.model_fields_set
    if "equals" in provided:
        predicates.append(Equals(schema.equals))
    if "gte" in provided:
        if schema.gte is None:
            raise MalformedSpecError(f"{path}: gte requires a number")
        predicates.append(Gte(schema.gte))
    if "lte" in provided:
        if schema.lte is None:
            raise MalformedSpecError(f"{path}: lte requires a number")
        predicates.append(Lte(schema.lte))
    if "pattern" in provided:
        if not schema.pattern:
            raise MalformedSpecError(f"{path}: pattern requires a non-empty string")
        predicates.append(Pattern(schema.pattern))
    return tuple(predicates)


def parse_conditions(raw: Mapping[str, Any], *, path: str = "") -> Dict[str, Tuple[FieldPredicate, ...]]:
    return {
        str(field_name): parse_field_predicates(value, path=f"{path}/{field_name}")
        for field_name, value in raw.items()
    }

