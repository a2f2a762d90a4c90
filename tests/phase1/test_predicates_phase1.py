from __future__ import annotations

import math

import pytest

from timeline_evals.common.enums import FailureKind
from timeline_evals.common.errors import MalformedSpecError
from timeline_evals.predicates.evaluator import (
    evaluate,
    evaluate_conditions,
    evaluate_field,
    parse_conditions,
    parse_field_predicates,
)
from timeline_evals.predicates.models import Equals, Gte, Lte, Pattern


def test_equals_is_strict_about_booleans_and_types():
    assert evaluate(0, Equals(0)).passed
    assert evaluate(0.0, Equals(0)).passed
    assert not evaluate(False, Equals(0)).passed
    assert not evaluate(1, Equals(True)).passed
    assert not evaluate("0", Equals(0)).passed
    assert evaluate(None, Equals(None)).passed
    assert evaluate({"a": [1, 2]}, Equals({"a": [1, 2]})).passed


def test_equals_stays_strict_inside_containers():
    assert not evaluate([True, 2], Equals([1, 2])).passed
    assert not evaluate({"a": True}, Equals({"a": 1})).passed
    assert not evaluate({"a": [0, {"b": False}]}, Equals({"a": [0, {"b": 0}]})).passed
    assert not evaluate([1, 2], Equals([1, 2, 3])).passed
    assert not evaluate({"a": 1}, Equals({"a": 1, "b": 2})).passed
    assert evaluate([1.0, 2], Equals([1, 2])).passed
    assert evaluate({"a": [True, None]}, Equals({"a": [True, None]})).passed


def test_range_predicates_reject_non_numbers_without_raising():
    assert evaluate(137, Gte(137)).passed
    assert evaluate(237, Lte(237)).passed
    assert not evaluate(136, Gte(137)).passed
    for value in (None, "200", True, math.nan, [200]):
        outcome = evaluate(value, Gte(0))
        assert not outcome.passed
        assert "number" in outcome.reason


def test_pattern_is_case_insensitive_search():
    predicate = Pattern("direction|earlier")
    assert evaluate("Which DIRECTION should I move it?", predicate).passed
    assert not evaluate("Done.", predicate).passed
    assert not evaluate(42, predicate).passed


def test_absent_predicate_is_unconstrained():
    assert evaluate("anything", None).passed


def test_invalid_pattern_is_rejected_at_parse_time():
    with pytest.raises(MalformedSpecError):
        parse_field_predicates({"pattern": "(unclosed"})


def test_parse_field_predicates_shorthand_and_conjunction():
    assert parse_field_predicates(0) == (Equals(0),)
    assert parse_field_predicates("video") == (Equals("video"),)
    assert parse_field_predicates({"gte": 137, "lte": 237}) == (Gte(137), Lte(237))
    assert parse_field_predicates({"equals": None}) == (Equals(None),)


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"gte": "ten"},
        {"lte": True},
        {"pattern": ""},
        {"oneOf": [1, 2]},
    ],
)
def test_parse_field_predicates_rejects_malformed(raw):
    with pytest.raises(MalformedSpecError):
        parse_field_predicates(raw, path="blocks/durationInFrames")


def test_range_conjunction_on_field():
    predicates = parse_field_predicates({"gte": 137, "lte": 237})
    assert evaluate_field({"durationInFrames": 187}, "durationInFrames", predicates).passed
    outcome = evaluate_field({"durationInFrames": 238}, "durationInFrames", predicates)
    assert not outcome.passed
    assert "durationInFrames" in outcome.reason
    assert "<= 237" in outcome.reason


def test_missing_field_is_reported_not_raised():
    outcome = evaluate_field({"id": "a"}, "durationInFrames", (Equals(1),))
    assert not outcome.passed
    assert outcome.kind == FailureKind.missing_field


def test_explicit_null_is_not_missing():
    outcome = evaluate_field({"label": None}, "label", (Equals(None),))
    assert outcome.passed


def test_evaluate_conditions_collects_every_failing_field():
    conditions = parse_conditions({"blockType": "video", "mediaAssetId": "asset-1", "volume": {"lte": 1}})
    entity = {"blockType": "audio", "mediaAssetId": "asset-1"}
    failures = evaluate_conditions(entity, conditions)
    assert len(failures) == 2
    kinds = sorted(failure.kind.value for failure in failures)
    assert kinds == ["missing_field", "unmet"]
