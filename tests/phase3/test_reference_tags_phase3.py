from __future__ import annotations

import pytest

from timeline_evals.common.enums import FailureKind, SubspecKind
from timeline_evals.common.errors import MalformedSpecError
from timeline_evals.reference_tags.matcher import match_reference_tags, parse_reference_tags
from timeline_evals.reference_tags.models import ReferenceTagSpec, ReferenceTagSpecSchema

MESSAGE = (
    'Moving <block id="b1" type="video">Intro shot</block> by two seconds would overlap '
    '<block id="b2" type="video">Street view</block>. Should I also shift '
    '<chapter id="c1" />?'
)


def _spec(**raw):
    return ReferenceTagSpec.from_schema(ReferenceTagSpecSchema.model_validate(raw))


def test_parse_reference_tags_in_message_order():
    tags = parse_reference_tags(MESSAGE)
    assert [(tag.tag, tag.attrs.get("id"), tag.label) for tag in tags] == [
        ("block", "b1", "Intro shot"),
        ("block", "b2", "Street view"),
        ("chapter", "c1", ""),
    ]
    assert parse_reference_tags(None) == []
    assert parse_reference_tags("no tags <here") == []


def test_required_tags_with_attribute_and_label_predicates():
    spec = _spec(
        required=[
            {"tag": "block", "attrs": {"id": "b1"}, "label": {"pattern": "intro"}},
            {"tag": "block", "attrs": {"id": "b2", "type": "video"}},
        ],
        min_count=[{"tag": "block", "count": 2}],
        max_count=[{"tag": "chapter", "count": 1}],
    )
    assert match_reference_tags(MESSAGE, spec).passed


def test_missing_required_tag_fails():
    spec = _spec(required=[{"tag": "block", "attrs": {"id": "b3"}}])
    result = match_reference_tags(MESSAGE, spec)
    assert not result.passed
    failure = result.failures[0]
    assert failure.subspec == SubspecKind.reference_tags
    assert len(failure.observed) == 2


def test_forbidden_and_count_bounds():
    spec = _spec(
        forbidden=[{"tag": "chapter"}],
        min_count=[{"tag": "block", "count": 3}],
        max_count=[{"tag": "chapter", "count": 0}],
    )
    reasons = [failure.reason for failure in match_reference_tags(MESSAGE, spec).failures]
    assert reasons == [
        "Forbidden tag <chapter> found in final message",
        "expected at least 3 <block> tags, found 2",
        "expected at most 0 <chapter> tags, found 1",
    ]


def test_missing_message_is_incomplete_only_when_tags_are_needed():
    required = _spec(required=[{"tag": "block"}])
    result = match_reference_tags(None, required)
    assert result.failures[0].kind == FailureKind.incomplete_trace
    assert match_reference_tags(None, _spec(forbidden=[{"tag": "block"}])).passed


def test_min_count_above_max_count_is_malformed():
    with pytest.raises(MalformedSpecError):
        _spec(min_count=[{"tag": "block", "count": 3}], max_count=[{"tag": "block", "count": 1}])
