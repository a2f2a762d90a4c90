"""Reference-tag citations in the agent's final message.

Agents cite document entities inline, for example
``<block id="46eb" type="video">Intro</block>`` or ``<chapter id="c1" />``.
Attribute values are compared as strings.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from timeline_evals.common.enums import FailureKind, SubspecKind
from timeline_evals.common.results import FailureReason, MatchResult
from timeline_evals.predicates.evaluator import describe_all, evaluate, evaluate_conditions
from timeline_evals.reference_tags.models import ReferenceTag, ReferenceTagSpec, TagExpectation

_ATTRIBUTE = re.compile(r'([\w-]+)="([^"]*)"')
_PAIRED_TAG = re.compile(r"<(\w+)(\s[^>]*?)?(?<!/)>([^<]*)</\1\s*>")
_SELF_CLOSING_TAG = re.compile(r"<(\w+)(\s[^>]*?)?\s*/>")


def _attributes(raw: Optional[str]) -> Dict[str, str]:
    if not raw:
        return {}
    return {name: value for name, value in _ATTRIBUTE.findall(raw)}


def parse_reference_tags(message: Optional[str]) -> List[ReferenceTag]:
    if not message:
        return []
    tags: List[ReferenceTag] = []
    for match in _PAIRED_TAG.finditer(message):
        tags.append(
            ReferenceTag(
                tag=match.group(1),
                attrs=_attributes(match.group(2)),
                label=match.group(3).strip(),
                raw=match.group(0),
                position=match.start(),
            )
        )
    for match in _SELF_CLOSING_TAG.finditer(message):
        tags.append(
            ReferenceTag(
                tag=match.group(1),
                attrs=_attributes(match.group(2)),
                label="",
                raw=match.group(0),
                position=match.start(),
            )
        )
    tags.sort(key=lambda item: item.position)
    return tags


def _matches(tag: ReferenceTag, expectation: TagExpectation) -> bool:
    if tag.tag != expectation.tag:
        return False
    if evaluate_conditions(tag.attrs, expectation.attrs):
        return False
    return all(evaluate(tag.label, predicate).passed for predicate in expectation.label)


def _describe(expectation: TagExpectation) -> Dict[str, Any]:
    described: Dict[str, Any] = {"tag": expectation.tag}
    if expectation.attrs:
        described["attrs"] = {name: describe_all(preds) for name, preds in sorted(expectation.attrs.items())}
    if expectation.label:
        described["label"] = describe_all(expectation.label)
    return described


def _failure(expected: Any, observed: Any, reason: str, kind: FailureKind = FailureKind.unmet) -> FailureReason:
    return FailureReason(
        subspec=SubspecKind.reference_tags,
        expected=expected,
        observed=observed,
        reason=reason,
        kind=kind,
    )


def match_reference_tags(message: Optional[str], spec: Optional[ReferenceTagSpec]) -> MatchResult:
    if spec is None:
        return MatchResult(passed=True)
    if message is None:
        if spec.needs_message:
            return MatchResult.from_failures(
                [
                    _failure(
                        "final message with reference tags",
                        None,
                        "final message is missing from the trace",
                        FailureKind.incomplete_trace,
                    )
                ]
            )
        return MatchResult(passed=True)

    tags = parse_reference_tags(message)
    failures: List[FailureReason] = []

    for expectation in spec.required:
        if any(_matches(tag, expectation) for tag in tags):
            continue
        same_kind = [tag.to_dict() for tag in tags if tag.tag == expectation.tag]
        failures.append(
            _failure(_describe(expectation), same_kind, f"Required tag <{expectation.tag}> not found in final message")
        )

    for expectation in spec.forbidden:
        found = [tag for tag in tags if _matches(tag, expectation)]
        if found:
            failures.append(
                _failure(
                    {"not_present": _describe(expectation)},
                    [tag.raw for tag in found],
                    f"Forbidden tag <{expectation.tag}> found in final message",
                )
            )

    counts: Dict[str, int] = {}
    for tag in tags:
        counts[tag.tag] = counts.get(tag.tag, 0) + 1
    for bound in spec.min_count:
        actual = counts.get(bound.tag, 0)
        if actual < bound.count:
            failures.append(
                _failure(f">= {bound.count}", actual, f"expected at least {bound.count} <{bound.tag}> tags, found {actual}")
            )
    for bound in spec.max_count:
        actual = counts.get(bound.tag, 0)
        if actual > bound.count:
            failures.append(
                _failure(f"<= {bound.count}", actual, f"expected at most {bound.count} <{bound.tag}> tags, found {actual}")
            )

    return MatchResult.from_failures(failures)
