"""Final-state matching over before/after entity snapshots.

Each entity kind is checked on its own, keyed on the stable entity ``id``.
Only declared fields are inspected for ``added`` and ``modified``;
``unchanged`` compares the kind's whole relevant projection.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from timeline_evals.common.enums import EntityKind, FailureKind, SubspecKind
from timeline_evals.common.hashing import stable_json
from timeline_evals.common.results import FailureReason, MatchResult
from timeline_evals.entity_diff.models import (
    AddedSelector,
    EntityExpectations,
    FinalStateSpec,
    ModifiedExpectation,
)
from timeline_evals.entity_diff.projection import drifted_fields, projections_equal
from timeline_evals.predicates.evaluator import describe_all, evaluate_conditions, evaluate_field
from timeline_evals.traces.models import Snapshot

Entities = Mapping[str, Mapping[str, Any]]


def _failure(expected: Any, observed: Any, reason: str, kind: FailureKind = FailureKind.unmet) -> FailureReason:
    return FailureReason(
        subspec=SubspecKind.final_state,
        expected=expected,
        observed=observed,
        reason=reason,
        kind=kind,
    )


def _describe_selector(selector: AddedSelector) -> Dict[str, Any]:
    return {field_name: describe_all(predicates) for field_name, predicates in sorted(selector.conditions.items())}


def _max_assignment(candidates: Sequence[Sequence[int]]) -> Dict[int, int]:
    """Maximum bipartite matching of selectors to distinct entities."""
    owner: Dict[int, int] = {}

    def _assign(selector_index: int, seen: Set[int]) -> bool:
        for entity_index in candidates[selector_index]:
            if entity_index in seen:
                continue
            seen.add(entity_index)
            if entity_index not in owner or _assign(owner[entity_index], seen):
                owner[entity_index] = selector_index
                return True
        return False

    for selector_index in range(len(candidates)):
        _assign(selector_index, set())
    return {selector_index: entity_index for entity_index, selector_index in owner.items()}


def _check_added(kind: EntityKind, selectors: Sequence[AddedSelector], before: Entities, after: Entities) -> List[FailureReason]:
    if not selectors:
        return []
    new_ids = sorted(entity_id for entity_id in after if entity_id not in before)
    candidates = [
        [
            index
            for index, entity_id in enumerate(new_ids)
            if not evaluate_conditions(after[entity_id], selector.conditions)
        ]
        for selector in selectors
    ]
    assignment = _max_assignment(candidates)
    if len(assignment) == len(selectors):
        return []

    # Group identical selectors so the shortfall reads as "need N, found M".
    groups: Dict[str, List[int]] = {}
    for index, selector in enumerate(selectors):
        groups.setdefault(stable_json(_describe_selector(selector)), []).append(index)

    failures: List[FailureReason] = []
    for indices in groups.values():
        matched = sorted(new_ids[assignment[index]] for index in indices if index in assignment)
        if len(matched) == len(indices):
            continue
        description = _describe_selector(selectors[indices[0]])
        failures.append(
            _failure(
                expected={"count": len(indices), "match": description},
                observed={"count": len(matched), "matched_ids": matched, "new_ids": new_ids},
                reason=(
                    f"{kind.value} added matching {stable_json(description)}: "
                    f"need {len(indices)}, found {len(matched)}"
                ),
            )
        )
    return failures


def _check_modified(
    kind: EntityKind,
    expectations: Sequence[ModifiedExpectation],
    before: Entities,
    after: Entities,
) -> List[FailureReason]:
    failures: List[FailureReason] = []
    for expectation in expectations:
        entity_id = expectation.entity_id
        label = f"{kind.value} '{entity_id}'"
        expected = {field_name: describe_all(preds) for field_name, preds in sorted(expectation.changes.items())}
        if entity_id not in before:
            failures.append(_failure(expected, "absent before", f"{label} was not present before the run"))
            continue
        if entity_id not in after:
            failures.append(_failure(expected, "deleted", f"{label} was deleted instead of modified"))
            continue
        if projections_equal(kind, before[entity_id], after[entity_id]):
            failures.append(_failure(expected, "unchanged", f"{label} was not modified"))
            continue
        entity = after[entity_id]
        for field_name in sorted(expectation.changes):
            outcome = evaluate_field(entity, field_name, expectation.changes[field_name])
            if outcome.passed:
                continue
            failures.append(
                _failure(
                    expected={field_name: expected[field_name]},
                    observed={field_name: entity.get(field_name)},
                    reason=f"{label}: {outcome.reason}",
                    kind=outcome.kind or FailureKind.unmet,
                )
            )
    return failures


def _check_deleted(kind: EntityKind, entity_ids: Sequence[str], before: Entities, after: Entities) -> List[FailureReason]:
    failures: List[FailureReason] = []
    for entity_id in entity_ids:
        label = f"{kind.value} '{entity_id}'"
        if entity_id not in before:
            failures.append(_failure("deleted", "absent before", f"{label} was not present before the run"))
        elif entity_id in after:
            failures.append(_failure("deleted", "present", f"{label} was not deleted"))
    return failures


def _check_unchanged(kind: EntityKind, entity_ids: Sequence[str], before: Entities, after: Entities) -> List[FailureReason]:
    failures: List[FailureReason] = []
    for entity_id in entity_ids:
        label = f"{kind.value} '{entity_id}'"
        if entity_id not in before:
            failures.append(_failure("unchanged", "absent before", f"{label} was not present before the run"))
            continue
        if entity_id not in after:
            failures.append(_failure("unchanged", "deleted", f"{label} was deleted"))
            continue
        drifted = drifted_fields(kind, before[entity_id], after[entity_id])
        if drifted:
            observed = {
                field_name: {
                    "before": before[entity_id].get(field_name),
                    "after": after[entity_id].get(field_name),
                }
                for field_name in drifted
            }
            failures.append(_failure("unchanged", observed, f"{label} was changed: {', '.join(drifted)}"))
    return failures


def match_kind(expectations: EntityExpectations, before: Entities, after: Entities) -> List[FailureReason]:
    kind = expectations.kind
    failures: List[FailureReason] = []
    failures.extend(_check_added(kind, expectations.added, before, after))
    failures.extend(_check_modified(kind, expectations.modified, before, after))
    failures.extend(_check_deleted(kind, expectations.deleted, before, after))
    failures.extend(_check_unchanged(kind, expectations.unchanged, before, after))
    return failures


def match_final_state(before: Snapshot, after: Snapshot, spec: Optional[FinalStateSpec]) -> MatchResult:
    if spec is None:
        return MatchResult(passed=True)
    failures: List[FailureReason] = []
    for expectations in spec.kinds:
        name = expectations.kind.value
        # A kind captured on only one side was not snapshotted, not emptied.
        if (name in before) != (name in after):
            missing = "after" if name in before else "before"
            failures.append(
                _failure(
                    f"{name} in before and after snapshots",
                    None,
                    f"{missing} snapshot did not capture {name}",
                    FailureKind.incomplete_trace,
                )
            )
            continue
        failures.extend(match_kind(expectations, before.get(name, {}), after.get(name, {})))
    return MatchResult.from_failures(failures)
