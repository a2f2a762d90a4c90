from __future__ import annotations

from typing import Any, Dict, List, Mapping

from timeline_evals.common.enums import EntityKind
from timeline_evals.entity_diff.models import EntityChange, KindDiff
from timeline_evals.entity_diff.projection import projections_equal
from timeline_evals.traces.models import Snapshot


def diff_kind(
    kind: EntityKind,
    before: Mapping[str, Mapping[str, Any]],
    after: Mapping[str, Mapping[str, Any]],
) -> KindDiff:
    added: List[EntityChange] = []
    modified: List[EntityChange] = []
    deleted: List[EntityChange] = []

    for entity_id in sorted(after):
        previous = before.get(entity_id)
        if previous is None:
            added.append(EntityChange(entity_id=entity_id, before=None, after=after[entity_id]))
        elif not projections_equal(kind, previous, after[entity_id]):
            modified.append(EntityChange(entity_id=entity_id, before=previous, after=after[entity_id]))

    for entity_id in sorted(before):
        if entity_id not in after:
            deleted.append(EntityChange(entity_id=entity_id, before=before[entity_id], after=None))

    return KindDiff(added=tuple(added), modified=tuple(modified), deleted=tuple(deleted))


def compute_entity_diff(before: Snapshot, after: Snapshot) -> Dict[str, KindDiff]:
    diffs: Dict[str, KindDiff] = {}
    for name in sorted(set(before) | set(after)):
        diffs[name] = diff_kind(EntityKind(name), before.get(name, {}), after.get(name, {}))
    return diffs


def summarize_diff(diffs: Mapping[str, KindDiff]) -> Dict[str, Dict[str, List[str]]]:
    return {
        name: {
            "added": [change.entity_id for change in diff.added],
            "modified": [change.entity_id for change in diff.modified],
            "deleted": [change.entity_id for change in diff.deleted],
        }
        for name, diff in diffs.items()
        if not diff.is_empty
    }
