from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Mapping

from timeline_evals.common.enums import EntityKind
from timeline_evals.common.hashing import stable_json


BOOKKEEPING_FIELDS: FrozenSet[str] = frozenset({"createdAt", "updatedAt"})

VOLATILE_FIELDS: Dict[EntityKind, FrozenSet[str]] = {
    EntityKind.blocks: BOOKKEEPING_FIELDS,
    EntityKind.timelines: BOOKKEEPING_FIELDS,
    EntityKind.chapters: BOOKKEEPING_FIELDS,
    EntityKind.persons: BOOKKEEPING_FIELDS,
    EntityKind.mediaAssets: BOOKKEEPING_FIELDS | {"lastAccessedAt"},
}


def relevant_projection(kind: EntityKind, entity: Mapping[str, Any]) -> Dict[str, Any]:
    ignored = VOLATILE_FIELDS.get(kind, BOOKKEEPING_FIELDS)
    return {key: entity[key] for key in sorted(entity) if key not in ignored}


def projections_equal(kind: EntityKind, before: Mapping[str, Any], after: Mapping[str, Any]) -> bool:
    # JSON text comparison keeps 1, 1.0 and True distinct.
    return stable_json(relevant_projection(kind, before)) == stable_json(relevant_projection(kind, after))


def drifted_fields(kind: EntityKind, before: Mapping[str, Any], after: Mapping[str, Any]) -> List[str]:
    left = relevant_projection(kind, before)
    right = relevant_projection(kind, after)
    drifted: List[str] = []
    for key in sorted(set(left) | set(right)):
        if key not in left or key not in right:
            drifted.append(key)
        elif stable_json(left[key]) != stable_json(right[key]):
            drifted.append(key)
    return drifted
