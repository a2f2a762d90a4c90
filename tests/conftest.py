from __future__ import annotations

from typing import Any, Dict, List

import pytest

from timeline_evals.fixtures.montage import (
    DEMO_PROJECT_ID,
    PROBLEM_BLOCK_1,
    PROBLEM_BLOCK_2,
    PROBLEM_CHAPTER_ID,
)


def make_block(block_id: str, offset: int, duration: int, **extra: Any) -> Dict[str, Any]:
    block = {
        "id": block_id,
        "blockType": "video",
        "timelineOffsetInFrames": offset,
        "durationInFrames": duration,
        "fileRelativeStartFrame": 0,
        "createdAt": "2025-11-02T10:00:00Z",
        "updatedAt": "2025-11-02T10:00:00Z",
    }
    block.update(extra)
    return block


def make_scenario_payload(expectations: List[Dict[str, Any]], **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": "scenario-under-test",
        "name": "Scenario under test",
        "agent": "montage",
        "tags": ["test"],
        "input": {
            "user_message": "Do the thing",
            "context": {"project_id": DEMO_PROJECT_ID, "chapter_id": PROBLEM_CHAPTER_ID},
        },
        "expectations": expectations,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def block_factory():
    return make_block


@pytest.fixture
def scenario_payload():
    return make_scenario_payload


@pytest.fixture
def problem_before():
    return {
        "blocks": [
            make_block(PROBLEM_BLOCK_1, 25, 396),
            make_block(PROBLEM_BLOCK_2, 448, 187),
        ]
    }


@pytest.fixture
def swapped_after():
    return {
        "blocks": [
            make_block(PROBLEM_BLOCK_1, 187, 187, updatedAt="2025-11-02T10:05:00Z"),
            make_block(PROBLEM_BLOCK_2, 0, 187, updatedAt="2025-11-02T10:05:00Z"),
        ]
    }
