"""Bundled montage-agent scenarios.

Block ids refer to the reference "Problem", "Surroundings" and "Hook"
chapters of the demo projects; frame values assume 30 fps.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

DEMO_PROJECT_ID = "e814f244-c66b-4b55-a681-b41a40efcd44"
LECTURE_PROJECT_ID = "b3407ed2-3d9d-4474-bf06-58db3f96340f"

PROBLEM_CHAPTER_ID = "a59a6ce2-e9bd-4338-a260-f8428f8a4a67"
SURROUNDINGS_CHAPTER_ID = "b5d510ff-0ad6-48f9-a028-f81ce41d9d6f"
INTRO_CHAPTER_ID = "f45ffef1-6deb-4d70-9d39-979834aa4570"
HOOK_CHAPTER_ID = "a33829ec-afb1-41d2-ab16-978a07b41701"

PROBLEM_BLOCK_1 = "46ebff95-61a4-431d-81a5-586f92eeffd7"
PROBLEM_BLOCK_2 = "07f2ee66-0c5a-4c6b-9994-98006cfd579e"
SURROUNDINGS_BLOCK_1 = "445b3c90-fb7b-410a-b601-f4e247099131"
SURROUNDINGS_BLOCK_2 = "a8699f30-07cd-4482-9a1d-435f148f2e6b"
LECTURE_ASSET_ID = "02d10a4a-06f5-4288-af9e-a80c5e940372"
HOOK_TIMELINE_ID = "1ffb9580-8295-45eb-b4ad-07bb64b7db0b"

EDITING_TOOLS = ["moveBlocks", "trimBlock", "removeBlocks", "splitBlock", "updateBlock"]


def _swap_and_equalize(first_duration: Dict[str, int], second_offset: Dict[str, int], label: str) -> Dict[str, Any]:
    return {
        "label": label,
        "tool_calls": {"required": ["trimBlock", "moveBlocks", "moveBlocksTo"]},
        "final_state": {
            "blocks": {
                "modified": [
                    {
                        "id": PROBLEM_BLOCK_2,
                        "changes": {
                            "timelineOffsetInFrames": {"equals": 0},
                            "durationInFrames": first_duration,
                            "fileRelativeStartFrame": {"equals": 0},
                        },
                    },
                    {
                        "id": PROBLEM_BLOCK_1,
                        "changes": {
                            "timelineOffsetInFrames": second_offset,
                            "durationInFrames": second_offset,
                            "fileRelativeStartFrame": {"equals": 0},
                        },
                    },
                ]
            }
        },
    }


def _equalize_blocks() -> Dict[str, Any]:
    return {
        "id": "montage-move-trim-equalize-001",
        "name": "Swap block order, equalize durations and close gaps",
        "agent": "montage",
        "tags": ["trimBlock", "moveBlocks", "equalize", "removeGaps", "swapOrder"],
        "description": (
            "The agent swaps the two blocks so block 2 plays first, equalizes their durations "
            "within 50 frames and removes every gap."
        ),
        "input": {
            "user_message": "Swap the order of the blocks and make them the same length with no gaps",
            "context": {"project_id": DEMO_PROJECT_ID, "chapter_id": PROBLEM_CHAPTER_ID},
        },
        "expectations": [
            _swap_and_equalize({"gte": 137, "lte": 237}, {"gte": 137, "lte": 237}, "shorten block 1"),
            _swap_and_equalize({"gte": 346, "lte": 446}, {"gte": 346, "lte": 446}, "extend block 2"),
            _swap_and_equalize({"gte": 241, "lte": 341}, {"gte": 241, "lte": 341}, "meet in the middle"),
        ],
        "timeout": 120000,
    }


def _remove_second_block() -> Dict[str, Any]:
    return {
        "id": "montage-remove-second-block-001",
        "name": "Surroundings: remove the second block",
        "agent": "montage",
        "tags": ["removeBlocks", "deletion", "single-block"],
        "description": "The agent removes the second block of the Surroundings chapter.",
        "input": {
            "user_message": "Remove the second block",
            "context": {"project_id": DEMO_PROJECT_ID, "chapter_id": SURROUNDINGS_CHAPTER_ID},
        },
        "expectations": [
            {
                "tool_calls": {"required": ["removeBlocks"]},
                "final_state": {
                    "blocks": {
                        "deleted": [SURROUNDINGS_BLOCK_2],
                        "unchanged": [SURROUNDINGS_BLOCK_1],
                    }
                },
            }
        ],
        "timeout": 60000,
    }


def _move_first_block() -> Dict[str, Any]:
    return {
        "id": "montage-move-first-block-001",
        "name": "Moving a block would overlap its neighbour",
        "agent": "montage",
        "tags": ["moveBlocks", "clarification", "overlap", "collision-detection"],
        "description": "The agent notices the move would overlap the next block and asks before editing.",
        "input": {
            "user_message": "Move the first block 2 seconds later",
            "context": {"project_id": DEMO_PROJECT_ID, "chapter_id": PROBLEM_CHAPTER_ID},
        },
        "expectations": [
            {
                "agent_behavior": {"type": "clarification_question"},
                "reference_tags": {
                    "required": [
                        {"tag": "block", "attrs": {"id": PROBLEM_BLOCK_1}},
                        {"tag": "block", "attrs": {"id": PROBLEM_BLOCK_2}},
                    ],
                    "min_count": [{"tag": "block", "count": 2}],
                },
                "final_state": {"blocks": {"unchanged": [PROBLEM_BLOCK_1, PROBLEM_BLOCK_2]}},
            }
        ],
        "timeout": 40000,
    }


def _move_block_ambiguous() -> Dict[str, Any]:
    return {
        "id": "montage-move-block-ambiguous-001",
        "name": "Ambiguous request: move a block without a direction",
        "agent": "montage",
        "tags": ["moveBlocks", "ambiguous", "clarification"],
        "description": "The agent either asks which direction to move or moves the block in a default direction.",
        "input": {
            "user_message": "Move the block by 2 seconds",
            "context": {"project_id": DEMO_PROJECT_ID, "chapter_id": INTRO_CHAPTER_ID},
        },
        "expectations": [
            {
                "label": "ask for the direction",
                "agent_behavior": {
                    "type": "clarification_question",
                    "pattern": "direction|forward|backward|earlier|later|left|right",
                },
            },
            {
                "label": "assume a direction and move",
                "agent_behavior": {"type": "tool_call", "tool": "moveBlocks"},
            },
            {
                "label": "move and report",
                "tool_calls": {"required": ["moveBlocks"]},
                "agent_behavior": {"type": "completion"},
            },
        ],
        "timeout": 40000,
    }


def _select_hook_clips() -> Dict[str, Any]:
    hook_clip = {
        "match": {
            "blockType": "video",
            "timelineId": HOOK_TIMELINE_ID,
            "mediaAssetId": LECTURE_ASSET_ID,
        }
    }
    return {
        "id": "montage-select-hook-clips-001",
        "name": "Pick short lecture quotes for an opening hook",
        "agent": "montage",
        "tags": ["getMediaAssetsTranscriptions", "createBlocksFromAssets", "complex-montage", "hook-creation"],
        "description": (
            "The agent reads the lecture transcript, picks 3-5 short engaging quotes and cuts them "
            "into the Hook chapter as separate blocks."
        ),
        "input": {
            "user_message": (
                f"From the lecture video (id: {LECTURE_ASSET_ID}) pick 3-5 short quotes that work as "
                "an opening hook and edit them together. The hook should last 15-30 seconds."
            ),
            "context": {"project_id": LECTURE_PROJECT_ID, "chapter_id": HOOK_CHAPTER_ID},
        },
        "expectations": [
            {
                "tool_calls": {"required": ["createBlocksFromAssets"]},
                "final_state": {"blocks": {"added": [hook_clip, hook_clip, hook_clip]}},
            }
        ],
        "timeout": 360000,
    }


def _resize_mode_question() -> Dict[str, Any]:
    return {
        "id": "montage-info-resize-mode-001",
        "name": "Why is the video smaller than the project resolution",
        "agent": "montage",
        "tags": ["info-question", "resizeMode", "video-settings", "no-modification"],
        "description": "The agent explains the block's resizeMode setting without editing anything.",
        "input": {
            "user_message": "Why doesn't the video fill the project resolution?",
            "context": {"project_id": DEMO_PROJECT_ID, "chapter_id": SURROUNDINGS_CHAPTER_ID},
        },
        "expectations": [
            {
                "tool_calls": {"forbidden": list(EDITING_TOOLS)},
                "agent_behavior": {"type": "completion", "pattern": "resize"},
            }
        ],
        "timeout": 60000,
    }


def montage_scenario_payloads() -> Tuple[Dict[str, Any], ...]:
    builders: List[Any] = [
        _equalize_blocks,
        _remove_second_block,
        _move_first_block,
        _move_block_ambiguous,
        _select_hook_clips,
        _resize_mode_question,
    ]
    return tuple(build() for build in builders)
