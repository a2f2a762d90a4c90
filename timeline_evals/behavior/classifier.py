"""Classify the agent's terminal turn as completion, question or tool call.

The decision is structural: it looks at whether the last turn invoked tools
and whether its closing text is phrased as a question. It never tries to
understand what the agent meant.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional, Tuple

from timeline_evals.behavior.models import AgentBehaviorSpec, Classification
from timeline_evals.common.enums import BehaviorType, FailureKind, SubspecKind
from timeline_evals.common.results import FailureReason, MatchResult
from timeline_evals.predicates.evaluator import evaluate
from timeline_evals.traces.models import ExecutionTrace, FinalTurn

logger = logging.getLogger(__name__)

# Auxiliary-inverted openings ask even when the agent closes them with a period.
INVERTED_LEADS = (
    "are you",
    "can you",
    "could you",
    "did you",
    "do you want",
    "do you",
    "is it",
    "is that",
    "shall i",
    "should i",
    "would you",
)

# Bare wh-words only ask when the sentence is left unterminated.
WH_LEADS = ("how", "what", "when", "where", "which", "who", "why")

_SENTENCE = re.compile(r"[^.!?\n]+[.!?]*")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_LEADING_MARKUP = " \t*_->#•"


def _sentences(text: str) -> List[str]:
    return [chunk.strip() for chunk in _SENTENCE.findall(text) if chunk.strip()]


def _opens_with(sentence: str, leads: Tuple[str, ...]) -> bool:
    return any(sentence == lead or sentence.startswith(lead + " ") for lead in leads)


def is_interrogative(text: str) -> bool:
    """True when the closing paragraph of ``text`` asks something.

    Only the last paragraph counts, so a rhetorical question earlier in a
    long answer does not turn a completion into a clarification.
    """
    paragraphs = [part for part in _PARAGRAPH_BREAK.split(text.strip()) if part.strip()]
    if not paragraphs:
        return False
    sentences = _sentences(paragraphs[-1])
    if not sentences:
        return False
    if any(sentence.endswith("?") for sentence in sentences):
        return True
    closing = sentences[-1].lstrip(_LEADING_MARKUP).lower()
    if _opens_with(closing, INVERTED_LEADS):
        return True
    return not closing.endswith((".", "!")) and _opens_with(closing, WH_LEADS)


def classify(final_turn: FinalTurn) -> Classification:
    text = (final_turn.text or "").strip()
    asks = bool(text) and is_interrogative(text)

    if final_turn.tool_calls:
        if asks:
            return Classification(
                behavior=None,
                reason=(
                    "terminal turn asks a question while calling "
                    f"{', '.join(sorted(set(final_turn.tool_calls)))}"
                ),
            )
        return Classification(behavior=BehaviorType.tool_call)

    if not text:
        return Classification(behavior=None, reason="terminal turn has neither text nor tool calls")
    if asks:
        return Classification(behavior=BehaviorType.clarification_question)
    return Classification(behavior=BehaviorType.completion)


def _failure(expected: Any, observed: Any, reason: str, kind: FailureKind = FailureKind.unmet) -> FailureReason:
    return FailureReason(
        subspec=SubspecKind.agent_behavior,
        expected=expected,
        observed=observed,
        reason=reason,
        kind=kind,
    )


def match_behavior(trace: ExecutionTrace, spec: Optional[AgentBehaviorSpec]) -> MatchResult:
    if spec is None:
        return MatchResult(passed=True)

    final_turn = trace.final_turn

    if final_turn.text is None and not final_turn.tool_calls:
        return MatchResult.from_failures(
            [_failure(spec.type.value, None, "final message is missing from the trace", FailureKind.incomplete_trace)]
        )

    failures: List[FailureReason] = []
    classification = classify(final_turn)
    observed = classification.behavior.value if classification.behavior else None
    logger.debug("classified terminal turn as %s", observed or "ambiguous")

    if classification.ambiguous:
        failures.append(
            _failure(
                spec.type.value,
                observed,
                f"could not classify terminal turn: {classification.reason}",
                FailureKind.ambiguous_classification,
            )
        )
    elif classification.behavior != spec.type:
        failures.append(_failure(spec.type.value, observed, f"expected {spec.type.value}, observed {observed}"))

    if spec.pattern is not None:
        outcome = evaluate(final_turn.text, spec.pattern)
        if not outcome.passed:
            reason = (
                f"final message does not match /{spec.pattern.source}/"
                if final_turn.text is not None
                else f"no final message to match /{spec.pattern.source}/"
            )
            failures.append(_failure({"pattern": spec.pattern.source}, final_turn.text, reason))

    if spec.tool is not None and spec.tool not in final_turn.tool_calls:
        failures.append(
            _failure(
                {"tool": spec.tool},
                list(final_turn.tool_calls),
                f"terminal turn did not call '{spec.tool}'",
            )
        )

    return MatchResult.from_failures(failures)
