from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List


@dataclass(frozen=True)
class EvaluationEvent:
    event_type: str
    details: Dict[str, object]


class EvaluationObservability:
    def __init__(self) -> None:
        self._events: List[EvaluationEvent] = []

    def record(self, event_type: str, **details: object) -> None:
        self._events.append(EvaluationEvent(event_type=event_type, details=details))

    def extend(self, events: Iterable[EvaluationEvent]) -> None:
        self._events.extend(events)

    def events(self) -> List[EvaluationEvent]:
        return list(self._events)
