from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Pattern as RegexPattern, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt

from timeline_evals.common.enums import FailureKind
from timeline_evals.common.errors import MalformedSpecError


class PredicateSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")
    equals: Any = None
    gte: Optional[Union[StrictInt, StrictFloat]] = None
    lte: Optional[Union[StrictInt, StrictFloat]] = None
    pattern: Optional[str] = None


@dataclass(frozen=True)
class Equals:
    value: Any


@dataclass(frozen=True)
class Gte:
    value: Union[int, float]


@dataclass(frozen=True)
class Lte:
    value: Union[int, float]


@dataclass(frozen=True)
class Pattern:
    """Case-insensitive regex searched anywhere in the text.

    A plain word is a valid regex, so literal substrings need no escaping
    unless they contain metacharacters.
    """

    source: str
    compiled: RegexPattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re.compile(self.source, re.IGNORECASE)
        except re.error as exc:
            raise MalformedSpecError(f"Invalid pattern {self.source!r}: {exc}") from exc
        object.__setattr__(self, "compiled", compiled)


FieldPredicate = Union[Equals, Gte, Lte, Pattern]


@dataclass(frozen=True)
class PredicateOutcome:
    passed: bool
    reason: Optional[str] = None
    kind: Optional[FailureKind] = None

    @classmethod
    def ok(cls) -> "PredicateOutcome":
        return cls(passed=True)

    @classmethod
    def fail(cls, reason: str, kind: FailureKind = FailureKind.unmet) -> "PredicateOutcome":
        return cls(passed=False, reason=reason, kind=kind)
