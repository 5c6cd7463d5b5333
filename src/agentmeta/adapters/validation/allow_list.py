from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from agentmeta.domain.schema import DEFAULT_ALLOWED_KEYS


@dataclass(frozen=True, slots=True)
class AllowListValidator:
    """
    Accepts a key when it is a member of a fixed allow-list.
    """
    allowed: frozenset[str] = DEFAULT_ALLOWED_KEYS

    @classmethod
    def of(cls, keys: Iterable[str]) -> "AllowListValidator":
        return cls(allowed=frozenset(keys))

    def __call__(self, key: str) -> bool:
        return key in self.allowed


@dataclass(frozen=True, slots=True)
class PatternValidator:
    """
    Accepts a key when the whole key matches a regular expression.
    """
    pattern: str
    _compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # frozen dataclass: bypass __setattr__ for the derived field
        object.__setattr__(self, "_compiled", re.compile(self.pattern))

    def __call__(self, key: str) -> bool:
        return self._compiled.fullmatch(key) is not None


DEFAULT_VALIDATOR = AllowListValidator()
