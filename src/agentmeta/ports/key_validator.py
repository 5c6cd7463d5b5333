from __future__ import annotations

from typing import Protocol


class KeyValidator(Protocol):
    """
    Decides whether a metadata key may appear in a parse result.

    Must be a pure predicate; plain functions `(str) -> bool` qualify.
    """

    def __call__(self, key: str) -> bool:
        ...
