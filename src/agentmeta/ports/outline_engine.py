from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol


class OutlineDocument(Protocol):
    """
    A parsed outline document, queried by character offset.
    """

    @property
    def text(self) -> str: ...

    def property_span(self, pos: int) -> Optional[tuple[int, int]]:
        """
        (start, end) of the property block attached to the entry at `pos`:
        start is the first line inside the block, end is the start of the
        block's end marker line. None when the entry has no block.
        """
        ...

    def entry_properties(self, pos: int) -> list[tuple[str, str]]:
        """
        All properties visible at `pos` as ordered (raw key, raw value) pairs.
        """
        ...


class OutlineEngine(Protocol):
    """
    Builds OutlineDocuments from text. Must not have side effects.
    """

    def parse(self, text: str, *, source: Optional[Path] = None) -> OutlineDocument:
        ...
