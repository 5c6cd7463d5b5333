from __future__ import annotations

from typing import Any, Protocol


class MarkupDecoder(Protocol):
    """
    Decodes the raw text of a frontmatter block into a key-unique mapping.

    Keys come back as interned strings, sequences as lists. Malformed
    input raises the decoder's own error type.
    """

    def decode(self, text: str) -> dict[str, Any]:
        ...
