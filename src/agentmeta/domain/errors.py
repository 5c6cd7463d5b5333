from __future__ import annotations

from pathlib import Path
from typing import Optional


class AgentMetaError(Exception):
    """Base error for agent metadata extraction."""


class MalformedBlockError(AgentMetaError):
    """
    Opening '---' delimiter found, but no closing delimiter before end of input.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        where = f" in {path}" if path is not None else ""
        super().__init__(f"Frontmatter block is missing its closing '---' delimiter{where}")


class InvalidKeyError(AgentMetaError):
    """
    A metadata key was rejected by the key validator.
    """

    def __init__(self, key: str, path: Optional[Path] = None) -> None:
        self.key = key
        self.path = path
        where = f" in {path}" if path is not None else ""
        super().__init__(f"Invalid metadata key {key!r}{where}")


class AgentDefinitionError(AgentMetaError):
    pass
