from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from agentmeta.domain.errors import AgentDefinitionError
from agentmeta.domain.schema import (
    KEY_BACKEND,
    KEY_DESCRIPTION,
    KEY_MODEL,
    KEY_NAME,
    KEY_SYSTEM,
    KEY_TOOLS,
)

# A parse result: validated metadata keys plus the body text under "system".
ParseResult = dict[str, Any]

_KNOWN_FIELDS = (KEY_NAME, KEY_DESCRIPTION, KEY_TOOLS, KEY_BACKEND, KEY_MODEL, KEY_SYSTEM)


# -------------------------
# Agent definitions
# -------------------------

class AgentDefinition(BaseModel):
    """
    An agent configuration built from a parse result.

    The body text of the source document becomes the system prompt.
    Keys outside the canonical set (only possible with a non-default
    validator) are kept in `extra`.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    tools: list[str] = Field(default_factory=list)
    backend: Optional[str] = None
    model: Optional[str] = None
    system: str = ""
    source: Optional[Path] = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", "description", "backend", "model", mode="before")
    @classmethod
    def _scalar_to_str(cls, v: Any) -> Any:
        # YAML happily decodes `model: 4` as an int
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("tools", mode="before")
    @classmethod
    def _tools_to_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return v.split()
        return v

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, Any], *, source: Optional[Path] = None) -> "AgentDefinition":
        data: dict[str, Any] = {k: metadata[k] for k in _KNOWN_FIELDS if k in metadata}
        data["extra"] = {k: v for k, v in metadata.items() if k not in _KNOWN_FIELDS}
        if KEY_NAME not in data and source is not None:
            data[KEY_NAME] = source.stem
        data["source"] = source

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            where = f" from {source}" if source is not None else ""
            raise AgentDefinitionError(f"Cannot build agent definition{where}: {e}") from e


# -------------------------
# Directory loading
# -------------------------

@dataclass(frozen=True, slots=True)
class LoadFailure:
    path: Path
    message: str


@dataclass(frozen=True, slots=True)
class LoadReport:
    """
    Counters for one directory load; failures keep the per-file reason.
    """
    scanned: int = 0
    loaded: int = 0
    skipped_hidden: int = 0
    skipped_extension: int = 0
    skipped_no_header: int = 0
    failures: tuple[LoadFailure, ...] = field(default_factory=tuple)
    by_extension: Mapping[str, int] = field(default_factory=dict)

    @property
    def failed(self) -> int:
        return len(self.failures)
