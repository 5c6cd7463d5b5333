from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from agentmeta.adapters.validation.allow_list import DEFAULT_VALIDATOR
from agentmeta.domain.errors import InvalidKeyError
from agentmeta.domain.schema import KEY_SYSTEM
from agentmeta.ports import KeyValidator


def read_document(path: str | Path) -> str:
    # utf-8-sig: a leading BOM would hide the opening delimiter
    return Path(path).read_text(encoding="utf-8-sig")


def strip_trailing_newline(text: str) -> str:
    """Drop exactly one trailing newline; all other whitespace is kept."""
    return text[:-1] if text.endswith("\n") else text


def check_key(key: str, validator: Optional[KeyValidator], path: Optional[Path] = None) -> None:
    """
    Raise InvalidKeyError unless `key` passes the validator.

    The reserved body key can never come from a metadata block, and the
    validator is not consulted about it.
    """
    if key == KEY_SYSTEM:
        raise InvalidKeyError(key, path)
    if validator is None:
        validator = DEFAULT_VALIDATOR
    if not validator(key):
        raise InvalidKeyError(key, path)


def check_keys(keys: Iterable[str], validator: Optional[KeyValidator], path: Optional[Path] = None) -> None:
    # first rejection wins, in iteration order
    for key in keys:
        check_key(key, validator, path)
