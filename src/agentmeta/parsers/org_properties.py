"""
Org property drawers: metadata attached to the top of an Org document,
before the first headline, followed by the body text.

    :PROPERTIES:
    :NAME: reviewer
    :TOOLS: read search
    :END:

    You review pull requests.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

from agentmeta.adapters.outline.org_engine import OrgOutlineEngine
from agentmeta.domain.models import ParseResult
from agentmeta.domain.schema import KEY_CATEGORY, KEY_SYSTEM, KEY_TOOLS
from agentmeta.parsers.common import check_key, read_document, strip_trailing_newline
from agentmeta.ports import KeyValidator, OutlineEngine

_DEFAULT_ENGINE = OrgOutlineEngine()

_DOCUMENT_START = 0


def _body_start(text: str, end_marker: int) -> int:
    """
    First offset of the body: the line after the end marker line,
    moved past any blank lines.
    """
    nl = text.find("\n", end_marker)
    if nl == -1:
        return len(text)
    pos = nl + 1

    while pos < len(text):
        nl = text.find("\n", pos)
        line_end = len(text) if nl == -1 else nl
        if text[pos:line_end].strip():
            break
        pos = line_end if nl == -1 else nl + 1
    return pos


def parse_org_text(
    text: str,
    validator: Optional[KeyValidator] = None,
    *,
    engine: Optional[OutlineEngine] = None,
    path: Optional[Path] = None,
) -> Optional[ParseResult]:
    """
    Extract the leading property drawer of an Org document plus its body.

    Keys are lower-cased; "category" is dropped before validation; "tools"
    is split on whitespace. Repeated keys: the last value wins.

    Returns:
        None when the document has no leading property drawer.

    Raises:
        InvalidKeyError: first key (in drawer order) the validator rejects.
    """
    engine = engine or _DEFAULT_ENGINE
    doc = engine.parse(text, source=path)

    span = doc.property_span(_DOCUMENT_START)
    if span is None:
        return None

    result: dict[str, Any] = {}
    for raw_key, raw_value in doc.entry_properties(_DOCUMENT_START):
        key = sys.intern(raw_key.lower())
        if key == KEY_CATEGORY:
            continue
        value: Any = raw_value.split() if key == KEY_TOOLS else raw_value
        check_key(key, validator, path)
        result[key] = value

    _, end_marker = span
    result[KEY_SYSTEM] = strip_trailing_newline(text[_body_start(text, end_marker):])
    return result


def parse_org_file(
    path: str | Path,
    validator: Optional[KeyValidator] = None,
    *,
    engine: Optional[OutlineEngine] = None,
) -> Optional[ParseResult]:
    path = Path(path)
    return parse_org_text(read_document(path), validator, engine=engine, path=path)
