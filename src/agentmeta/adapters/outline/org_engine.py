from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

_HEADLINE_RE = re.compile(r"^\*+(?:[ \t]|$)")
_COMMENT_RE = re.compile(r"^[ \t]*#(?:[ \t].*)?$")
_DRAWER_BEGIN_RE = re.compile(r"^[ \t]*:PROPERTIES:[ \t]*$", re.IGNORECASE)
_DRAWER_END_RE = re.compile(r"^[ \t]*:END:[ \t]*$", re.IGNORECASE)
_PROPERTY_RE = re.compile(r"^[ \t]*:(?P<key>[^\s:]+?)(?P<plus>\+)?:(?:[ \t]+(?P<value>.*?))?[ \t]*$")
_CATEGORY_RE = re.compile(r"^[ \t]*#\+CATEGORY:[ \t]*(?P<value>.*?)[ \t]*$", re.IGNORECASE | re.MULTILINE)

CATEGORY_PROPERTY = "CATEGORY"


def _lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (offset, line) pairs, splitting on newline characters only."""
    offset = 0
    for raw in text.split("\n"):
        yield offset, raw.rstrip("\r")
        offset += len(raw) + 1


def _find_leading_drawer(text: str) -> tuple[Optional[tuple[int, int]], list[tuple[str, str, bool]]]:
    """
    Locate the property drawer of the document's leading entry.

    Only comment lines may precede ':PROPERTIES:'. Every line up to ':END:'
    must be a node property, otherwise there is no drawer.
    """
    lines = _lines(text)

    for offset, line in lines:
        if _COMMENT_RE.match(line):
            continue
        if not _DRAWER_BEGIN_RE.match(line):
            return None, []
        break
    else:
        return None, []

    start: Optional[int] = None
    raw_pairs: list[tuple[str, str, bool]] = []
    for offset, line in lines:
        if start is None:
            start = offset
        if _DRAWER_END_RE.match(line):
            return (start, offset), raw_pairs
        m = _PROPERTY_RE.match(line)
        if m is None:
            return None, []
        raw_pairs.append((m.group("key"), m.group("value") or "", m.group("plus") is not None))

    # ran out of lines before ':END:'
    return None, []


def _accumulate(raw_pairs: list[tuple[str, str, bool]]) -> list[tuple[str, str]]:
    """Apply ':KEY+: value' accumulation: append to the latest value for KEY."""
    out: list[tuple[str, str]] = []
    for key, value, plus in raw_pairs:
        if plus:
            for i in range(len(out) - 1, -1, -1):
                if out[i][0].lower() == key.lower():
                    prev_key, prev_value = out[i]
                    out[i] = (prev_key, f"{prev_value} {value}".strip())
                    break
            else:
                out.append((key, value))
            continue
        out.append((key, value))
    return out


@dataclass(frozen=True, slots=True)
class OrgDocument:
    """
    An Org document reduced to its leading entry: the property drawer
    before the first headline, plus the file category.
    """
    text: str
    category: Optional[str] = None
    drawer_span: Optional[tuple[int, int]] = None
    properties: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    first_headline: Optional[int] = None

    def _in_leading_entry(self, pos: int) -> bool:
        return self.first_headline is None or pos < self.first_headline

    def property_span(self, pos: int) -> Optional[tuple[int, int]]:
        if not self._in_leading_entry(pos):
            return None
        return self.drawer_span

    def entry_properties(self, pos: int) -> list[tuple[str, str]]:
        if not self._in_leading_entry(pos):
            return []
        pairs = list(self.properties)
        if self.category is not None:
            pairs.append((CATEGORY_PROPERTY, self.category))
        return pairs


@dataclass(frozen=True, slots=True)
class OrgOutlineEngine:
    """
    Line-oriented Org reader covering what metadata extraction needs:
      - the property drawer attached to the top of the document
      - ':KEY+:' value accumulation
      - the CATEGORY property (#+CATEGORY keyword, else the file stem)

    Headline subtrees are located but not parsed.
    """

    def parse(self, text: str, *, source: Optional[Path] = None) -> OrgDocument:
        first_headline = next(
            (offset for offset, line in _lines(text) if _HEADLINE_RE.match(line)),
            None,
        )

        head = text if first_headline is None else text[:first_headline]
        drawer_span, raw_pairs = _find_leading_drawer(head)

        m = _CATEGORY_RE.search(head)
        if m is not None and m.group("value"):
            category: Optional[str] = m.group("value")
        elif source is not None:
            category = source.stem
        else:
            category = None

        return OrgDocument(
            text=text,
            category=category,
            drawer_span=drawer_span,
            properties=tuple(_accumulate(raw_pairs)),
            first_headline=first_headline,
        )
