from __future__ import annotations

import pytest

from agentmeta.domain.errors import InvalidKeyError
from agentmeta.parsers.org_properties import parse_org_file, parse_org_text

AGENT = """:PROPERTIES:
:NAME: reviewer
:DESCRIPTION: Reviews pull requests
:TOOLS: read write search
:BACKEND: openai
:MODEL: gpt-4o-mini
:END:

You review pull requests.

* Checklist
- tests pass
"""


class TestParseOrg:
    def test_basic(self):
        assert parse_org_text(AGENT) == {
            "name": "reviewer",
            "description": "Reviews pull requests",
            "tools": ["read", "write", "search"],
            "backend": "openai",
            "model": "gpt-4o-mini",
            "system": "You review pull requests.\n\n* Checklist\n- tests pass",
        }

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Just some text.\n",
            "* Heading\n:PROPERTIES:\n:NAME: x\n:END:\nbody\n",
            "#+TITLE: Agent\n:PROPERTIES:\n:NAME: x\n:END:\nbody\n",
            "\n:PROPERTIES:\n:NAME: x\n:END:\nbody\n",
        ],
    )
    def test_no_leading_drawer_is_absent(self, text):
        assert parse_org_text(text) is None

    def test_unterminated_drawer_is_absent(self):
        assert parse_org_text(":PROPERTIES:\n:NAME: x\nbody\n") is None

    def test_comments_may_precede_drawer(self):
        text = "# agent file\n#\n:PROPERTIES:\n:NAME: x\n:END:\nbody\n"
        assert parse_org_text(text) == {"name": "x", "system": "body"}

    def test_keys_are_lowercased(self):
        result = parse_org_text(":PROPERTIES:\n:Name: x\n:mOdEl: m\n:END:\n")
        assert result == {"name": "x", "model": "m", "system": ""}

    def test_empty_tools_value_is_empty_list(self):
        result = parse_org_text(":PROPERTIES:\n:TOOLS:\n:END:\nbody\n")
        assert result["tools"] == []

    def test_tools_accumulation(self):
        result = parse_org_text(":PROPERTIES:\n:TOOLS: read\n:TOOLS+: write search\n:END:\n")
        assert result["tools"] == ["read", "write", "search"]

    def test_duplicate_key_last_wins(self):
        result = parse_org_text(":PROPERTIES:\n:NAME: first\n:NAME: second\n:END:\n")
        assert result["name"] == "second"

    def test_values_keep_inner_colons(self):
        result = parse_org_text(":PROPERTIES:\n:DESCRIPTION: Reviews: code, docs\n:END:\n")
        assert result["description"] == "Reviews: code, docs"


class TestCategory:
    def test_category_only_drawer(self):
        assert parse_org_text(":PROPERTIES:\n:CATEGORY: agents\n:END:\nBody\n") == {"system": "Body"}

    def test_category_never_reaches_validator(self, recording_validator, write):
        path = write("reviewer.org", ":PROPERTIES:\n:CATEGORY: agents\n:NAME: x\n:END:\nbody\n")
        result = parse_org_file(path, recording_validator)
        assert "category" not in recording_validator.calls
        assert recording_validator.calls == ["name"]
        assert result == {"name": "x", "system": "body"}

    def test_engine_category_from_file_name_is_dropped(self, write):
        path = write("reviewer.org", ":PROPERTIES:\n:NAME: x\n:END:\nbody\n")
        assert "category" not in parse_org_file(path, lambda key: True)


class TestBody:
    def test_no_body(self):
        assert parse_org_text(":PROPERTIES:\n:NAME: x\n:END:")["system"] == ""

    def test_only_blank_lines_after_drawer(self):
        assert parse_org_text(":PROPERTIES:\n:NAME: x\n:END:\n\n  \n\n")["system"] == ""

    def test_blank_lines_skipped_then_verbatim(self):
        text = ":PROPERTIES:\n:NAME: x\n:END:\n\n   \n  Body\n\nMore\n\n"
        assert parse_org_text(text)["system"] == "  Body\n\nMore\n"

    def test_body_directly_after_drawer(self):
        assert parse_org_text(":PROPERTIES:\n:NAME: x\n:END:\nBody")["system"] == "Body"


class TestValidation:
    def test_first_invalid_key_in_drawer_order(self):
        text = ":PROPERTIES:\n:NAME: x\n:COLOR: red\n:SIZE: 3\n:END:\n"
        with pytest.raises(InvalidKeyError) as exc:
            parse_org_text(text)
        assert exc.value.key == "color"

    def test_validator_sees_lowercased_keys(self, recording_validator):
        parse_org_text(":PROPERTIES:\n:NAME: x\n:TOOLS: a b\n:END:\n", recording_validator)
        assert recording_validator.calls == ["name", "tools"]

    def test_reserved_key_rejected(self, recording_validator):
        with pytest.raises(InvalidKeyError) as exc:
            parse_org_text(":PROPERTIES:\n:SYSTEM: x\n:END:\n", recording_validator)
        assert exc.value.key == "system"
        assert recording_validator.calls == []


class FakeDocument:
    def __init__(self, text, span, pairs):
        self.text = text
        self.span = span
        self.pairs = pairs
        self.queries: list[tuple[str, int]] = []

    def property_span(self, pos):
        self.queries.append(("span", pos))
        return self.span

    def entry_properties(self, pos):
        self.queries.append(("properties", pos))
        return list(self.pairs)


class FakeEngine:
    def __init__(self, span, pairs):
        self.span = span
        self.pairs = pairs
        self.documents: list[FakeDocument] = []

    def parse(self, text, *, source=None):
        doc = FakeDocument(text, self.span, self.pairs)
        self.documents.append(doc)
        return doc


class TestDelegation:
    def test_engine_is_queried_at_document_start(self):
        text = "HEADER\nEND\nbody text\n"
        engine = FakeEngine(span=(7, 7), pairs=[("Name", "fake"), ("CATEGORY", "c"), ("Tools", "x y")])
        result = parse_org_text(text, engine=engine)

        assert engine.documents[0].queries == [("span", 0), ("properties", 0)]
        assert result == {"name": "fake", "tools": ["x", "y"], "system": "body text"}

    def test_absent_span_skips_property_query(self):
        engine = FakeEngine(span=None, pairs=[("NAME", "x")])
        assert parse_org_text("whatever", engine=engine) is None
        assert engine.documents[0].queries == [("span", 0)]


class TestFromFile:
    def test_parse_file(self, write):
        path = write("reviewer.org", AGENT)
        assert parse_org_file(path)["name"] == "reviewer"

    def test_idempotent(self, write):
        path = write("reviewer.org", AGENT)
        assert parse_org_file(path) == parse_org_file(path)


def test_unicode_line_separators_stay_inside_values():
    result = parse_org_text(":PROPERTIES:\n:NAME: x\n:DESCRIPTION: a\u2028b\n:END:\nbody\n")
    assert result == {"name": "x", "description": "a\u2028b", "system": "body"}
