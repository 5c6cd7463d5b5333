from __future__ import annotations

from pathlib import Path
from typing import Optional

from agentmeta.domain.models import AgentDefinition, ParseResult
from agentmeta.parsers.common import read_document
from agentmeta.parsers.frontmatter import parse_frontmatter_text
from agentmeta.parsers.org_properties import parse_org_text
from agentmeta.ports import KeyValidator, MarkupDecoder, OutlineEngine


def parse_agent_file(
    path: str | Path,
    validator: Optional[KeyValidator] = None,
    *,
    decoder: Optional[MarkupDecoder] = None,
    engine: Optional[OutlineEngine] = None,
) -> Optional[ParseResult]:
    """
    Parse a file in either format, detected by content: a leading '---'
    delimiter first, then an Org property drawer. None if neither is found.
    """
    path = Path(path)
    text = read_document(path)

    result = parse_frontmatter_text(text, validator, decoder=decoder, path=path)
    if result is not None:
        return result
    return parse_org_text(text, validator, engine=engine, path=path)


def load_agent(
    path: str | Path,
    validator: Optional[KeyValidator] = None,
    *,
    decoder: Optional[MarkupDecoder] = None,
    engine: Optional[OutlineEngine] = None,
) -> Optional[AgentDefinition]:
    path = Path(path)
    result = parse_agent_file(path, validator, decoder=decoder, engine=engine)
    if result is None:
        return None
    return AgentDefinition.from_metadata(result, source=path)
