"""
Frontmatter: a '---'-delimited YAML block at the very top of a text file,
followed by free-form body text.

    ---
    name: reviewer
    tools: read search
    ---
    You review pull requests.

The body becomes the "system" entry of the result.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from agentmeta.adapters.decoding.yaml_decoder import YamlMarkupDecoder
from agentmeta.domain.errors import MalformedBlockError
from agentmeta.domain.models import ParseResult
from agentmeta.domain.schema import KEY_SYSTEM, KEY_TOOLS
from agentmeta.parsers.common import check_keys, read_document, strip_trailing_newline
from agentmeta.ports import KeyValidator, MarkupDecoder

# '---' alone on its line; trailing spaces/tabs allowed
_DELIMITER_RE = re.compile(r"^---[^\S\n]*$", re.MULTILINE)

_DEFAULT_DECODER = YamlMarkupDecoder()


def _next_line(text: str, end: int) -> int:
    """Offset of the line after the one ending at `end` (or len(text))."""
    return end + 1 if end < len(text) else len(text)


def parse_frontmatter_text(
    text: str,
    validator: Optional[KeyValidator] = None,
    *,
    decoder: Optional[MarkupDecoder] = None,
    path: Optional[Path] = None,
) -> Optional[ParseResult]:
    """
    Split `text` into validated frontmatter metadata and body.

    Returns:
        None when the first line is not a '---' delimiter, else the
        decoded mapping plus the body under "system".

    Raises:
        MalformedBlockError: opening delimiter without a closing one.
        InvalidKeyError: first key (in block order) the validator rejects.
        yaml.YAMLError: the block is not valid markup (from the decoder).
    """
    opening = _DELIMITER_RE.match(text)
    if opening is None:
        return None

    block_start = _next_line(text, opening.end())
    closing = _DELIMITER_RE.search(text, block_start)
    if closing is None:
        raise MalformedBlockError(path)

    decoder = decoder or _DEFAULT_DECODER
    metadata = decoder.decode(text[block_start:closing.start()])
    check_keys(metadata, validator, path)

    if KEY_TOOLS in metadata:
        tools = metadata[KEY_TOOLS]
        if tools is None:
            metadata[KEY_TOOLS] = []
        elif isinstance(tools, str):
            metadata[KEY_TOOLS] = tools.split()

    body = text[_next_line(text, closing.end()):]
    metadata[KEY_SYSTEM] = strip_trailing_newline(body)
    return metadata


def parse_frontmatter_file(
    path: str | Path,
    validator: Optional[KeyValidator] = None,
    *,
    decoder: Optional[MarkupDecoder] = None,
) -> Optional[ParseResult]:
    path = Path(path)
    return parse_frontmatter_text(read_document(path), validator, decoder=decoder, path=path)
