from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any

import yaml


@dataclass(frozen=True, slots=True)
class YamlMarkupDecoder:
    """
    Decodes a frontmatter block with PyYAML's safe loader.

    - blank block -> {}
    - top-level keys -> interned str (YAML allows `1: x`; the key becomes "1")
    - sequences -> list, mappings -> dict (duplicate keys: last one wins)
    - anything other than a mapping at top level -> yaml.YAMLError
    """

    def decode(self, text: str) -> dict[str, Any]:
        loaded = yaml.safe_load(text)
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise yaml.YAMLError(
                f"Frontmatter must be a mapping, got {type(loaded).__name__}"
            )
        return {sys.intern(str(k)): v for k, v in loaded.items()}
