from __future__ import annotations

from typing import Final

# Canonical metadata keys for agent definitions
KEY_NAME: Final[str] = "name"
KEY_DESCRIPTION: Final[str] = "description"
KEY_TOOLS: Final[str] = "tools"
KEY_BACKEND: Final[str] = "backend"
KEY_MODEL: Final[str] = "model"

# Reserved: holds the body text, never validated
KEY_SYSTEM: Final[str] = "system"

# Injected by the outline engine for every entry; never user metadata
KEY_CATEGORY: Final[str] = "category"

DEFAULT_ALLOWED_KEYS: Final[frozenset[str]] = frozenset(
    {KEY_NAME, KEY_DESCRIPTION, KEY_TOOLS, KEY_BACKEND, KEY_MODEL}
)
