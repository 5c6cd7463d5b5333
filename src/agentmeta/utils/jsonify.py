from __future__ import annotations

import json
from datetime import date
from typing import Any, Optional

_JSON_KEY_TYPES = (str, int, float, bool)


def _encode_value(o: Any) -> Any:
    # json.dumps hook: only called for values json can't encode itself
    if isinstance(o, date):  # datetime is a date subclass
        return o.isoformat()
    if isinstance(o, bytes):  # !!binary
        return o.decode("utf-8", errors="replace")
    if isinstance(o, (set, frozenset)):  # !!set
        return sorted(o, key=str)
    return str(o)


def _json_keys(o: Any) -> Any:
    """The encoding hook never sees keys; YAML allows `2024-01-02: x`."""
    if isinstance(o, dict):
        return {
            k if k is None or isinstance(k, _JSON_KEY_TYPES) else str(k): _json_keys(v)
            for k, v in o.items()
        }
    if isinstance(o, (list, tuple)):
        return [_json_keys(v) for v in o]
    return o


def dumps_metadata(metadata: Any, *, indent: Optional[int] = None) -> str:
    """Render decoded metadata (or a whole parse result) as JSON text."""
    return json.dumps(_json_keys(metadata), default=_encode_value, ensure_ascii=False, indent=indent)
