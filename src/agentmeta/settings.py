from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from agentmeta.domain.schema import DEFAULT_ALLOWED_KEYS

DEFAULT_EXTENSIONS: frozenset[str] = frozenset({".md", ".markdown", ".txt", ".org"})


@dataclass(frozen=True)
class Validation:
    allowed_keys: frozenset[str] = DEFAULT_ALLOWED_KEYS


@dataclass(frozen=True)
class Scan:
    extensions: frozenset[str] = DEFAULT_EXTENSIONS
    recursive: bool = True
    skip_hidden: bool = True


@dataclass(frozen=True)
class Settings:
    validation: Validation = field(default_factory=Validation)
    scan: Scan = field(default_factory=Scan)


def _normalize_ext(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def load_settings(path: Optional[str | Path] = None) -> Settings:
    """
    Load settings from a TOML file. No path -> built-in defaults.

    [validation]
    allowed_keys = ["name", "description", "tools", "backend", "model"]

    [scan]
    extensions = [".md", ".org"]
    recursive = true
    skip_hidden = true
    """
    if path is None:
        return Settings()

    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")

    with path.open("rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    validation = raw.get("validation", {})
    scan = raw.get("scan", {})

    try:
        return Settings(
            validation=Validation(
                allowed_keys=frozenset(str(k) for k in validation.get("allowed_keys", DEFAULT_ALLOWED_KEYS)),
            ),
            scan=Scan(
                extensions=frozenset(_normalize_ext(str(e)) for e in scan.get("extensions", DEFAULT_EXTENSIONS)),
                recursive=bool(scan.get("recursive", True)),
                skip_hidden=bool(scan.get("skip_hidden", True)),
            ),
        )
    except (TypeError, AttributeError) as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e
