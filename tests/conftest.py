from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def write(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write `text` to tmp_path/name (parents created) and return the path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


class RecordingValidator:
    """Accepts every key (or only `allowed`) and remembers what it was asked."""

    def __init__(self, allowed: set[str] | None = None) -> None:
        self.allowed = allowed
        self.calls: list[str] = []

    def __call__(self, key: str) -> bool:
        self.calls.append(key)
        return self.allowed is None or key in self.allowed


@pytest.fixture
def recording_validator() -> RecordingValidator:
    return RecordingValidator()
