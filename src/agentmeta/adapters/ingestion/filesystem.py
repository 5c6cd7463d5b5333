from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Tuple

import yaml

from agentmeta.app.pipeline import load_agent
from agentmeta.domain.errors import AgentMetaError
from agentmeta.domain.models import AgentDefinition, LoadFailure, LoadReport
from agentmeta.ports import KeyValidator, MarkupDecoder, OutlineEngine

logger = logging.getLogger(__name__)

# Everything a single broken file can raise; anything else is a bug.
_FILE_ERRORS = (AgentMetaError, yaml.YAMLError, OSError, UnicodeDecodeError)


def _is_hidden(path: Path, root: Path) -> bool:
    """Hidden relative to the scanned root; the root itself may live under a dot-dir."""
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def _walk(root: Path, *, recursive: bool) -> list[tuple[Path, bool]]:
    if root.is_file():
        return [(root, root.name.startswith("."))]
    it = root.rglob("*") if recursive else root.glob("*")
    return [(x, _is_hidden(x, root)) for x in it if x.is_file()]


def _iter_files(inputs: Sequence[str | Path], *, recursive: bool) -> list[tuple[Path, bool]]:
    """Return (file, hidden) pairs for every file under the inputs."""
    found: dict[Path, bool] = {}

    for inp in inputs:
        p = Path(inp).expanduser()

        # Case 1: direct file or directory
        if p.exists():
            roots = [p]
        # Case 2: glob pattern (ONLY if relative)
        elif p.is_absolute():
            logger.warning("Skipping missing path: %s", p)
            continue
        else:
            roots = list(Path(".").glob(str(inp)))

        for root in roots:
            for f, hidden in _walk(root, recursive=recursive):
                found.setdefault(f.resolve(), hidden)

    # Stable, deterministic ordering
    return sorted(found.items(), key=lambda item: str(item[0]))


@dataclass(frozen=True, slots=True)
class AgentDirectoryLoader:
    """
    Loads every agent definition found under the given paths.

    Files without a metadata header are skipped; files that fail to parse
    are recorded in the report and do not stop the scan. When two files
    declare the same agent name, the first one (in path order) wins.
    """
    extensions: set[str] = field(default_factory=lambda: {".md", ".markdown", ".txt", ".org"})
    recursive: bool = True
    skip_hidden: bool = True

    validator: Optional[KeyValidator] = None
    decoder: Optional[MarkupDecoder] = None
    engine: Optional[OutlineEngine] = None

    def load(self, inputs: Sequence[str | Path]) -> Tuple[list[AgentDefinition], LoadReport]:
        scanned = loaded = 0
        skipped_hidden = skipped_extension = skipped_no_header = 0
        failures: list[LoadFailure] = []
        by_ext: dict[str, int] = {}

        agents: list[AgentDefinition] = []
        seen: dict[str, Path] = {}

        for path, hidden in _iter_files(inputs, recursive=self.recursive):
            scanned += 1

            if self.skip_hidden and hidden:
                skipped_hidden += 1
                continue

            ext = path.suffix.lower()
            if self.extensions and ext not in self.extensions:
                skipped_extension += 1
                continue

            try:
                agent = load_agent(path, self.validator, decoder=self.decoder, engine=self.engine)
            except _FILE_ERRORS as e:
                logger.warning("Failed to load agent from %s: %s", path, e)
                failures.append(LoadFailure(path=path, message=str(e)))
                continue

            if agent is None:
                logger.debug("No metadata header in %s", path)
                skipped_no_header += 1
                continue

            if agent.name in seen:
                message = f"Duplicate agent name {agent.name!r} (already defined in {seen[agent.name]})"
                logger.warning("%s: %s", path, message)
                failures.append(LoadFailure(path=path, message=message))
                continue

            seen[agent.name] = path
            agents.append(agent)
            loaded += 1
            by_ext[ext] = by_ext.get(ext, 0) + 1

        report = LoadReport(
            scanned=scanned,
            loaded=loaded,
            skipped_hidden=skipped_hidden,
            skipped_extension=skipped_extension,
            skipped_no_header=skipped_no_header,
            failures=tuple(failures),
            by_extension=dict(by_ext),
        )
        logger.info("Loaded %d agent(s) from %d file(s)", loaded, scanned)
        return agents, report
