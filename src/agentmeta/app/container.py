from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from agentmeta.adapters.decoding.yaml_decoder import YamlMarkupDecoder
from agentmeta.adapters.ingestion.filesystem import AgentDirectoryLoader
from agentmeta.adapters.outline.org_engine import OrgOutlineEngine
from agentmeta.adapters.validation.allow_list import AllowListValidator
from agentmeta.ports import KeyValidator, MarkupDecoder, OutlineEngine
from agentmeta.settings import Settings


@dataclass(frozen=True, slots=True)
class Container:
    """
    Lightweight dependency container.
    Holds the collaborators the parsers are wired with.
    """
    validator: KeyValidator
    decoder: MarkupDecoder
    engine: OutlineEngine
    loader: AgentDirectoryLoader


def build_container(settings: Optional[Settings] = None, *, validator: Optional[KeyValidator] = None) -> Container:
    settings = settings or Settings()
    validator = validator or AllowListValidator.of(settings.validation.allowed_keys)
    decoder = YamlMarkupDecoder()
    engine = OrgOutlineEngine()
    loader = AgentDirectoryLoader(
        extensions=set(settings.scan.extensions),
        recursive=settings.scan.recursive,
        skip_hidden=settings.scan.skip_hidden,
        validator=validator,
        decoder=decoder,
        engine=engine,
    )
    return Container(validator=validator, decoder=decoder, engine=engine, loader=loader)
