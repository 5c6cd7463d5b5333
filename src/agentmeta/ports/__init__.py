from .key_validator import KeyValidator
from .markup_decoder import MarkupDecoder
from .outline_engine import OutlineDocument, OutlineEngine

__all__ = [
    "KeyValidator",
    "MarkupDecoder",
    "OutlineDocument",
    "OutlineEngine",
]
