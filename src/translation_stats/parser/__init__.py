"""PO file parsing module."""

from .po_parser import (
    POParser,
    TranslationCatalog,
    TranslationPair,
    extract_translations,
    parse_po_text,
)

__all__ = [
    "POParser",
    "TranslationCatalog",
    "TranslationPair",
    "extract_translations",
    "parse_po_text",
]
