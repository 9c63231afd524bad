"""Source parsing and export extraction for TypeScript files."""

from __future__ import annotations

from .extractor import SymbolExtractor, find_declaration
from .parser import ParsedSource, SourceParseError, SourceParser, is_markup_path

__all__ = [
    "ParsedSource",
    "SourceParseError",
    "SourceParser",
    "SymbolExtractor",
    "find_declaration",
    "is_markup_path",
]
