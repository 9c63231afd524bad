"""Tree-sitter front end for TypeScript and TSX sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Dict, List, Optional

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser

_MARKUP_SUFFIXES = (".tsx",)
_SNIPPET_LIMIT = 40


class SourceParseError(ValueError):
    """Raised when a source file does not parse cleanly."""

    def __init__(
        self,
        path: str,
        reason: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.path = path
        self.reason = reason
        self.line = line
        self.column = column
        location = f":{line}:{column}" if line is not None else ""
        super().__init__(f"{path}{location}: {reason}")


@dataclass
class ParsedSource:
    """Syntax tree together with the text it was parsed from."""

    path: str
    text: str
    tree: Tree
    markup: bool
    source_bytes: bytes = field(repr=False)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @cached_property
    def lines(self) -> List[str]:
        return self.text.split("\n")

    def text_of(self, node: Node) -> str:
        return self.source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def is_markup_path(path: Path) -> bool:
    """Return True when the file extension enables JSX syntax."""
    return path.suffix.lower() in _MARKUP_SUFFIXES


class SourceParser:
    """Parses TypeScript files, selecting the TSX grammar for markup files."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def parse_file(self, path: str | Path) -> ParsedSource:
        """Read ``path`` and parse it.

        Read failures propagate as ``OSError``/``UnicodeDecodeError``; syntax
        errors raise :class:`SourceParseError`.
        """
        file_path = Path(path)
        text = file_path.read_text(encoding="utf-8-sig")
        return self.parse_source(text, path=str(path), markup=is_markup_path(file_path))

    def parse_source(self, text: str, *, path: str = "<source>", markup: bool = False) -> ParsedSource:
        language = "tsx" if markup else "typescript"
        parser = self._get_parser(language)
        source_bytes = text.encode("utf-8")
        tree = parser.parse(source_bytes)
        parsed = ParsedSource(
            path=path,
            text=text,
            tree=tree,
            markup=markup,
            source_bytes=source_bytes,
        )

        error_node = _first_error(tree.root_node)
        if error_node is not None:
            row, column = error_node.start_point
            raise SourceParseError(
                path,
                _describe_error(error_node, parsed),
                line=row + 1,
                column=column + 1,
            )
        return parsed

    def _get_parser(self, language: str) -> Parser:
        parser = self._parsers.get(language)
        if parser is None:
            parser = get_parser(language)
            self._parsers[language] = parser
        return parser


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    # has_error without a locatable child; report the node itself.
    return node


def _describe_error(node: Node, parsed: ParsedSource) -> str:
    if node.is_missing:
        return f"missing {node.type}"
    snippet = " ".join(parsed.text_of(node).split())
    if len(snippet) > _SNIPPET_LIMIT:
        snippet = snippet[: _SNIPPET_LIMIT - 3] + "..."
    if not snippet:
        return "unexpected syntax"
    return f"unexpected syntax near '{snippet}'"


__all__ = ["ParsedSource", "SourceParseError", "SourceParser", "is_markup_path"]
