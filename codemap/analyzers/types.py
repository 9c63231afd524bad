"""Type-annotation shapes understood by the symbol extractor.

Only a handful of annotation forms matter for the codebase map, so tree-sitter
type nodes are folded into a small closed set of shapes first and every
decision (stringification, JSX detection) is made over those shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from tree_sitter import Node

from .parser import ParsedSource

ANY_MARKER = "any"
UNKNOWN_MARKER = "unknown"

_RENDERED_PRIMITIVES = frozenset({"string", "number", "boolean", "void"})


@dataclass(frozen=True)
class PrimitiveType:
    """Keyword type such as ``string`` or ``void``."""

    name: str


@dataclass(frozen=True)
class TypeReference:
    """Named reference, possibly qualified (``React.JSX.Element``)."""

    segments: Tuple[str, ...]


@dataclass(frozen=True)
class ArrayType:
    """``T[]`` annotation."""

    element: "TypeShape"


@dataclass(frozen=True)
class UnrecognizedType:
    """Any annotation form outside the shapes above."""

    node_type: str


TypeShape = Union[PrimitiveType, TypeReference, ArrayType, UnrecognizedType]


def type_shape(node: Optional[Node], source: ParsedSource) -> Optional[TypeShape]:
    """Fold a tree-sitter type node into a :data:`TypeShape`.

    ``type_annotation`` wrappers (``: T``) are unwrapped. ``None`` means the
    annotation is absent.
    """
    if node is None:
        return None
    kind = node.type
    if kind in {"type_annotation", "parenthesized_type"}:
        inner = _first_named_child(node)
        if inner is None:
            return UnrecognizedType(kind)
        return type_shape(inner, source)
    if kind == "predefined_type":
        return PrimitiveType(source.text_of(node).strip())
    if kind in {"type_identifier", "identifier"}:
        return TypeReference((source.text_of(node).strip(),))
    if kind == "nested_type_identifier":
        dotted = "".join(source.text_of(node).split())
        return TypeReference(tuple(part for part in dotted.split(".") if part))
    if kind == "generic_type":
        # Type arguments are dropped; the reference keeps its base name.
        name = node.child_by_field_name("name")
        if name is None:
            name = _first_named_child(node)
        shape = type_shape(name, source)
        return shape if shape is not None else UnrecognizedType(kind)
    if kind == "array_type":
        element = type_shape(_first_named_child(node), source)
        return ArrayType(element if element is not None else UnrecognizedType(kind))
    return UnrecognizedType(kind)


def render_type(shape: Optional[TypeShape]) -> str:
    """Return the display string used in signatures."""
    if shape is None:
        return ANY_MARKER
    if isinstance(shape, PrimitiveType):
        return shape.name if shape.name in _RENDERED_PRIMITIVES else UNKNOWN_MARKER
    if isinstance(shape, TypeReference):
        # Qualified names are not rendered.
        return shape.segments[0] if len(shape.segments) == 1 else UNKNOWN_MARKER
    if isinstance(shape, ArrayType):
        return f"{render_type(shape.element)}[]"
    return UNKNOWN_MARKER


def is_jsx_element(shape: Optional[TypeShape]) -> bool:
    """Return True for ``JSX``, ``JSX.Element`` and ``<Namespace>.JSX.Element``.

    This is a purely syntactic check on the annotation; inferred return types
    never match, and the namespace in the three-part form is not validated.
    """
    if not isinstance(shape, TypeReference):
        return False
    segments = shape.segments
    if segments == ("JSX",) or segments == ("JSX", "Element"):
        return True
    return len(segments) == 3 and segments[1:] == ("JSX", "Element")


def _first_named_child(node: Node) -> Optional[Node]:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


__all__ = [
    "ANY_MARKER",
    "UNKNOWN_MARKER",
    "ArrayType",
    "PrimitiveType",
    "TypeReference",
    "TypeShape",
    "UnrecognizedType",
    "is_jsx_element",
    "render_type",
    "type_shape",
]
