"""Interprets parsed TypeScript trees into export records."""

from __future__ import annotations

from typing import Iterator, List, Optional

from tree_sitter import Node

from ..models import ComponentExport, ConstantExport, FileRecord, FunctionExport, TypeExport
from .comments import file_description, leading_doc_comment
from .parser import ParsedSource
from .types import UNKNOWN_MARKER, is_jsx_element, render_type, type_shape

_FUNCTION_DECLARATIONS = frozenset({"function_declaration", "generator_function_declaration"})
# "function" is the pre-0.21 grammar name of function_expression.
_FUNCTION_EXPRESSIONS = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)
_VARIABLE_DECLARATIONS = frozenset({"lexical_declaration", "variable_declaration"})
_TYPE_DECLARATIONS = {
    "type_alias_declaration": "type",
    "interface_declaration": "interface",
}
_PARAMETER_NODES = frozenset({"required_parameter", "optional_parameter"})

ANONYMOUS = "anonymous"


class SymbolExtractor:
    """Builds a :class:`FileRecord` from the top-level exports of a parsed file."""

    def extract(self, source: ParsedSource, path: str | None = None) -> FileRecord:
        record = FileRecord(
            path=path if path is not None else source.path,
            description=file_description(source.text),
        )
        for statement in source.root.named_children:
            if statement.type != "export_statement":
                continue
            if _is_default_export(statement):
                self._handle_default_export(statement, source, record)
            else:
                self._handle_named_export(statement, source, record)
        return record

    # Named exports -----------------------------------------------------------

    def _handle_named_export(self, statement: Node, source: ParsedSource, record: FileRecord) -> None:
        declaration = statement.child_by_field_name("declaration")
        if declaration is None:
            # export { a, b } / export * from "..."
            return
        kind = declaration.type
        if kind in _FUNCTION_DECLARATIONS:
            record.exports.functions.append(self._function(declaration, source))
        elif kind in _VARIABLE_DECLARATIONS:
            for declarator in _declarators(declaration):
                self._classify_declarator(declarator, source, record)
        elif kind in _TYPE_DECLARATIONS:
            name_node = declaration.child_by_field_name("name")
            if name_node is None:
                return
            record.exports.types.append(
                TypeExport(
                    name=source.text_of(name_node),
                    kind=_TYPE_DECLARATIONS[kind],
                    description=_doc(declaration, source),
                )
            )

    def _classify_declarator(self, declarator: Node, source: ParsedSource, record: FileRecord) -> None:
        name = _identifier_name(declarator, source)
        if name is None:
            return
        value = declarator.child_by_field_name("value")
        if value is not None and value.type in _FUNCTION_EXPRESSIONS and _returns_jsx(value, source):
            record.exports.components.append(
                self._component(value, source, name=name, doc_node=declarator)
            )
        elif name == name.upper():
            record.exports.constants.append(
                ConstantExport(name=name, description=_doc(declarator, source))
            )

    # Default exports ---------------------------------------------------------

    def _handle_default_export(self, statement: Node, source: ParsedSource, record: FileRecord) -> None:
        target = statement.child_by_field_name("declaration")
        if target is None:
            target = statement.child_by_field_name("value")
        if target is None:
            return
        if target.type in _FUNCTION_DECLARATIONS or target.type in _FUNCTION_EXPRESSIONS:
            self._add_callable(record, target, source, doc_node=target)
        elif target.type == "identifier":
            self._handle_identifier_default(source.text_of(target), source, record)

    def _handle_identifier_default(self, name: str, source: ParsedSource, record: FileRecord) -> None:
        resolved = find_declaration(source, name)
        if resolved is None:
            record.exports.components.append(ComponentExport(name=name, is_default=True))
            return
        if resolved.type in _FUNCTION_DECLARATIONS:
            self._add_callable(record, resolved, source, doc_node=resolved)
            return

        value = resolved.child_by_field_name("value")
        if value is not None and value.type in _FUNCTION_EXPRESSIONS:
            self._add_callable(record, value, source, name=name, doc_node=resolved)
            return
        record.exports.functions.append(
            FunctionExport(
                name=name,
                description=_doc(resolved, source),
                params=[],
                returns=UNKNOWN_MARKER,
                is_async=False,
                is_default=True,
            )
        )

    def _add_callable(
        self,
        record: FileRecord,
        node: Node,
        source: ParsedSource,
        *,
        doc_node: Node,
        name: str | None = None,
    ) -> None:
        if _returns_jsx(node, source):
            record.exports.components.append(
                self._component(node, source, name=name, doc_node=doc_node, is_default=True)
            )
        else:
            record.exports.functions.append(
                self._function(node, source, name=name, doc_node=doc_node, is_default=True)
            )

    # Builders ----------------------------------------------------------------

    def _function(
        self,
        node: Node,
        source: ParsedSource,
        *,
        name: str | None = None,
        doc_node: Node | None = None,
        is_default: bool = False,
    ) -> FunctionExport:
        return_type = node.child_by_field_name("return_type")
        return FunctionExport(
            name=name or _function_name(node, source),
            description=_doc(doc_node if doc_node is not None else node, source),
            params=[_render_parameter(param, source) for param in _parameters(node)],
            returns=render_type(type_shape(return_type, source)) if return_type is not None else "void",
            is_async=_is_async(node),
            is_default=is_default,
        )

    def _component(
        self,
        node: Node,
        source: ParsedSource,
        *,
        name: str | None = None,
        doc_node: Node | None = None,
        is_default: bool = False,
    ) -> ComponentExport:
        return ComponentExport(
            name=name or _function_name(node, source),
            description=_doc(doc_node if doc_node is not None else node, source),
            props=_props_type(node, source),
            is_default=is_default,
        )


def find_declaration(source: ParsedSource, name: str) -> Optional[Node]:
    """Locate a top-level function declaration or variable declarator by name.

    Declarations wrapped in ``export`` are searched as well. Returns the
    function node or the ``variable_declarator`` node.
    """
    for statement in source.root.named_children:
        candidate: Optional[Node] = statement
        if statement.type == "export_statement":
            candidate = statement.child_by_field_name("declaration")
        if candidate is None:
            continue
        if candidate.type in _FUNCTION_DECLARATIONS:
            name_node = candidate.child_by_field_name("name")
            if name_node is not None and source.text_of(name_node) == name:
                return candidate
        elif candidate.type in _VARIABLE_DECLARATIONS:
            for declarator in _declarators(candidate):
                if _identifier_name(declarator, source) == name:
                    return declarator
    return None


def _is_default_export(statement: Node) -> bool:
    return any(child.type == "default" for child in statement.children)


def _declarators(declaration: Node) -> Iterator[Node]:
    for child in declaration.named_children:
        if child.type == "variable_declarator":
            yield child


def _identifier_name(declarator: Node, source: ParsedSource) -> Optional[str]:
    name_node = declarator.child_by_field_name("name")
    if name_node is None or name_node.type != "identifier":
        return None
    return source.text_of(name_node)


def _function_name(node: Node, source: ParsedSource) -> str:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return ANONYMOUS
    return source.text_of(name_node)


def _is_async(node: Node) -> bool:
    return any(child.type == "async" for child in node.children)


def _returns_jsx(node: Node, source: ParsedSource) -> bool:
    return is_jsx_element(type_shape(node.child_by_field_name("return_type"), source))


def _parameters(node: Node) -> List[Node]:
    single = node.child_by_field_name("parameter")
    if single is not None:
        # Unparenthesised arrow parameter: x => ...
        return [single]
    parameters = node.child_by_field_name("parameters")
    if parameters is None:
        return []
    return [child for child in parameters.named_children if child.type != "comment"]


def _render_parameter(param: Node, source: ParsedSource) -> str:
    if param.type == "identifier":
        return f"{source.text_of(param)}: {render_type(None)}"
    if param.type in _PARAMETER_NODES:
        pattern = param.child_by_field_name("pattern")
        has_default = param.child_by_field_name("value") is not None
        if pattern is not None and pattern.type == "identifier" and not has_default:
            annotation = type_shape(param.child_by_field_name("type"), source)
            return f"{source.text_of(pattern)}: {render_type(annotation)}"
    return "param"


def _props_type(node: Node, source: ParsedSource) -> Optional[str]:
    parameters = _parameters(node)
    if not parameters or parameters[0].type not in _PARAMETER_NODES:
        return None
    annotation = parameters[0].child_by_field_name("type")
    if annotation is None:
        return None
    return render_type(type_shape(annotation, source))


def _doc(node: Node, source: ParsedSource) -> Optional[str]:
    return leading_doc_comment(source.lines, node.start_point[0])


__all__ = ["ANONYMOUS", "SymbolExtractor", "find_declaration"]
