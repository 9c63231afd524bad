"""Markdown rendering of the codebase map."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Dict, Iterable, List, Sequence

from ..models import ComponentExport, ConstantExport, FileRecord, FunctionExport, TypeExport

ROOT_GROUP = "root"
DEFAULT_EXPORT_MARK = " *(default export)*"


def normalize_path(path: str) -> str:
    return path.replace("\\", "/")


def group_by_directory(records: Iterable[FileRecord]) -> Dict[str, List[FileRecord]]:
    """Group records by directory, keeping first-seen order of groups and files."""
    grouped: Dict[str, List[FileRecord]] = {}
    for record in records:
        directory, _, _ = normalize_path(record.path).rpartition("/")
        grouped.setdefault(directory or ROOT_GROUP, []).append(record)
    return grouped


class DocumentBuilder:
    """Renders file records into a single markdown document.

    Output depends only on the records, apart from the date line.
    """

    def __init__(self, title: str = "CODEBASE.md") -> None:
        self.title = title

    def build(self, records: Sequence[FileRecord], *, generated_at: datetime | None = None) -> str:
        timestamp = generated_at or datetime.now(UTC)
        lines: List[str] = [
            f"# {self.title}",
            "",
            "*Auto-generated - Do not edit manually*",
            f"*Last updated: {timestamp.date().isoformat()}*",
            "",
            "---",
            "",
        ]

        for directory, files in group_by_directory(records).items():
            lines.append(f"## 📁 {directory}/")
            lines.append("")
            for record in files:
                lines.extend(self._file_section(record))
            lines.append("---")
            lines.append("")

        return "\n".join(lines)

    def _file_section(self, record: FileRecord) -> List[str]:
        file_name = normalize_path(record.path).rsplit("/", 1)[-1]
        lines = [f"### {file_name}", ""]

        if record.description:
            lines.append(f"**Description:** {record.description}")
            lines.append("")

        exports = record.exports
        blocks = (
            ("Functions", [_entry(format_function(f), f.description) for f in exports.functions]),
            ("Components", [_entry(format_component(c), c.description) for c in exports.components]),
            ("Types", [_entry(format_type(t), t.description) for t in exports.types]),
            ("Constants", [_entry(format_constant(c), c.description) for c in exports.constants]),
        )
        for heading, entries in blocks:
            if not entries:
                continue
            lines.append(f"**{heading}:**")
            for entry in entries:
                lines.extend(entry)
            lines.append("")
        return lines


def format_function(func: FunctionExport) -> str:
    prefix = "async " if func.is_async else ""
    signature = f"{prefix}{func.name}({', '.join(func.params)}): {func.returns}"
    return f"`{signature}`{DEFAULT_EXPORT_MARK if func.is_default else ''}"


def format_component(comp: ComponentExport) -> str:
    signature = f"{comp.name}(props: {comp.props})" if comp.props else comp.name
    return f"`{signature}`{DEFAULT_EXPORT_MARK if comp.is_default else ''}"


def format_type(type_export: TypeExport) -> str:
    return f"`{type_export.name}` ({type_export.kind})"


def format_constant(constant: ConstantExport) -> str:
    return f"`{constant.name}`"


def _entry(signature: str, description: str | None) -> List[str]:
    lines = [f"- {signature}"]
    if description:
        lines.append(f"  - {description}")
    return lines


__all__ = [
    "DocumentBuilder",
    "ROOT_GROUP",
    "format_component",
    "format_constant",
    "format_function",
    "format_type",
    "group_by_directory",
]
