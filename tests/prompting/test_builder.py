"""Tests for the prompt builder."""

from __future__ import annotations

from pathlib import Path

from codemap.models import ComponentExport, ExportSet, FileRecord, FunctionExport
from codemap.prompting.builder import PromptBuilder


def _record() -> FileRecord:
    return FileRecord(
        path="src/App.tsx",
        exports=ExportSet(
            functions=[FunctionExport(name="load"), FunctionExport(name="save")],
            components=[ComponentExport(name="App", is_default=True)],
        ),
    )


def test_prompt_includes_path_content_and_export_names() -> None:
    content = "export default function App(): JSX.Element {\n  return <div />;\n}\n"

    prompt = PromptBuilder().build(_record(), content)

    assert "File: src/App.tsx" in prompt
    assert "```typescript\n" + content.rstrip("\n") + "\n```" in prompt
    assert "Exported functions: load, save" in prompt
    assert "Exported components: App" in prompt
    assert '"fileDescription"' in prompt
    assert '"functions"' in prompt
    assert '"components"' in prompt


def test_prompt_omits_empty_export_lists() -> None:
    record = FileRecord(path="src/types.ts")

    prompt = PromptBuilder().build(record, "export type Id = string;\n")

    assert "Exported functions" not in prompt
    assert "Exported components" not in prompt


def test_prompt_builder_prefers_custom_templates(tmp_path: Path) -> None:
    (tmp_path / "enrich.j2").write_text("Describe {{ path }} ({{ functions | length }})", encoding="utf-8")

    prompt = PromptBuilder(templates_dir=tmp_path).build(_record(), "")

    assert prompt == "Describe src/App.tsx (2)"


def test_prompt_builder_falls_back_to_bundled_templates(tmp_path: Path) -> None:
    prompt = PromptBuilder(templates_dir=tmp_path).build(_record(), "const a = 1;")

    assert "File: src/App.tsx" in prompt
