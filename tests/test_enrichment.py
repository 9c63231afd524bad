"""Tests for description enrichment."""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from codemap.enrichment import Enricher, apply_descriptions, parse_descriptions
from codemap.llm.runner import LLMRunner
from codemap.models import ComponentExport, ExportSet, FileRecord, FunctionExport


def _records() -> list[FileRecord]:
    return [
        FileRecord(
            path="src/utils/greet.ts",
            exports=ExportSet(functions=[FunctionExport(name="greet", params=["name: string"], returns="string")]),
        ),
        FileRecord(
            path="src/App.tsx",
            description="Documented by hand.",
            exports=ExportSet(
                components=[ComponentExport(name="App", is_default=True)],
                functions=[FunctionExport(name="helper", description="Already described.")],
            ),
        ),
    ]


def _write_sources(root: Path) -> None:
    for relative in ("src/utils/greet.ts", "src/App.tsx"):
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {relative}\n", encoding="utf-8")


def test_parse_descriptions_ignores_surrounding_text() -> None:
    raw = 'Here you go:\n{"fileDescription": "Greets.", "functions": {"greet": "Says hi."}}\nDone.'

    assert parse_descriptions(raw) == {"fileDescription": "Greets.", "functions": {"greet": "Says hi."}}


@pytest.mark.parametrize("raw", ["no json here", "{not: valid}", "[1, 2]"])
def test_parse_descriptions_rejects_unusable_output(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_descriptions(raw)


def test_apply_descriptions_only_fills_empty_fields() -> None:
    record = _records()[1]
    payload = {
        "fileDescription": "Generated file text.",
        "functions": {"helper": "Generated helper text."},
        "components": {"App": "Renders the application.", "Other": "Ignored."},
    }

    updated = apply_descriptions(record, payload)

    assert updated.description == "Documented by hand."
    assert updated.exports.functions[0].description == "Already described."
    assert updated.exports.components[0].description == "Renders the application."
    assert record.exports.components[0].description is None


def test_apply_descriptions_ignores_non_string_values() -> None:
    record = _records()[0]

    updated = apply_descriptions(record, {"fileDescription": 42, "functions": ["greet"]})

    assert updated == record


def test_enricher_fills_descriptions_from_tool_output(tmp_path: Path) -> None:
    _write_sources(tmp_path)
    prompts = []

    def fake_runner(request) -> str:
        prompts.append(request.prompt)
        payload = {
            "fileDescription": "Generated.",
            "functions": {"greet": "Builds a greeting."},
            "components": {"App": "Renders the shell."},
        }
        return "Sure!\n" + json.dumps(payload)

    records = _records()
    original = copy.deepcopy(records)

    result = Enricher(tmp_path, runner=LLMRunner(runner=fake_runner)).enrich(records)

    assert result.enriched == 2
    assert result.total == 2
    assert result.failures == []
    assert [r.path for r in result.records] == ["src/utils/greet.ts", "src/App.tsx"]
    assert result.records[0].description == "Generated."
    assert result.records[0].exports.functions[0].description == "Builds a greeting."
    assert result.records[1].description == "Documented by hand."
    assert result.records[1].exports.components[0].description == "Renders the shell."
    assert records == original
    assert "// src/utils/greet.ts" in prompts[0]


def test_enricher_keeps_record_when_tool_fails(tmp_path: Path, caplog) -> None:
    _write_sources(tmp_path)
    calls = []

    def flaky_runner(request) -> str:
        calls.append(request.prompt)
        if len(calls) == 1:
            raise RuntimeError("'claude' timed out after 30s")
        return "I cannot help with that."

    records = _records()
    with caplog.at_level("WARNING", logger="codemap"):
        result = Enricher(tmp_path, runner=LLMRunner(runner=flaky_runner)).enrich(records)

    assert result.enriched == 0
    assert result.records == records
    assert [failure.path for failure in result.failures] == ["src/utils/greet.ts", "src/App.tsx"]
    assert "Failed to enrich src/utils/greet.ts" in caplog.text


def test_enricher_with_unreachable_tool_leaves_records_unchanged(tmp_path: Path) -> None:
    _write_sources(tmp_path)
    records = _records()

    runner = LLMRunner("codemap-test-missing-tool-7f3a", timeout=5.0)
    result = Enricher(tmp_path, runner=runner).enrich(records)

    assert result.enriched == 0
    assert result.total == 2
    assert result.records == records


def test_enricher_reports_unreadable_source(tmp_path: Path) -> None:
    def fake_runner(request) -> str:  # pragma: no cover - never reached
        return "{}"

    result = Enricher(tmp_path, runner=LLMRunner(runner=fake_runner)).enrich(_records()[:1])

    assert result.enriched == 0
    assert result.failures[0].path == "src/utils/greet.ts"
