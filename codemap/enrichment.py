"""Best-effort description enrichment through an external text generator."""

from __future__ import annotations

import copy
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .llm.runner import LLMRunner
from .logging import get_logger
from .models import FileRecord
from .prompting.builder import PromptBuilder

_JSON_SPAN = re.compile(r"\{[\s\S]*\}")


@dataclass
class EnrichmentFailure:
    """A file whose enrichment was abandoned."""

    path: str
    reason: str


@dataclass
class EnrichmentResult:
    """Outcome of one enrichment pass, in input order."""

    records: List[FileRecord]
    enriched: int
    total: int
    failures: List[EnrichmentFailure] = field(default_factory=list)


def parse_descriptions(raw: str) -> Dict[str, Any]:
    """Extract the JSON object embedded in ``raw`` tool output.

    The span runs from the first ``{`` to the last ``}``; surrounding chatter
    is ignored. Raises ``ValueError`` when no object can be decoded.
    """
    match = _JSON_SPAN.search(raw)
    if match is None:
        raise ValueError("No JSON object in response")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in response: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Response JSON is not an object")
    return payload


def apply_descriptions(record: FileRecord, payload: Dict[str, Any]) -> FileRecord:
    """Return a copy of ``record`` with empty descriptions filled from ``payload``."""
    updated = copy.deepcopy(record)

    file_description = _text(payload.get("fileDescription"))
    if file_description and not updated.description:
        updated.description = file_description

    functions = _mapping(payload.get("functions"))
    for func in updated.exports.functions:
        text = _text(functions.get(func.name))
        if text and not func.description:
            func.description = text

    components = _mapping(payload.get("components"))
    for comp in updated.exports.components:
        text = _text(components.get(comp.name))
        if text and not comp.description:
            comp.description = text

    return updated


class Enricher:
    """Fills missing descriptions one file at a time.

    Every failure is confined to its file: the unmodified record is kept and the
    reason is logged and collected on the result.
    """

    def __init__(
        self,
        root: Path,
        runner: LLMRunner | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.root = Path(root)
        self.runner = runner or LLMRunner()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("enrichment")

    def enrich(self, records: Sequence[FileRecord]) -> EnrichmentResult:
        total = len(records)
        self.logger.info("Enriching %d file(s) with generated descriptions", total)

        result = EnrichmentResult(records=[], enriched=0, total=total)
        for record in records:
            self.logger.debug("Analyzing %s", record.path)
            try:
                updated = self._enrich_one(record)
            except (RuntimeError, ValueError, OSError) as exc:
                self.logger.warning("Failed to enrich %s: %s", record.path, exc)
                result.failures.append(EnrichmentFailure(path=record.path, reason=str(exc)))
                result.records.append(record)
                continue
            result.records.append(updated)
            result.enriched += 1

        self.logger.info("Enriched %d/%d file(s)", result.enriched, total)
        return result

    def _enrich_one(self, record: FileRecord) -> FileRecord:
        content = (self.root / record.path).read_text(encoding="utf-8-sig")
        prompt = self.prompt_builder.build(record, content)
        raw = self.runner.run(prompt)
        return apply_descriptions(record, parse_descriptions(raw))


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


__all__ = [
    "EnrichmentFailure",
    "EnrichmentResult",
    "Enricher",
    "apply_descriptions",
    "parse_descriptions",
]
