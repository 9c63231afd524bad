"""Pipeline orchestration for codebase map generation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from .analyzers import SourceParseError, SourceParser, SymbolExtractor
from .config import CodemapConfig, load_config
from .enrichment import Enricher, EnrichmentResult
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import FileRecord
from .postproc.document import DocumentBuilder
from .prompting.builder import PromptBuilder
from .scanner import SourceScanner


@dataclass
class RunOutcome:
    """Result of a codemap run."""

    output_path: Optional[Path]
    document: Optional[str]
    discovered: int
    documented: int
    enrichment: Optional[EnrichmentResult] = None
    dry_run: bool = False


class Orchestrator:
    """Coordinates discovery, extraction, enrichment and rendering."""

    def __init__(
        self,
        parser: SourceParser | None = None,
        extractor: SymbolExtractor | None = None,
        llm_runner: LLMRunner | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.parser = parser or SourceParser()
        self.extractor = extractor or SymbolExtractor()
        self._llm_runner = llm_runner
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path,
        *,
        enrich: bool | None = None,
        output: str | None = None,
        source_dirs: Sequence[str] | None = None,
        dry_run: bool = False,
        generated_at: datetime | None = None,
    ) -> RunOutcome:
        """Generate the codebase map for the project at ``path``.

        Keyword arguments override the project's configuration. Unreadable
        roots and output write failures propagate; per-file failures do not.
        """
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Project root not found: {path}")
        if not root.is_dir():
            raise NotADirectoryError(f"Project root is not a directory: {path}")

        config = load_config(root)
        if output:
            config.output = output
        if source_dirs:
            config.source_dirs = list(source_dirs)
        enrich_enabled = config.enrichment.enabled if enrich is None else enrich

        self.logger.info("Generating codebase map for %s", root)
        scanner = SourceScanner(exclude_paths=config.exclude_paths)
        files = scanner.scan(root, config.source_dirs)
        if not files:
            self.logger.warning(
                "No TypeScript sources found under %s", ", ".join(config.source_dirs) or "."
            )
            return RunOutcome(output_path=None, document=None, discovered=0, documented=0, dry_run=dry_run)
        self.logger.info("Found %d file(s) to analyze", len(files))

        records = self.collect_records(root, files)
        self.logger.info("Parsed %d file(s) with exports", len(records))

        enrichment_result: Optional[EnrichmentResult] = None
        if enrich_enabled:
            enrichment_result = self._enricher(root, config).enrich(records)
            records = enrichment_result.records

        builder = DocumentBuilder(title=Path(config.output).name)
        document = builder.build(records, generated_at=generated_at)

        output_path = config.output_path
        if dry_run:
            self.logger.info("Dry-run completed; %s not written", output_path)
        else:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(document, encoding="utf-8")
            self.logger.info("Codebase map written to %s", output_path)

        return RunOutcome(
            output_path=output_path,
            document=document,
            discovered=len(files),
            documented=len(records),
            enrichment=enrichment_result,
            dry_run=dry_run,
        )

    def collect_records(self, root: Path, files: Sequence[Path]) -> List[FileRecord]:
        """Parse ``files`` and keep the records that export something."""
        records: List[FileRecord] = []
        for file_path in files:
            record = self.analyze_file(root, file_path)
            if record is None:
                continue
            if not record.has_exports():
                self.logger.debug("Skipping %s: no exports", record.path)
                continue
            records.append(record)
        return records

    def analyze_file(self, root: Path, file_path: Path) -> Optional[FileRecord]:
        """Return the record for one file, or ``None`` when it cannot be parsed."""
        rel_path = _relative_path(root, file_path)
        try:
            parsed = self.parser.parse_file(file_path)
        except SourceParseError as exc:
            self.logger.warning("Failed to parse %s: %s", rel_path, exc.reason)
            return None
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Failed to read %s: %s", rel_path, exc)
            return None
        return self.extractor.extract(parsed, path=rel_path)

    def _enricher(self, root: Path, config: CodemapConfig) -> Enricher:
        runner = self._llm_runner
        if runner is None:
            settings = config.enrichment
            runner = LLMRunner(settings.executable, args=settings.args, timeout=settings.timeout)
            self.logger.debug(
                "Using '%s' for descriptions (timeout %.0fs)", settings.executable, settings.timeout
            )
        return Enricher(root, runner=runner, prompt_builder=self.prompt_builder)


def _relative_path(root: Path, file_path: Path) -> str:
    try:
        return file_path.resolve().relative_to(root).as_posix()
    except ValueError:
        return file_path.as_posix()


__all__ = ["Orchestrator", "RunOutcome"]
