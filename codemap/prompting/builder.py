"""Builds enrichment prompts from Jinja templates."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import FileRecord

_DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


class PromptBuilder:
    """Renders the description request sent for one source file."""

    TEMPLATE_NAME = "enrich.j2"

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or _DEFAULT_TEMPLATES_DIR
        self._env = self._create_env(self.templates_dir)

    def build(self, record: FileRecord, content: str) -> str:
        """Return the prompt for ``record`` given the file's full text."""
        template = self._env.get_template(self.TEMPLATE_NAME)
        return template.render(
            path=record.path,
            content=content.rstrip("\n"),
            functions=[func.name for func in record.exports.functions],
            components=[comp.name for comp in record.exports.components],
        )

    @staticmethod
    def _create_env(templates_dir: Path) -> Environment:
        # Custom directories first, bundled templates as the fallback.
        directories = [str(templates_dir)]
        if templates_dir != _DEFAULT_TEMPLATES_DIR:
            directories.append(str(_DEFAULT_TEMPLATES_DIR))
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


__all__ = ["PromptBuilder"]
