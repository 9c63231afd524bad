"""CLI entrypoints for codemap commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codemap",
        description="Generate a markdown map of the exports in a TypeScript codebase.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write the codebase map for a project.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    ai_group = generate_parser.add_mutually_exclusive_group()
    ai_group.add_argument(
        "--ai",
        dest="enrich",
        action="store_true",
        default=None,
        help="Fill missing descriptions using the configured text-generation tool.",
    )
    ai_group.add_argument(
        "--no-ai",
        dest="enrich",
        action="store_false",
        help="Disable enrichment even if enabled by configuration or environment.",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file relative to the project root (default: CODEBASE.md).",
    )
    generate_parser.add_argument(
        "--source-dir",
        dest="source_dirs",
        action="append",
        default=None,
        help="Source directory to scan, relative to the root. Repeatable (default: src).",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the document instead of writing it.",
    )
    generate_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only report warnings and errors.",
    )
    generate_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a detailed log to this file.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codemap commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(getattr(args, "quiet", False)),
        log_file=getattr(args, "log_file", None),
    )

    orchestrator = Orchestrator()

    if args.command == "generate":
        dry_run = bool(args.dry_run)
        try:
            outcome = orchestrator.run(
                args.path,
                enrich=args.enrich,
                output=args.output,
                source_dirs=args.source_dirs,
                dry_run=dry_run,
            )
        except (FileNotFoundError, NotADirectoryError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        except OSError as exc:
            parser.exit(1, f"codemap generate failed: {exc}\nRun with --verbose for more details.\n")

        if outcome.document is None:
            print("No TypeScript sources found; nothing to document")
            return
        if dry_run:
            sys.stdout.write(outcome.document)
            return
        if outcome.enrichment is not None:
            print(f"Descriptions generated for {outcome.enrichment.enriched}/{outcome.enrichment.total} file(s)")
        print(f"Codebase map written to {_relativize(outcome.output_path)} ({outcome.documented} file(s) documented)")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path | None) -> str:
    if path is None:
        return ""
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
