"""CLI parser and entrypoint tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from codemap.cli import _build_parser, main
from tests._fixtures.repo_builder import GREET_TS


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "--verbose"])
    assert args.verbose is True


def test_cli_enrichment_flags() -> None:
    parser = _build_parser()
    assert parser.parse_args(["generate"]).enrich is None
    assert parser.parse_args(["generate", "--ai"]).enrich is True
    assert parser.parse_args(["generate", "--no-ai"]).enrich is False


def test_cli_rejects_conflicting_enrichment_flags() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["generate", "--ai", "--no-ai"])


def test_cli_collects_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        [
            "generate",
            "project",
            "-o",
            "docs/MAP.md",
            "--source-dir",
            "src",
            "--source-dir",
            "lib",
            "--dry-run",
            "--quiet",
            "--log-file",
            "codemap.log",
        ]
    )
    assert args.path == "project"
    assert args.output == "docs/MAP.md"
    assert args.source_dirs == ["src", "lib"]
    assert args.dry_run is True
    assert args.quiet is True
    assert args.log_file == Path("codemap.log")


def test_main_writes_map(repo_builder, capsys) -> None:
    repo_builder.write({"src/utils/greet.ts": GREET_TS})
    root = repo_builder.path()

    main(["generate", str(root), "--no-ai", "--quiet"])

    output = capsys.readouterr().out
    assert "Codebase map written to" in output
    assert "(1 file(s) documented)" in output
    assert (root / "CODEBASE.md").exists()


def test_main_dry_run_prints_document(repo_builder, capsys) -> None:
    repo_builder.write({"src/utils/greet.ts": GREET_TS})
    root = repo_builder.path()

    main(["generate", str(root), "--no-ai", "--dry-run", "--quiet"])

    output = capsys.readouterr().out
    assert output.startswith("# CODEBASE.md\n")
    assert "`greet(name: string): string`" in output
    assert not (root / "CODEBASE.md").exists()


def test_main_reports_empty_project(repo_builder, capsys) -> None:
    main(["generate", str(repo_builder.path()), "--quiet"])

    assert "No TypeScript sources found" in capsys.readouterr().out


def test_main_missing_root_exits_with_error(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(tmp_path / "missing"), "--quiet"])

    assert excinfo.value.code == 1
    assert "Project root not found" in capsys.readouterr().err


def test_main_invalid_config_exits_with_error(repo_builder, capsys) -> None:
    repo_builder.write({".codemap.yml": "- not\n- a mapping\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(repo_builder.path()), "--quiet"])

    assert excinfo.value.code == 1
    assert "mapping" in capsys.readouterr().err
