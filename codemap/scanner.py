"""Discovery of TypeScript sources to include in the codebase map."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .logging import get_logger

SOURCE_SUFFIXES = (".ts", ".tsx")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
}

DEFAULT_EXCLUDES: tuple[str, ...] = (
    "*.test.ts",
    "*.test.tsx",
    "*.spec.ts",
    "*.spec.tsx",
    "*.d.ts",
    "test/",
    "__tests__/",
    "dist/",
    "coverage/",
)


@dataclass
class IgnoreRule:
    """Gitignore-style exclusion pattern."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def build_ignore_rules(patterns: Sequence[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for pattern in patterns:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


class SourceScanner:
    """Walks source directories and yields TypeScript files in a stable order."""

    def __init__(self, exclude_paths: Sequence[str] = ()) -> None:
        self._rules = build_ignore_rules([*DEFAULT_EXCLUDES, *exclude_paths])
        self.logger = get_logger("scanner")

    def scan(self, root: str | Path, source_dirs: Sequence[str] = ("src",)) -> List[Path]:
        """Return absolute paths of candidate sources under ``root``.

        Raises ``FileNotFoundError``/``NotADirectoryError`` when the root itself
        is unusable; missing source directories are skipped.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project root not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project root is not a directory: {root}")

        found: List[Path] = []
        seen: set[Path] = set()
        for source_dir in source_dirs or (".",):
            base = (root_path / source_dir).resolve()
            if not base.is_dir():
                self.logger.debug("Source directory %s not found; skipping", base)
                continue
            for path in self._iter_sources(root_path, base):
                if path not in seen:
                    seen.add(path)
                    found.append(path)
        return found

    def _iter_sources(self, root: Path, base: Path) -> Iterator[Path]:
        def _raise(exc: OSError) -> None:
            raise exc

        for dirpath, dirnames, filenames in os.walk(base, onerror=_raise):
            current_dir = Path(dirpath)
            rel_dir = _relative(current_dir, root)

            kept_dirs = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._is_ignored(rel_path, True):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                if not filename.endswith(SOURCE_SUFFIXES):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._is_ignored(rel_path, False):
                    continue
                yield current_dir / filename

    def _is_ignored(self, rel_path: str, is_dir: bool) -> bool:
        return any(rule.matches(rel_path, is_dir) for rule in self._rules)


def _relative(path: Path, root: Path) -> str:
    try:
        rel = path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
    return "" if rel == "." else rel


__all__ = ["DEFAULT_EXCLUDES", "IgnoreRule", "SOURCE_SUFFIXES", "SourceScanner", "build_ignore_rule"]
