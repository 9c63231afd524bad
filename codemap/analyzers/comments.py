"""Documentation comment scanning over raw source lines."""

from __future__ import annotations

from typing import List, Optional, Sequence

_DOC_OPEN = "/**"
_BLOCK_CLOSE = "*/"


def file_description(text: str) -> Optional[str]:
    """Return the body of the topmost ``/** ... */`` block of a file.

    Blank lines and ``//`` comments before the block are skipped; any other
    line ends the scan. ``@tag`` lines are left out.
    """
    collected: List[str] = []
    for raw in text.split("\n"):
        line = raw.strip()
        if line.startswith(_DOC_OPEN):
            _collect(collected, _opening_text(line))
            if _closes_on_same_line(line):
                break
            continue
        if line.startswith(_BLOCK_CLOSE):
            break
        if line.startswith("*"):
            _collect(collected, _body_text(line))
            if line.endswith(_BLOCK_CLOSE):
                break
            continue
        if not line or line.startswith("//"):
            continue
        break
    return _join(collected)


def leading_doc_comment(lines: Sequence[str], row: int) -> Optional[str]:
    """Return the documentation block directly above 0-based line ``row``.

    Walks upwards, skipping ``//`` lines, until the ``/**`` opener or the first
    line that is not part of a comment (blank lines included).
    """
    collected: List[str] = []
    for index in range(min(row, len(lines)) - 1, -1, -1):
        line = lines[index].strip()
        if line.startswith(_BLOCK_CLOSE):
            continue
        if line.startswith(_DOC_OPEN):
            _collect(collected, _opening_text(line))
            break
        if line.startswith("*"):
            _collect(collected, _body_text(line))
            continue
        if line.startswith("//"):
            continue
        break
    collected.reverse()
    return _join(collected)


def _opening_text(line: str) -> str:
    body = line[len(_DOC_OPEN) :]
    if body.endswith(_BLOCK_CLOSE):
        body = body[: -len(_BLOCK_CLOSE)]
    return body.strip()


def _closes_on_same_line(line: str) -> bool:
    return len(line) > len(_DOC_OPEN) and line.endswith(_BLOCK_CLOSE)


def _body_text(line: str) -> str:
    body = line[1:]
    if body.startswith(" "):
        body = body[1:]
    if body.endswith(_BLOCK_CLOSE):
        body = body[: -len(_BLOCK_CLOSE)]
    return body.strip()


def _collect(collected: List[str], text: str) -> None:
    if text and not text.startswith("@"):
        collected.append(text)


def _join(collected: Sequence[str]) -> Optional[str]:
    joined = " ".join(collected).strip()
    return joined or None


__all__ = ["file_description", "leading_doc_comment"]
