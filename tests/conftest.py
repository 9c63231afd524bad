from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolate_enrichment_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell from toggling enrichment during tests."""
    for key in ("CODEMAP_AI_MODE", "AI_MODE", "CODEMAP_LLM_EXECUTABLE"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_codemap_logger():
    """Undo handlers installed by CLI runs so caplog sees codemap records."""
    logger = logging.getLogger("codemap")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.propagate = True
    yield
    for handler in list(logger.handlers):
        if handler not in saved[0]:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
