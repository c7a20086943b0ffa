"""
Shared pytest fixtures for prd-gate tests.

Provides:
1. A clean environment (no gate env vars leaking in from the host)
2. A project directory that is also the cwd
3. Helpers to lay out docs/ contents
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from prdgate import CONFIG_ENV_VAR, DEBUG_ENV_VAR, TOOL_INPUT_ENV_VAR
from prdgate.observability import logger


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Strip gate environment variables for every test."""
    for var in (TOOL_INPUT_ENV_VAR, DEBUG_ENV_VAR, CONFIG_ENV_VAR):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_logger():
    """Undo configure_logging() after each test."""
    yield
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project directory, set as cwd."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def docs_dir(project_dir: Path) -> Path:
    """Project with an empty docs/ directory."""
    docs = project_dir / "docs"
    docs.mkdir()
    return docs


@pytest.fixture
def write_docs(docs_dir: Path):
    """Create files under docs/ by name."""

    def _write(*names: str) -> Path:
        for name in names:
            (docs_dir / name).write_text("{}")
        return docs_dir

    return _write


@pytest.fixture
def write_config(project_dir: Path):
    """Write .claude/prd-gate.yaml and return its path."""

    def _write(text: str) -> Path:
        path = project_dir / ".claude" / "prd-gate.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    return _write
