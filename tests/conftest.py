"""Shared test fixtures for Rubric."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rubric.validation.violations import ValidationContext

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def tmp_project(tmp_path: Path) -> Path:
    """Create a minimal project structure for testing."""
    (tmp_path / "src" / "components").mkdir(parents=True)
    (tmp_path / "src" / "utils").mkdir(parents=True)
    (tmp_path / "rubric").mkdir()
    return tmp_path


@pytest.fixture()
def ctx(tmp_path: Path) -> ValidationContext:
    """Provide an empty validation context rooted at ``tmp_path``."""
    return ValidationContext(project_root=tmp_path)
