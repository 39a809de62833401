"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from autobump.config import BumpConfig


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., BumpConfig]:
    """Factory for a config rooted in tmp_path, with keyword overrides."""

    def _make(**overrides: Any) -> BumpConfig:
        fields: dict[str, Any] = {
            "repository": "octo/widget",
            "actor": "octocat",
            "token": "s3cret",
            "ref": "refs/heads/main",
            "workspace": tmp_path,
            "major_words": ("BREAKING CHANGE", "major"),
            "minor_words": ("feat", "minor"),
        }
        fields.update(overrides)
        return BumpConfig(**fields)

    return _make


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file at version 1.2.3."""
    content = """\
# Project metadata
[project]
name = "widget"
version = "1.2.3"
dependencies = ["requests>=2.0"]
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def tmp_package_json(tmp_path: Path) -> Path:
    """Create a temporary package.json file at version 1.2.3."""
    package_json = tmp_path / "package.json"
    package_json.write_text('{\n  "name": "widget",\n  "version": "1.2.3"\n}\n')
    return package_json
