"""Manifest access and version tools.

A manifest is the file holding the project's version: package.json for
npm projects, pyproject.toml for Python projects. Each kind has a
version tool that can force the version to a given value and apply a
bump; neither ever creates git tags.

pyproject.toml files are edited with tomlkit to preserve formatting and
comments, which keeps the bump commit diff to a single line.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

import tomlkit
from pydantic import BaseModel

from .models import BumpAction
from .shell import AutobumpError, run_in_workspace
from .versions import bump_version

PACKAGE_JSON = "package.json"
PYPROJECT_TOML = "pyproject.toml"


class ManifestError(AutobumpError):
    """The manifest cannot be used to bump the version."""


class ManifestNotFoundError(ManifestError):
    """Neither package.json nor pyproject.toml exists in the package root."""


class Manifest(BaseModel):
    """The project manifest found in the package root.

    Attributes:
        path: Location of the manifest file.
        kind: File name of the manifest ("package.json" or "pyproject.toml").
        name: Package name, if the manifest declares one.
        version: Current version string.
    """

    path: Path
    kind: str
    name: str | None = None
    version: str

    @property
    def root(self) -> Path:
        return self.path.parent


def read_manifest(root: Path) -> Manifest:
    """Locate and parse the manifest under `root`.

    package.json takes precedence over pyproject.toml.

    Raises:
        ManifestNotFoundError: If no manifest exists.
        ManifestError: If the manifest declares no static version.
    """
    package_json = root / PACKAGE_JSON
    if package_json.exists():
        print(f"Reading {PACKAGE_JSON} from {package_json} ...")
        data = json.loads(package_json.read_text())
        if not data.get("version"):
            raise ManifestError(f"{package_json} has no version field.")
        return Manifest(
            path=package_json,
            kind=PACKAGE_JSON,
            name=data.get("name"),
            version=str(data["version"]),
        )

    pyproject = root / PYPROJECT_TOML
    if pyproject.exists():
        print(f"Reading {PYPROJECT_TOML} from {pyproject} ...")
        doc = load_pyproject(pyproject)
        return Manifest(
            path=pyproject,
            kind=PYPROJECT_TOML,
            name=doc.get("project", {}).get("name"),
            version=get_project_version(doc, pyproject),
        )

    raise ManifestNotFoundError(
        f"Neither {PACKAGE_JSON} nor {PYPROJECT_TOML} could be found in {root}."
    )


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file, preserving formatting."""
    return tomlkit.parse(path.read_text())


def save_pyproject(path: Path, doc: tomlkit.TOMLDocument) -> None:
    """Save a TOMLDocument back to disk, preserving original formatting."""
    path.write_text(tomlkit.dumps(doc))


def get_project_version(doc: tomlkit.TOMLDocument, path: Path) -> str:
    """Extract the static version from [project].version.

    Raises:
        ManifestError: If there is no [project].version, or the version is
            dynamic (computed by the build backend).
    """
    project = doc.get("project", {})
    if "version" in project.get("dynamic", []):
        raise ManifestError(f"{path} declares a dynamic version; nothing to bump.")
    version = project.get("version")
    if not version:
        raise ManifestError(f"{path} has no [project].version.")
    return str(version)


class VersionTool(Protocol):
    """Changes the version recorded in a manifest."""

    def set_version(self, version: str) -> None:
        """Force the manifest version to `version`."""
        ...

    def bump(self, action: BumpAction) -> str:
        """Apply `action` and return the tool's output naming the new version."""
        ...


class NpmVersionTool:
    """Runs `npm version` in the package root."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def set_version(self, version: str) -> None:
        run_in_workspace(
            self.root,
            "npm",
            "version",
            "--allow-same-version=true",
            "--git-tag-version=false",
            version,
        )

    def bump(self, action: BumpAction) -> str:
        return run_in_workspace(
            self.root, "npm", "version", "--git-tag-version=false", *action.npm_args()
        )


class PyprojectVersionTool:
    """Rewrites [project].version of a pyproject.toml in place."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _current(self) -> str:
        return get_project_version(load_pyproject(self.path), self.path)

    def set_version(self, version: str) -> None:
        doc = load_pyproject(self.path)
        # The branch tip may have switched to a dynamic version
        get_project_version(doc, self.path)
        doc["project"]["version"] = version
        save_pyproject(self.path, doc)

    def bump(self, action: BumpAction) -> str:
        new = bump_version(self._current(), action)
        self.set_version(new)
        return new


def version_tool(manifest: Manifest) -> VersionTool:
    """Return the version tool matching the manifest kind."""
    if manifest.kind == PACKAGE_JSON:
        return NpmVersionTool(manifest.root)
    return PyprojectVersionTool(manifest.path)
