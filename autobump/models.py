"""Data models for autobump.

These Pydantic models carry the transient data of a single bump run:
commits read from the event payload or the GitHub API, the bump action
chosen for them, and the version that came out the other end.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Person(BaseModel):
    """Author or committer of a commit."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None


class Commit(BaseModel):
    """A commit as seen in a push event payload or the GitHub REST API.

    Only the message matters for bump decisions; author and committer are
    kept for log output. Unknown fields (sha, url, tree, ...) are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    message: str
    author: Person | None = None
    committer: Person | None = None


class BumpType(str, Enum):
    """Which part of the semantic version to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"


class BumpAction(BaseModel):
    """A bump type, plus the pre-release identifier for pre-releases.

    Attributes:
        kind: The version part to bump.
        preid: Pre-release identifier (e.g. "rc", "beta"). Ignored unless
               kind is PRERELEASE.
    """

    model_config = ConfigDict(frozen=True)

    kind: BumpType
    preid: str | None = None

    @classmethod
    def of(cls, kind: BumpType, preid: str | None = None) -> BumpAction:
        if kind is not BumpType.PRERELEASE:
            preid = None
        return cls(kind=kind, preid=preid or None)

    def npm_args(self) -> list[str]:
        """Arguments for `npm version` that apply this bump."""
        if self.preid:
            return [self.kind.value, f"--preid={self.preid}"]
        return [self.kind.value]

    def __str__(self) -> str:
        return " ".join(self.npm_args())


class BumpResult(BaseModel):
    """Outcome of a successful bump.

    Attributes:
        old: Version found in the manifest before bumping.
        new: Bumped version as reported by the version tool.
        tag: The new version with the tag prefix applied. Used for the
             commit message, the git tag and the newVersion output.
    """

    old: str
    new: str
    tag: str
