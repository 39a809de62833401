"""Run configuration.

All settings come from environment variables set by the GitHub Actions
runner (``GITHUB_*``) and by the action's inputs (``INPUT_*``). They are
read once into an immutable BumpConfig which is passed explicitly to
everything that needs it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict

from .models import BumpType
from .shell import AutobumpError

DEFAULT_COMMIT_MESSAGE = "ci: version bump to {{version}}"
DEFAULT_MAJOR_WORDS = "BREAKING CHANGE,major"
DEFAULT_MINOR_WORDS = "feat,minor"


class ConfigError(AutobumpError):
    """An environment variable holds a value we cannot use."""


class BumpConfig(BaseModel):
    """Immutable settings for one bump run."""

    model_config = ConfigDict(frozen=True)

    # Repository and credentials
    repository: str = ""
    actor: str = ""
    token: str = ""
    api_url: str = "https://api.github.com"
    server_url: str = "https://github.com"

    # Triggering event
    ref: str | None = None
    head_ref: str | None = None
    event_path: Path | None = None
    github_output: Path | None = None

    # Where the manifest lives
    workspace: Path = Path(".")
    package_dir: str | None = None

    # Commit discovery
    hours_to_go_back: float | None = None
    skip_if_no_commits: bool = False
    bump_policy: str = "all"

    # Keyword matching
    major_words: tuple[str, ...] = ()
    minor_words: tuple[str, ...] = ()
    patch_words: tuple[str, ...] | None = None
    rc_words: tuple[str, ...] | None = None
    default_bump: BumpType | None = BumpType.PATCH
    preid: str = "pre"

    # Commit and tag
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    tag_prefix: str = ""
    target_branch: str | None = None
    skip_tag: bool = False
    dev_mode: bool = False
    git_user_name: str = "Automated Version Bump"
    git_user_email: str = "autobump@users.noreply.github.com"

    @property
    def package_root(self) -> Path:
        """Directory holding the manifest."""
        if self.package_dir:
            return self.workspace / self.package_dir
        return self.workspace

    @property
    def is_pull_request(self) -> bool:
        return bool(self.head_ref)

    @property
    def remote_url(self) -> str:
        """Push URL with the actor and token embedded."""
        host = urlparse(self.server_url).netloc or "github.com"
        return f"https://{self.actor}:{self.token}@{host}/{self.repository}.git"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BumpConfig:
        """Build the configuration from environment variables.

        Raises:
            ConfigError: If a value cannot be parsed.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            # Unset and empty inputs are treated the same way by the runner
            return env.get(name) or None

        package_dir = get("INPUT_PACKAGE-DIR") or get("INPUT_PACKAGE-JSON-DIR")
        event_path = get("GITHUB_EVENT_PATH")
        github_output = get("GITHUB_OUTPUT")

        return cls(
            repository=get("GITHUB_REPOSITORY") or "",
            actor=get("GITHUB_ACTOR") or "",
            token=get("GITHUB_TOKEN") or "",
            api_url=(get("GITHUB_API_URL") or "https://api.github.com").rstrip("/"),
            server_url=get("GITHUB_SERVER_URL") or "https://github.com",
            ref=get("GITHUB_REF"),
            head_ref=get("GITHUB_HEAD_REF"),
            event_path=Path(event_path) if event_path else None,
            github_output=Path(github_output) if github_output else None,
            workspace=Path(get("GITHUB_WORKSPACE") or Path.cwd()),
            package_dir=package_dir,
            hours_to_go_back=_parse_hours(get("INPUT_HOURS-TO-GO-BACK")),
            skip_if_no_commits=_parse_flag(get("INPUT_SKIP-IF-NO-COMMITS")),
            bump_policy=get("INPUT_BUMP-POLICY") or "all",
            major_words=split_words(get("INPUT_MAJOR-WORDING") or DEFAULT_MAJOR_WORDS),
            minor_words=split_words(get("INPUT_MINOR-WORDING") or DEFAULT_MINOR_WORDS),
            patch_words=_optional_words(get("INPUT_PATCH-WORDING")),
            rc_words=_optional_words(get("INPUT_RC-WORDING")),
            default_bump=_parse_default(get("INPUT_DEFAULT")),
            preid=get("INPUT_PREID") or "pre",
            commit_message=get("INPUT_COMMIT-MESSAGE") or DEFAULT_COMMIT_MESSAGE,
            tag_prefix=get("INPUT_TAG-PREFIX") or "",
            target_branch=get("INPUT_TARGET-BRANCH"),
            skip_tag=_parse_flag(get("INPUT_SKIP-TAG")),
            dev_mode=(get("AUTOBUMP_ENV") or "").lower() == "development",
            git_user_name=get("GITHUB_USER") or "Automated Version Bump",
            git_user_email=get("GITHUB_EMAIL") or "autobump@users.noreply.github.com",
        )


def split_words(value: str) -> tuple[str, ...]:
    """Split a comma-separated keyword list, dropping blank entries.

    A blank keyword would be a substring of every commit message.
    """
    return tuple(word.strip() for word in value.split(",") if word.strip())


def _optional_words(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return split_words(value) or None


def _parse_flag(value: str | None) -> bool:
    return (value or "").strip().lower() == "true"


def _parse_hours(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"hours-to-go-back must be a number, got {value!r}") from None


def _parse_default(value: str | None) -> BumpType | None:
    if value is None:
        return BumpType.PATCH
    if value.lower() == "none":
        return None
    try:
        return BumpType(value.lower())
    except ValueError:
        choices = ", ".join(t.value for t in BumpType)
        raise ConfigError(
            f"default must be one of {choices} or none, got {value!r}"
        ) from None
