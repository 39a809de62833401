"""Decisions taken before touching the repository.

Whether a bump already happened, which version part to bump, which
branch to push to, and how to read the version tool's output.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from .config import BumpConfig
from .models import BumpAction, BumpType, Commit
from .shell import AutobumpError

VERSION_PLACEHOLDER = "{{version}}"

_REF_RE = re.compile(r"refs/[a-zA-Z]+/(.*)")


class BranchNotFoundError(AutobumpError):
    """No branch could be determined to push the bump to."""


def commit_message_pattern(template: str, tag_prefix: str = "") -> re.Pattern[str]:
    """Compile a case-insensitive pattern matching bump commit messages.

    Every ``{{version}}`` placeholder in the template stands for the tag
    prefix followed by a major.minor.patch number.

    Example:
        "ci: version bump to {{version}}" with prefix "v" matches
        "CI: version bump to v1.2.3".
    """
    version = re.escape(tag_prefix) + r"\d+\.\d+\.\d+"
    parts = template.split(VERSION_PLACEHOLDER)
    return re.compile(version.join(re.escape(p) for p in parts), re.IGNORECASE)


def check_for_previous_bump(
    commits: Sequence[Commit] | None, pattern: re.Pattern[str], policy: str | None
) -> bool:
    """Check, according to the bump policy, whether a bump commit exists.

    Policies:
        last-commit: only the last commit of the list is checked.
        ignore: never reports a previous bump.
        anything else: any commit in the list counts.
    """
    messages = [c.message for c in commits] if commits else []
    if policy == "last-commit":
        print("Checking for CI version bump in the last commit ...")
        found = bool(messages) and pattern.search(messages[-1]) is not None
    elif policy == "ignore":
        print("Ignoring any version bumps in commits ...")
        found = False
    else:
        print("Checking for CI version bump in all previous commits ...")
        found = any(pattern.search(m) for m in messages)
    print(f"Found a previous version bump: {found}")
    return found


def get_bump_action(
    commits: Sequence[Commit], config: BumpConfig
) -> BumpAction | None:
    """Pick the bump action from the keywords in the first commit message.

    Only commits[0] is inspected. Keyword lists are checked in the order
    major, minor, patch, pre-release, using case-sensitive substring
    matches. Without a match the configured default applies; None means
    the default was disabled.

    The caller must make sure `commits` is not empty.
    """
    message = commits[0].message
    print(
        f"Config words: {{ {','.join(config.major_words)} | "
        f"{','.join(config.minor_words)} | {_fmt(config.patch_words)} | "
        f"{_fmt(config.rc_words)} }}"
    )
    print(f"First commit message: {message}")

    if _contains_any(message, config.major_words):
        kind = BumpType.MAJOR
    elif _contains_any(message, config.minor_words):
        kind = BumpType.MINOR
    elif config.patch_words and _contains_any(message, config.patch_words):
        kind = BumpType.PATCH
    elif config.rc_words and _contains_any(message, config.rc_words):
        kind = BumpType.PRERELEASE
    elif config.default_bump is not None:
        kind = config.default_bump
    else:
        return None

    action = BumpAction.of(kind, config.preid)
    print(f"Version action to use is: {action}")
    return action


def resolve_branch(config: BumpConfig) -> str:
    """Branch to push the bump to.

    An explicit target branch wins, then the head branch of a pull
    request, then the name parsed from GITHUB_REF.

    Raises:
        BranchNotFoundError: If none of them is available.
    """
    if config.target_branch:
        return config.target_branch
    if config.head_ref:
        return config.head_ref
    match = _REF_RE.search(config.ref or "")
    if match and match.group(1):
        return match.group(1)
    raise BranchNotFoundError("No branch found")


def parse_new_version(output: str, *, workspace_quirk: bool = False) -> str:
    """Extract the new version from the version tool's stdout.

    npm prints the new version with a leading "v". In npm workspaces it
    prints the package name on the first line and the version on the
    second; `workspace_quirk` takes the second line when there is one.
    """
    text = output.strip()
    if workspace_quirk:
        lines = text.splitlines()
        if len(lines) > 1 and lines[1].strip():
            text = lines[1].strip()
    return text.removeprefix("v")


def _contains_any(message: str, words: Sequence[str]) -> bool:
    return any(word in message for word in words)


def _fmt(words: Sequence[str] | None) -> str:
    return ",".join(words) if words else "-"
