"""Version parsing and bumping utilities.

Handles conversion between version strings and semver objects, with
special handling for incomplete version strings (e.g., "1.0" → "1.0.0").
Bumps follow the rules of `npm version` so that package.json and
pyproject.toml projects move the same way.
"""

from __future__ import annotations

import semver

from .models import BumpAction, BumpType


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3-rc.1" → "1.2.3-rc.1"
    """
    text = version_str.strip().removeprefix("v")
    core, sep, rest = text.partition("-")
    if not sep:
        core, sep, rest = text.partition("+")
    parts = core.split(".")
    while len(parts) < 3:
        parts.append("0")
    return semver.Version.parse(".".join(parts[:3]) + sep + rest)


def bump_version(version_str: str, action: BumpAction) -> str:
    """Apply a bump action and return the new version string.

    Examples:
        "1.2.3", major → "2.0.0"
        "1.2.3", minor → "1.3.0"
        "1.2.3-rc.0", patch → "1.2.3"
        "1.2.3", prerelease rc → "1.2.4-rc.0"
        "1.2.4-rc.0", prerelease rc → "1.2.4-rc.1"
    """
    v = parse_version(version_str).replace(build=None)
    if action.kind is BumpType.MAJOR:
        # A pre-release of x.0.0 is completed rather than skipped
        if v.prerelease and v.minor == 0 and v.patch == 0:
            return str(v.finalize_version())
        return str(v.bump_major())
    if action.kind is BumpType.MINOR:
        if v.prerelease and v.patch == 0:
            return str(v.finalize_version())
        return str(v.bump_minor())
    if action.kind is BumpType.PATCH:
        if v.prerelease:
            return str(v.finalize_version())
        return str(v.bump_patch())
    return _bump_prerelease(v, action.preid)


def _bump_prerelease(v: semver.Version, preid: str | None) -> str:
    if not v.prerelease:
        token = f"{preid}.0" if preid else "0"
        return str(v.bump_patch().replace(prerelease=token))

    ids = v.prerelease.split(".")
    if preid and ids[0] != preid:
        # Switching identifiers restarts the counter
        return str(v.replace(prerelease=f"{preid}.0"))
    # The last numeric identifier is the counter, wherever it sits
    for i in range(len(ids) - 1, -1, -1):
        if ids[i].isdigit():
            ids[i] = str(int(ids[i]) + 1)
            break
    else:
        ids.append("0")
    return str(v.replace(prerelease=".".join(ids)))
