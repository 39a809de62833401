"""GitHub event payload and REST API access."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import httpx

from .config import BumpConfig
from .models import Commit


def load_event(path: Path | None) -> dict[str, Any]:
    """Read the JSON payload of the event that triggered the workflow."""
    if path is None:
        return {}
    return json.loads(Path(path).read_text())


def event_commits(event: dict[str, Any]) -> list[Commit] | None:
    """Commits listed in a push event payload, or None if there are none."""
    raw = event.get("commits")
    if not raw:
        return None
    return [Commit.model_validate(c) for c in raw]


def get_commits_since_hours(
    config: BumpConfig, hours: float, client: httpx.Client | None = None
) -> list[Commit] | None:
    """Fetch the repository's commits from the last `hours` hours.

    The API lists commits newest first. HTTP and network errors are not
    handled here; they abort the run.

    Args:
        config: Run configuration (repository, token, API URL).
        hours: How far back to look.
        client: Optional httpx client, mainly for tests.

    Returns:
        The commits, or None if the API returned none.
    """
    now = datetime.now(timezone.utc)
    since = now - timedelta(hours=hours)
    print(
        f"Getting commits for repo {config.repository} since "
        f"{_iso(since)} until now ({_iso(now)}) from GitHub API ..."
    )

    owner, _, repo = config.repository.partition("/")
    headers = {"Accept": "application/vnd.github+json"}
    if config.token:
        headers["Authorization"] = f"Bearer {config.token}"

    own_client = client is None
    if client is None:
        client = httpx.Client()
    try:
        response = client.get(
            f"{config.api_url}/repos/{owner}/{repo}/commits",
            params={"since": _iso(since), "per_page": 100},
            headers=headers,
        )
        response.raise_for_status()
        data = response.json()
    finally:
        if own_client:
            client.close()

    if not data:
        return None
    return [Commit.model_validate(item["commit"]) for item in data]


def _iso(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")
