"""Bump pipeline: commits → previous bump? → bump type → commit → tag → push.

This module orchestrates a single autobump run:
1. Collect the commits of the triggering event (or of the last N hours)
2. Stop if one of them already is a bump commit
3. Choose major / minor / patch / prerelease from commit keywords
4. Bump the manifest version on the detached checkout and commit it
5. Check out the target branch and apply the same bump there
6. Tag the result and push commit and tag

Expected no-op situations (no commits, a previous bump, no keyword)
end the run successfully with bumped=false. Failures after the decision
phase are reported once and exit with code 1. Nothing is rolled back.
"""

from __future__ import annotations

from collections.abc import Sequence

from .config import BumpConfig
from .decisions import (
    VERSION_PLACEHOLDER,
    check_for_previous_bump,
    commit_message_pattern,
    get_bump_action,
    parse_new_version,
    resolve_branch,
)
from .github import event_commits, get_commits_since_hours, load_event
from .manifest import VersionTool, read_manifest, version_tool
from .models import BumpAction, BumpResult, BumpType, Commit
from .shell import fatal, run_in_workspace, set_output, step, succeed


def resolve_commits(config: BumpConfig) -> list[Commit] | None:
    """Commits to inspect: from the GitHub API if a lookback window is
    configured, from the event payload otherwise."""
    if config.hours_to_go_back is not None:
        return get_commits_since_hours(config, config.hours_to_go_back)
    return event_commits(load_event(config.event_path))


def configure_git_identity(config: BumpConfig) -> None:
    """Set the author of the bump commit."""
    root = config.package_root
    run_in_workspace(root, "git", "config", "user.name", config.git_user_name)
    run_in_workspace(root, "git", "config", "user.email", config.git_user_email)


def apply_version(
    tool: VersionTool,
    current: str,
    action: BumpAction,
    *,
    workspace_quirk: bool = False,
) -> str:
    """Reset the manifest to `current`, bump it, and return the new version."""
    tool.set_version(current)
    output = tool.bump(action)
    return parse_new_version(output, workspace_quirk=workspace_quirk)


def commit_bump(config: BumpConfig, tag: str) -> None:
    """Commit all modified files with the configured message."""
    print("Committing version bump ...")
    message = config.commit_message.replace(VERSION_PLACEHOLDER, tag)
    run_in_workspace(config.package_root, "git", "commit", "-a", "-m", message)


def switch_to_branch(config: BumpConfig, branch: str) -> None:
    """Leave the detached checkout for the branch we push to."""
    root = config.package_root
    if config.is_pull_request:
        # The head branch of a pull request is not known locally yet
        run_in_workspace(root, "git", "fetch")
    run_in_workspace(root, "git", "checkout", branch)


def publish_bump(config: BumpConfig, tag: str) -> None:
    """Tag the bump commit and push it, or push the commit alone."""
    if config.dev_mode:
        return
    root = config.package_root
    remote = config.remote_url
    if not config.skip_tag:
        print("Tagging version bump commit ...")
        run_in_workspace(root, "git", "tag", tag)
        print("Pushing version bump commit and tag ...")
        run_in_workspace(root, "git", "push", remote, "--follow-tags")
        run_in_workspace(root, "git", "push", remote, "--tags")
    else:
        print("Pushing version bump commit ...")
        run_in_workspace(root, "git", "push", remote)


def perform_bump(config: BumpConfig, action: BumpAction) -> BumpResult:
    """Bump, commit, tag and push. Every failure raises."""
    step("Performing version bump")
    manifest = read_manifest(config.package_root)
    current = manifest.version
    tool = version_tool(manifest)

    if not config.dev_mode:
        configure_git_identity(config)

    branch = resolve_branch(config)
    print(f"  branch: {branch}")

    # Bump on the checked out commit (detached HEAD) first
    new_version = apply_version(tool, current, action)
    tag = f"{config.tag_prefix}{new_version}"
    print(f"  {current} → {tag} (detached checkout)")
    if not config.dev_mode:
        commit_bump(config, tag)

    # Then repeat on the branch, whose manifest may differ
    switch_to_branch(config, branch)
    new_version = apply_version(tool, current, action, workspace_quirk=True)
    tag = f"{config.tag_prefix}{new_version}"
    print(f"  {current} → {tag} ({branch})")
    set_output("newVersion", tag, config.github_output)

    publish_bump(config, tag)
    return BumpResult(old=current, new=new_version, tag=tag)


def choose_action(
    commits: Sequence[Commit] | None, config: BumpConfig
) -> BumpAction | None:
    """Bump action for the run; a patch bump when there are no commits."""
    if not commits:
        return BumpAction.of(BumpType.PATCH)
    return get_bump_action(commits, config)


def run_bump(config: BumpConfig) -> BumpResult | None:
    """Execute one bump run.

    Returns:
        The bump result, or None if the run ended without bumping.
    """
    set_output("bumped", "false", config.github_output)

    step("Collecting commits")
    commits = resolve_commits(config)
    if not commits:
        if config.skip_if_no_commits:
            succeed("No action necessary because we found no commits!")
            return None
        print("Couldn't find any commits in this event, incrementing patch version...")
    else:
        print(f"  {len(commits)} commit(s)")
        for commit in commits:
            subject = commit.message.partition("\n")[0]
            print(f"  - {subject}")

    step("Checking for a previous bump")
    pattern = commit_message_pattern(config.commit_message, config.tag_prefix)
    if check_for_previous_bump(commits, pattern, config.bump_policy):
        succeed("No action necessary because we found a previous bump!")
        return None

    step("Choosing bump type")
    action = choose_action(commits, config)
    if action is None:
        succeed("No version keywords found, skipping bump.")
        return None

    try:
        result = perform_bump(config, action)
        set_output("bumped", "true", config.github_output)
        succeed(f"Bumped to new version {result.tag}.")
        return result
    except Exception as exc:
        fatal(f"Failed to bump version: {exc}")
