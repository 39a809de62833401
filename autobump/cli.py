"""CLI entry point for autobump."""

from __future__ import annotations

from importlib.metadata import version as pkg_version
from pathlib import Path

import click
from dotenv import find_dotenv, load_dotenv

from autobump.config import BumpConfig, ConfigError
from autobump.pipeline import run_bump

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _version_range() -> str:
    """Requirement pinning the installed release: >=current,<next_minor."""
    v = pkg_version("autobump")
    major, minor, *_ = v.split(".")
    return f"autobump>={v},<{major}.{int(minor) + 1}.0"


@click.group()
@click.version_option(package_name="autobump")
def cli() -> None:
    """Bump the version from commit message keywords, then commit, tag and push."""


@cli.command()
@click.option(
    "--workspace",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository checkout to work in. Defaults to $GITHUB_WORKSPACE.",
)
@click.option(
    "--dev",
    is_flag=True,
    help="Development mode: no git identity, commit, tag or push.",
)
def run(workspace: Path | None, dev: bool) -> None:
    """Run the version bump (usually called from CI)."""
    load_dotenv(find_dotenv(usecwd=True))
    try:
        config = BumpConfig.from_env()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    overrides: dict[str, object] = {}
    if workspace is not None:
        overrides["workspace"] = workspace
    if dev:
        overrides["dev_mode"] = True
    if overrides:
        config = config.model_copy(update=overrides)

    run_bump(config)


@cli.command()
@click.option(
    "--workflow-dir",
    type=click.Path(),
    default=".github/workflows",
    show_default=True,
    help="Directory to write the workflow file.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing workflow file.")
@click.option(
    "--source",
    default=None,
    help="Requirement uvx installs autobump from (e.g. a git+https URL). "
    "Defaults to the installed release series.",
)
def init(workflow_dir: str, force: bool, source: str | None) -> None:
    """Scaffold the GitHub Actions workflow into your repo."""
    root = Path.cwd()

    if not (root / ".git").exists():
        raise click.ClickException("Not a git repository. Run from the repo root.")

    if not (root / "package.json").exists() and not (root / "pyproject.toml").exists():
        raise click.ClickException(
            "No package.json or pyproject.toml found in current directory."
        )

    dest_dir = root / workflow_dir
    dest = dest_dir / "bump-version.yml"
    if dest.exists() and not force:
        raise click.ClickException(
            f"{dest.relative_to(root)} already exists. Use --force to overwrite."
        )

    dest_dir.mkdir(parents=True, exist_ok=True)
    template = TEMPLATES_DIR / "bump-version.yml"
    rendered = template.read_text().replace(
        "__AUTOBUMP_SOURCE__", source or _version_range()
    )
    dest.write_text(rendered)

    click.echo(f"✓ Wrote workflow to {dest.relative_to(root)}")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Commit and push the workflow file")
    click.echo("  2. Push a commit containing 'feat' or 'major' to see a bump")
