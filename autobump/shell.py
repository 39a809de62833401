"""Shell and output utilities.

Provides a wrapper around subprocess calls for running git and the
version tools inside the workspace, plus helpers for terminal output and
GitHub Actions step outputs.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import NoReturn


class AutobumpError(Exception):
    """Base class for errors that abort a bump run."""


class CommandError(AutobumpError):
    """An external command exited with a non-zero status.

    Attributes:
        command: The command and its arguments.
        returncode: Exit status of the process.
        stderr: Everything the process wrote to standard error.
    """

    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{stderr.rstrip()}\n{command[0]} exited with code {returncode}")


def run_in_workspace(workspace: Path | str, *args: str) -> str:
    """Run a command inside the workspace and return its stdout.

    The call blocks until the process terminates. There is no timeout.

    Args:
        workspace: Working directory for the process.
        *args: Command and arguments (e.g., "git", "tag", "v1.2.3").

    Returns:
        Stripped stdout of the command.

    Raises:
        CommandError: If the command exits with a non-zero status.
        OSError: If the command could not be started (e.g., not installed).
    """
    command = list(args)
    result = subprocess.run(
        command, cwd=workspace, capture_output=True, text=True, check=False
    )
    if result.returncode != 0:
        raise CommandError(command, result.returncode, result.stderr)
    return result.stdout.strip()


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def succeed(msg: str) -> None:
    """Print a success message. The caller returns normally afterwards."""
    print(f"✔ Success: {msg}")


def fatal(msg: str) -> NoReturn:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should halt the run.
    """
    print(f"✖ Fatal: {msg}", file=sys.stderr)
    sys.exit(1)


def set_output(name: str, value: str, output_file: Path | None = None) -> None:
    """Publish a step output for later workflow steps.

    Appends to the $GITHUB_OUTPUT file when the runner provides one, and
    falls back to the legacy ``::set-output`` workflow command otherwise.
    """
    if output_file is None:
        print(f"::set-output name={name}::{value}")
        return
    with open(output_file, "a") as fh:
        fh.write(f"{name}={value}\n")
