"""Shell and git utilities.

Provides a thin wrapper around subprocess for running read-only git commands,
plus the diagnostic output helper used by ``--verbose``.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import click


def git(*args: str, cwd: str | Path | None = None, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "rev-parse", "HEAD").
        cwd: Directory to run git in. Defaults to the current directory.
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., ref lookup).

    Returns:
        Stripped stdout from the git command.
    """
    # Commit messages are stored as raw bytes and need not be UTF-8.
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        encoding="utf-8",
        errors="replace",
        check=check,
    )
    return result.stdout.strip()


def note(msg: str) -> None:
    """Print a diagnostic line to stderr.

    stdout is reserved for the computed version, so everything else goes here.
    """
    click.echo(msg, err=True)
