"""Current branch detection and label sanitization."""

from __future__ import annotations

import re

from .errors import RepositoryError
from .models import Head
from .repository import Repository
from .settings import BranchSettings, EnvOverrides

_UNSAFE = re.compile(r"[^A-Za-z0-9]+")
_TRIMMED_PREFIX = re.compile(r"^(feature|hotfix)-")


def sanitize_branch_name(name: str, trim_prefix: bool = False) -> str:
    """Make a branch name safe for a prerelease label.

    Every run of characters outside [A-Za-z0-9] becomes a single "-". With
    ``trim_prefix`` a leading "feature-" or "hotfix-" is then removed.

    Examples:
        "feature/ABC-123" → "feature-ABC-123"
        "feature/ABC-123", trim_prefix=True → "ABC-123"
    """
    name = _UNSAFE.sub("-", name)
    if trim_prefix:
        name = _TRIMMED_PREFIX.sub("", name)
    return name


def current_branch_name(
    repo: Repository,
    head: Head,
    branch_settings: BranchSettings,
    env: EnvOverrides,
) -> str:
    """Return the sanitized name of the branch being built.

    CI signals win unless ignored. Otherwise the local branches pointing at
    HEAD are considered: the one HEAD is attached to if it is among them,
    else the first in ref-name order.

    Raises:
        RepositoryError: If no signal is set and no branch points at HEAD.
    """
    trim = branch_settings.trim_branch_prefix
    if not branch_settings.ignore_env_vars:
        signals = env.branch_names()
        if signals:
            return sanitize_branch_name(signals[0], trim)

    matches = [ref for ref in repo.branches() if ref.hash == head.hash]
    if not matches:
        raise RepositoryError("cannot determine branch")

    chosen = next((ref for ref in matches if ref.name == head.ref), matches[0])
    return sanitize_branch_name(chosen.short_name, trim)
