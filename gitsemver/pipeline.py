"""Version resolution: tags → default branch → current branch → assemble.

This module orchestrates a single resolution:
1. Short-circuit on a CI tag build, if one is signalled
2. Map every tagged commit to its tag
3. Locate the default branch and walk it to a baseline version
4. If HEAD is the default branch head, the baseline is the answer
5. Otherwise walk HEAD back to the default branch head (or the nearest tag)
   and assemble a prerelease version on top of the baseline

Each phase re-raises failures with the phase name prefixed, so the message
printed by the CLI says where resolution stopped.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import semver

from .assembler import assemble
from .branch import current_branch_name, sanitize_branch_name
from .classifier import build_tag_map
from .default_branch import locate_default_branch, qualify_branch
from .errors import GitSemverError
from .models import Head, Reference
from .repository import Repository
from .settings import BranchSettings, EnvOverrides, Settings
from .shell import note
from .versions import parse_tag
from .walker import resolve_version, walk


@contextmanager
def phase(name: str) -> Iterator[None]:
    """Prefix any resolution error raised inside the block with ``name``."""
    try:
        yield
    except GitSemverError as exc:
        raise type(exc)(f"{name} failed: {exc}") from exc


def find_tags(repo: Repository, verbose: bool = False) -> dict[str, str]:
    """Build the commit hash → tag name map for the whole repository."""
    tags = repo.tags()
    if verbose:
        for tag in tags:
            kind = "annotated" if tag.annotated else "lightweight"
            note(f"found {kind} tag {tag.name} on {tag.commit}")
    return build_tag_map(tags)


def resolve_default_version(
    repo: Repository,
    tag_map: dict[str, str],
    settings: Settings,
    branch_settings: BranchSettings,
    verbose: bool = False,
) -> tuple[Reference, semver.Version]:
    """Locate the default branch and compute its version.

    Returns:
        The default branch reference and its resolved version.
    """
    with phase("default branch lookup"):
        default_ref = locate_default_branch(
            repo, branch_settings.default_branch, verbose
        )

    with phase("default branch walk"):
        records = walk(repo, default_ref.hash, tag_map, settings)
        version = resolve_version(records, settings)

    if verbose:
        note(f"default branch {default_ref.short_name} is at version {version}")
    return default_ref, version


def get_version(
    repo: Repository,
    head: Head,
    tag_map: dict[str, str],
    settings: Settings,
    branch_settings: BranchSettings,
    env: EnvOverrides,
    verbose: bool = False,
) -> semver.Version:
    """Compute the version of ``head``."""
    default_ref, default_version = resolve_default_version(
        repo, tag_map, settings, branch_settings, verbose
    )
    if head.hash == default_ref.hash:
        return default_version

    with phase("current branch lookup"):
        branch_name = current_branch_name(repo, head, branch_settings, env)
    if verbose:
        note(f"current branch is {branch_name}")

    with phase("branch walk"):
        records = walk(repo, head.hash, tag_map, settings, stop_at=default_ref.hash)
    if verbose:
        note(f"{len(records)} commits walked since the default branch or last tag")

    with phase("assembly"):
        return assemble(records, default_version, branch_name, branch_settings)


def get_current_version(
    repo: Repository,
    settings: Settings,
    branch_settings: BranchSettings,
    env: EnvOverrides,
    verbose: bool = False,
) -> str:
    """Resolve the version of the checked-out commit.

    Args:
        repo: Opened repository.
        settings: Initial version, tag prefix and bump patterns.
        branch_settings: Command-line switches.
        env: CI overrides captured at the process boundary.
        verbose: Trace the resolution on stderr.

    Returns:
        The version string, e.g. "1.4.0" or "1.5.0-my-feature-3-a1b2".

    Raises:
        GitSemverError: On any failure; nothing is partially returned.
    """
    if not branch_settings.ignore_env_vars and env.tag:
        with phase("tag override"):
            version = parse_tag(env.tag, settings.tag_prefix)
        if verbose:
            note(f"version determined from CI tag {env.tag}")
        return str(version)

    tag_map = find_tags(repo, verbose)
    with phase("head lookup"):
        head = repo.head()
    version = get_version(
        repo, head, tag_map, settings, branch_settings, env, verbose
    )
    return str(version)


def get_prerelease_label(
    repo: Repository, branch_settings: BranchSettings, env: EnvOverrides
) -> str:
    """Return the sanitized current branch name used in prerelease labels."""
    with phase("current branch lookup"):
        head = repo.head()
        return current_branch_name(repo, head, branch_settings, env)


def default_branch_indicator(branch_settings: BranchSettings) -> str:
    """The label the default branch itself would get, e.g. "master".

    The label command prints nothing when the current branch has this label.
    """
    name = qualify_branch(branch_settings.default_branch).removeprefix("refs/heads/")
    return sanitize_branch_name(name, branch_settings.trim_branch_prefix)
