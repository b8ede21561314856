"""Version assembly for branches other than the default branch."""

from __future__ import annotations

from collections.abc import Sequence

import semver

from .errors import BranchBehindError, RepositoryError
from .models import ClassificationRecord
from .settings import BranchSettings
from .versions import numeric, with_prerelease
from .walker import apply_bumps, split_base

SHORT_HASH_LENGTH = 4


def prerelease_label(branch_name: str, count: int, commit: str) -> str:
    """Format the prerelease label, e.g. "my-feature-3-a1b2"."""
    return f"{branch_name}-{count}-{commit[:SHORT_HASH_LENGTH]}"


def assemble(
    records: Sequence[ClassificationRecord],
    default_version: semver.Version,
    branch_name: str,
    branch_settings: BranchSettings,
) -> semver.Version:
    """Combine a branch walk with the default branch version.

    Args:
        records: Walk from the branch head down to the default branch head
                 (exclusive) or the nearest tag (inclusive), newest first.
        default_version: Version resolved for the default branch.
        branch_name: Sanitized name of the current branch.
        branch_settings: Supplies forbid_behind_default_branch.

    Returns:
        The base version when nothing follows it; otherwise the bumped
        version labelled "{branch}-{count}-{hash}", where count is the number
        of commits folded (bumping or not) and hash is the first four
        characters of the branch head.

    Raises:
        RepositoryError: If the walk is empty.
        BranchBehindError: If forbidden and the result orders before the
            default branch version.
    """
    if not records:
        raise RepositoryError("cannot determine version in branch")

    base, pending = split_base(records, default_version)
    if not pending:
        return base

    version = apply_bumps(base, pending)
    version = with_prerelease(
        version, prerelease_label(branch_name, len(pending), records[0].commit)
    )

    if branch_settings.forbid_behind_default_branch and numeric(version) < numeric(
        default_version
    ):
        raise BranchBehindError(
            f"branch has calculated version '{version}' whose version is less "
            f"than the default branch version '{default_version}'"
        )
    return version
