"""Branch walking.

A single traversal primitive, ``walk``, classifies commits along first-parent
ancestry and returns them newest-first. Resolving a walk to one version is a
reducer over that sequence (``resolve_version``); the same reducers are used
by the assembler for non-default branches.

Walk boundary:
- the start commit is always included;
- the first solid (tagged) commit is included and ends the walk;
- the ``stop_at`` commit is excluded and ends the walk;
- otherwise the walk ends after the root commit.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import semver

from .classifier import classify
from .errors import RepositoryError
from .models import ClassificationRecord
from .repository import Repository
from .settings import Settings
from .versions import bump


def walk(
    repo: Repository,
    start: str,
    tag_map: Mapping[str, str],
    settings: Settings,
    stop_at: str | None = None,
) -> list[ClassificationRecord]:
    """Classify commits from ``start`` back along first parents.

    Args:
        repo: Repository to read commits from.
        start: Hash of the newest commit to classify.
        tag_map: Commit hash → tag name, from classifier.build_tag_map.
        settings: Tag prefix and bump patterns.
        stop_at: Hash at which to stop without classifying it, usually the
                 default branch head.

    Returns:
        Classification records, newest first.

    Raises:
        RepositoryError: If reading history fails.
        ConfigurationError: If a walked commit carries an unparseable tag.
    """
    records: list[ClassificationRecord] = []
    for commit in repo.first_parent_history(start):
        if commit.hash == stop_at:
            break
        record = classify(commit, tag_map.get(commit.hash), settings)
        records.append(record)
        if record.is_solid:
            break
    return records


def split_base(
    records: Sequence[ClassificationRecord], fallback: semver.Version
) -> tuple[semver.Version, list[ClassificationRecord]]:
    """Pick the base version and the records still to be applied.

    If the oldest record is solid its version is the base and the record is
    consumed; otherwise ``fallback`` is the base and nothing is consumed.
    """
    if records and records[-1].is_solid:
        return records[-1].version, list(records[:-1])
    return fallback, list(records)


def apply_bumps(
    version: semver.Version, records: Sequence[ClassificationRecord]
) -> semver.Version:
    """Fold bumps onto version, oldest record first."""
    for record in reversed(records):
        version = bump(version, record.bump)
    return version


def resolve_version(
    records: Sequence[ClassificationRecord], settings: Settings
) -> semver.Version:
    """Reduce a full walk to a version.

    The base is the tagged commit that ended the walk, or the configured
    initial version when history ran out without a tag.

    Raises:
        RepositoryError: If the walk visited no commits.
    """
    if not records:
        raise RepositoryError("cannot determine version: no commits walked")
    base, pending = split_base(records, settings.initial_version)
    return apply_bumps(base, pending)
