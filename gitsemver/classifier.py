"""Commit classification.

Decides, for a single commit, whether it already has a known version (it is
tagged) or which version component its message asks to bump.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import BumpKind, ClassificationRecord, CommitInfo, TagRef
from .settings import Settings
from .versions import parse_tag


def build_tag_map(tags: Iterable[TagRef]) -> dict[str, str]:
    """Map commit hash → tag name.

    Lightweight tags are applied first and annotated tags second, so an
    annotated tag wins over a lightweight tag on the same commit. Among tags
    of the same kind the later one in iteration order (ref-name order from
    Repository.tags) wins.
    """
    tags = list(tags)
    tag_map: dict[str, str] = {}
    for tag in tags:
        if not tag.annotated:
            tag_map[tag.commit] = tag.name
    for tag in tags:
        if tag.annotated:
            tag_map[tag.commit] = tag.name
    return tag_map


def classify(
    commit: CommitInfo, tag_name: str | None, settings: Settings
) -> ClassificationRecord:
    """Classify one commit.

    A tagged commit is solid and carries the tag's version. Otherwise the
    message is matched against the major, minor and patch patterns in that
    order and the first match decides the bump.

    Raises:
        ConfigurationError: If the commit's tag is not a valid version.
    """
    if tag_name is not None:
        version = parse_tag(tag_name, settings.tag_prefix)
        return ClassificationRecord(commit=commit.hash, version=version)

    for kind, pattern in (
        (BumpKind.MAJOR, settings.major_pattern),
        (BumpKind.MINOR, settings.minor_pattern),
        (BumpKind.PATCH, settings.patch_pattern),
    ):
        if pattern.search(commit.message):
            return ClassificationRecord(commit=commit.hash, bump=kind)

    return ClassificationRecord(commit=commit.hash)
