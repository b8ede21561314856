"""Version parsing and bumping utilities.

Handles conversion between version strings (or tag names) and semver
objects. semver.Version is immutable, so every bump returns a new value and a
base version can be shared between walks without aliasing.
"""

from __future__ import annotations

import semver

from .errors import ConfigurationError
from .models import BumpKind


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3-rc.1" → "1.2.3-rc.1"

    Raises:
        ValueError: If the string is not a version.
    """
    return semver.Version.parse(version_str, optional_minor_and_patch=True)


def parse_tag(name: str, prefix: str = "v") -> semver.Version:
    """Parse a tag name as a version, dropping the tag prefix if present.

    Examples:
        parse_tag("v1.2.3") → 1.2.3
        parse_tag("1.2.3") → 1.2.3
        parse_tag("release-1.0", prefix="release-") → 1.0.0

    Raises:
        ConfigurationError: If the tag does not name a version.
    """
    text = name[len(prefix) :] if prefix and name.startswith(prefix) else name
    try:
        return parse_version(text)
    except ValueError as exc:
        raise ConfigurationError(f"tag '{name}' is not a valid version") from exc


def bump(version: semver.Version, kind: BumpKind) -> semver.Version:
    """Return a new version with one component incremented.

    Lower components reset and any prerelease is dropped:
        bump(1.4.3, MINOR) → 1.5.0
        bump(1.4.3, MAJOR) → 2.0.0
        bump(1.4.3, NONE) → 1.4.3
    """
    if kind is BumpKind.MAJOR:
        return version.bump_major()
    if kind is BumpKind.MINOR:
        return version.bump_minor()
    if kind is BumpKind.PATCH:
        return version.bump_patch()
    return version


def numeric(version: semver.Version) -> tuple[int, int, int]:
    """The (major, minor, patch) tuple, used for ordering without prerelease."""
    return (version.major, version.minor, version.patch)


def with_prerelease(version: semver.Version, label: str) -> semver.Version:
    """Return a copy of version carrying the given prerelease label."""
    return version.replace(prerelease=label, build=None)
