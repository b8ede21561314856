"""Exception types raised while resolving a version.

Every failure in the resolution engine is a GitSemverError. The CLI is the
only place that turns one into an exit status.
"""

from __future__ import annotations


class GitSemverError(Exception):
    """Base class for all resolution failures."""


class ConfigurationError(GitSemverError):
    """Malformed settings or a tag that does not parse as a version."""


class RepositoryError(GitSemverError):
    """The repository does not satisfy the preconditions for versioning."""


class BranchBehindError(GitSemverError):
    """The branch version orders before the default branch version."""
