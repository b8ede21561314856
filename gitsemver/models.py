"""Data models for gitsemver.

These Pydantic models represent the repository facts the resolution engine
reads and the per-commit records it produces. All of them are frozen: a
record built during a walk is never changed afterwards.
"""

from __future__ import annotations

from enum import Enum

import semver
from pydantic import BaseModel, ConfigDict, Field, model_validator


class BumpKind(str, Enum):
    """Effect of a single commit on the version."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"


class TagRef(BaseModel):
    """A tag and the commit it points at.

    Attributes:
        name: Tag name. For annotated tags this is the name stored in the
              tag object, which normally matches the ref name.
        commit: Hash of the commit the tag peels to.
        annotated: True for annotated tags, False for lightweight ones.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    commit: str
    annotated: bool = False


class Reference(BaseModel):
    """A named reference resolved to a commit hash."""

    model_config = ConfigDict(frozen=True)

    name: str
    hash: str

    @property
    def short_name(self) -> str:
        """Name without the refs/heads/ or refs/remotes/ prefix."""
        for prefix in ("refs/heads/", "refs/remotes/", "refs/tags/"):
            if self.name.startswith(prefix):
                return self.name[len(prefix) :]
        return self.name


class Head(BaseModel):
    """The checked-out commit.

    Attributes:
        hash: Commit hash HEAD resolves to.
        ref: Branch ref HEAD is attached to, or None when detached.
    """

    model_config = ConfigDict(frozen=True)

    hash: str
    ref: str | None = None


class CommitInfo(BaseModel):
    """Metadata of one commit as read from the object store."""

    model_config = ConfigDict(frozen=True)

    hash: str
    message: str = ""


class ClassificationRecord(BaseModel):
    """How one visited commit affects the version.

    A solid commit carries a resolved version (it bears a tag) and never a
    bump; the bump of any later commit is applied on top of it.

    Attributes:
        commit: Hash of the classified commit.
        version: Version the commit is known to have, set only when solid.
        bump: Component the commit bumps. Always NONE for solid commits.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    commit: str
    version: semver.Version | None = None
    bump: BumpKind = Field(default=BumpKind.NONE)

    @model_validator(mode="after")
    def _solid_has_no_bump(self) -> ClassificationRecord:
        if self.version is not None and self.bump is not BumpKind.NONE:
            raise ValueError("a solid commit cannot also carry a bump")
        return self

    @property
    def is_solid(self) -> bool:
        return self.version is not None
