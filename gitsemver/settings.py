"""Settings loading.

Uses tomlkit to read the optional ``.gitsemver.toml`` settings file into a
frozen Settings model. Command-line switches and CI environment signals are
modelled separately so the resolution engine never reads the process
environment itself.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

import semver
import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from tomlkit.exceptions import TOMLKitError

from .errors import ConfigurationError
from .versions import parse_version

DEFAULT_SETTINGS_FILE = "./.gitsemver.toml"
DEFAULT_BRANCH = "master"


class Settings(BaseModel):
    """Repository settings: initial version, tag prefix and bump patterns.

    Keys in the settings file use the hyphenated aliases, e.g.::

        initial-version = "0.1.0"
        minor-version-bump-message = '\\+semver:\\s?(feature|minor)'

    Bump patterns are searched anywhere in the full commit message.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )

    initial_version: semver.Version = Field(default="0.0.0", alias="initial-version")
    tag_prefix: str = Field(default="v", alias="tag-prefix")
    major_pattern: re.Pattern[str] = Field(
        default=r"\+semver:\s?(breaking|major)", alias="major-version-bump-message"
    )
    minor_pattern: re.Pattern[str] = Field(
        default=r"\+semver:\s?(feature|minor)", alias="minor-version-bump-message"
    )
    patch_pattern: re.Pattern[str] = Field(
        default=r"\+semver:\s?(fix|patch)", alias="patch-version-bump-message"
    )

    @field_validator("initial_version", mode="before")
    @classmethod
    def _parse_initial_version(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_version(value)
        return value


class BranchSettings(BaseModel):
    """Invocation switches that control how branches are versioned.

    Attributes:
        forbid_behind_default_branch: Fail when the branch version orders
            before the default branch version.
        trim_branch_prefix: Drop a leading feature-/hotfix- from the label.
        ignore_env_vars: Do not consult CI environment overrides.
        default_branch: Preferred name of the default branch, either short
            ("main") or full ("refs/heads/main").
    """

    model_config = ConfigDict(frozen=True)

    forbid_behind_default_branch: bool = False
    trim_branch_prefix: bool = False
    ignore_env_vars: bool = False
    default_branch: str = DEFAULT_BRANCH


class EnvOverrides(BaseModel):
    """CI-provider signals, captured once at the process boundary.

    Attributes:
        tag: Tag being built (Travis TRAVIS_TAG).
        pull_request_branch: Source branch of a pull request build
            (Travis TRAVIS_PULL_REQUEST_BRANCH).
        branch: Branch being built (Travis TRAVIS_BRANCH).
        ref_name: Branch or tag being built (GitLab CI_COMMIT_REF_NAME).
    """

    model_config = ConfigDict(frozen=True)

    tag: str | None = None
    pull_request_branch: str | None = None
    branch: str | None = None
    ref_name: str | None = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> EnvOverrides:
        """Capture the override variables, treating empty values as unset."""
        return cls(
            tag=environ.get("TRAVIS_TAG") or None,
            pull_request_branch=environ.get("TRAVIS_PULL_REQUEST_BRANCH") or None,
            branch=environ.get("TRAVIS_BRANCH") or None,
            ref_name=environ.get("CI_COMMIT_REF_NAME") or None,
        )

    def branch_names(self) -> list[str]:
        """Branch signals in priority order, skipping the unset ones."""
        candidates = [self.pull_request_branch, self.branch, self.ref_name]
        return [name for name in candidates if name]


def load_settings(path: Path, required: bool = False) -> Settings:
    """Load settings from a TOML file.

    A missing file yields the defaults unless ``required`` is set, which is
    the case when the user named the file explicitly.

    Raises:
        ConfigurationError: If the file is required but missing, is not valid
            TOML, or holds unknown keys or invalid values.
    """
    if not path.exists():
        if required:
            raise ConfigurationError(f"cannot open settings file {path}")
        return Settings()

    try:
        doc = tomlkit.parse(path.read_text())
    except TOMLKitError as exc:
        raise ConfigurationError(f"cannot parse settings file {path}: {exc}") from exc

    try:
        return Settings.model_validate(doc.unwrap())
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings in {path}: {exc}") from exc
