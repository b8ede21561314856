"""Tests for gitsemver.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gitsemver.models import BumpKind, ClassificationRecord, Reference
from gitsemver.versions import parse_version


class TestClassificationRecord:
    def test_defaults_to_no_bump(self) -> None:
        record = ClassificationRecord(commit="abc")
        assert record.bump is BumpKind.NONE
        assert not record.is_solid

    def test_solid_record(self) -> None:
        record = ClassificationRecord(commit="abc", version=parse_version("1.0.0"))
        assert record.is_solid

    def test_solid_record_cannot_bump(self) -> None:
        with pytest.raises(ValidationError, match="solid"):
            ClassificationRecord(
                commit="abc", version=parse_version("1.0.0"), bump=BumpKind.MINOR
            )

    def test_is_frozen(self) -> None:
        record = ClassificationRecord(commit="abc")
        with pytest.raises(ValidationError):
            record.bump = BumpKind.MAJOR  # type: ignore[misc]


class TestReference:
    def test_short_name_of_branch(self) -> None:
        ref = Reference(name="refs/heads/feature/x", hash="h")
        assert ref.short_name == "feature/x"

    def test_short_name_of_remote_branch(self) -> None:
        ref = Reference(name="refs/remotes/origin/main", hash="h")
        assert ref.short_name == "origin/main"

    def test_short_name_of_other_ref(self) -> None:
        assert Reference(name="HEAD", hash="h").short_name == "HEAD"
