"""Shared test fixtures."""

from __future__ import annotations

import hashlib
import shutil
import subprocess
from collections.abc import Iterator
from pathlib import Path

import pytest

from gitsemver.models import CommitInfo, Head, Reference, TagRef
from gitsemver.settings import Settings

CI_VARIABLES = (
    "TRAVIS_TAG",
    "TRAVIS_PULL_REQUEST_BRANCH",
    "TRAVIS_BRANCH",
    "CI_COMMIT_REF_NAME",
)


class FakeRepository:
    """In-memory stand-in for gitsemver.repository.Repository.

    Commits get deterministic sha1-looking hashes. Refs, symbolic refs,
    tags and remotes are plain dicts the tests fill in.
    """

    def __init__(self) -> None:
        self.commits: dict[str, CommitInfo] = {}
        self.parents: dict[str, tuple[str, ...]] = {}
        self.refs: dict[str, str] = {}
        self.symrefs: dict[str, str] = {}
        self.tag_refs: list[TagRef] = []
        self.remotes: dict[str, list[str]] = {}
        self.detached: str | None = None

    def commit(self, message: str = "", *parents: str) -> str:
        seed = f"{len(self.commits)}:{message}:{','.join(parents)}"
        hash_ = hashlib.sha1(seed.encode()).hexdigest()
        self.commits[hash_] = CommitInfo(hash=hash_, message=message)
        self.parents[hash_] = parents
        return hash_

    def chain(self, messages: list[str], parent: str | None = None) -> list[str]:
        """Commit each message on top of the previous one; return the hashes."""
        hashes: list[str] = []
        for message in messages:
            parent = self.commit(message, *([parent] if parent else []))
            hashes.append(parent)
        return hashes

    def branch(self, name: str, hash_: str) -> None:
        self.refs[f"refs/heads/{name}"] = hash_

    def tag(self, name: str, hash_: str, annotated: bool = False) -> None:
        self.tag_refs.append(TagRef(name=name, commit=hash_, annotated=annotated))

    def checkout(self, branch: str | None = None, detached: str | None = None) -> None:
        if branch is not None:
            self.symrefs["HEAD"] = f"refs/heads/{branch}"
            self.detached = None
        else:
            self.symrefs.pop("HEAD", None)
            self.detached = detached

    # Repository interface

    def tags(self) -> list[TagRef]:
        return list(self.tag_refs)

    def resolve(self, refname: str) -> str | None:
        return self.refs.get(refname)

    def symbolic_target(self, refname: str) -> str | None:
        return self.symrefs.get(refname)

    def head(self) -> Head:
        ref = self.symrefs.get("HEAD")
        if ref is not None:
            return Head(hash=self.refs[ref], ref=ref)
        assert self.detached is not None
        return Head(hash=self.detached)

    def branches(self) -> list[Reference]:
        return [
            Reference(name=name, hash=hash_)
            for name, hash_ in sorted(self.refs.items())
            if name.startswith("refs/heads/")
        ]

    def has_remote(self, name: str) -> bool:
        return name in self.remotes

    def fetch_refspecs(self, remote: str) -> list[str]:
        return list(self.remotes.get(remote, []))

    def first_parent_history(self, start: str) -> Iterator[CommitInfo]:
        current: str | None = start
        while current is not None:
            yield self.commits[current]
            parents = self.parents[current]
            current = parents[0] if parents else None


class GitRepo:
    """A real repository in a temporary directory, driven through git."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def commit(self, message: str) -> str:
        self.git("commit", "--quiet", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD")

    def commit_raw(self, message: bytes) -> str:
        """Commit a message given as raw bytes, stored without re-encoding."""
        message_file = self.path.parent / "COMMIT_MSG"
        message_file.write_bytes(message)
        self.git("commit", "--quiet", "--allow-empty", "-F", str(message_file))
        return self.git("rev-parse", "HEAD")

    def tag(self, name: str, annotated: bool = False, target: str = "HEAD") -> None:
        if annotated:
            self.git("tag", "-a", name, "-m", f"release {name}", target)
        else:
            self.git("tag", name, target)

    def checkout(self, name: str, new: bool = False) -> None:
        if new:
            self.git("checkout", "--quiet", "-b", name)
        else:
            self.git("checkout", "--quiet", name)


@pytest.fixture
def fake_repo() -> FakeRepository:
    """An empty in-memory repository."""
    return FakeRepository()


@pytest.fixture
def settings() -> Settings:
    """Default settings."""
    return Settings()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove CI override variables from the environment."""
    for name in CI_VARIABLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def git_repo(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clean_env: None
) -> GitRepo:
    """An empty git repository on branch master, isolated from user config."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")

    path = tmp_path / "repo"
    path.mkdir()
    repo = GitRepo(path)
    repo.git("init", "--quiet")
    repo.git("symbolic-ref", "HEAD", "refs/heads/master")
    return repo
