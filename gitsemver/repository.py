"""Read-only access to a git repository.

Every query shells out to the git CLI through ``shell.git``. Nothing here
writes to the repository or touches the network.
"""

from __future__ import annotations

import subprocess
from collections.abc import Iterator
from pathlib import Path

from .errors import RepositoryError
from .models import CommitInfo, Head, Reference, TagRef
from .shell import git

# Field separator for formatted git output. Tabs are safe in ref listings;
# commit messages may contain tabs, so the log uses the ASCII unit separator.
_TAB = "\t"
_UNIT = "\x1f"


class Repository:
    """A git repository opened at a path.

    Args:
        path: Any directory inside the work tree (or a bare repository).
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @classmethod
    def open(cls, path: str | Path) -> Repository:
        """Open the repository containing ``path``.

        Raises:
            RepositoryError: If ``path`` is not inside a git repository.
        """
        if not Path(path).is_dir():
            raise RepositoryError(f"cannot open repository: {path} is not a directory")
        repo = cls(path)
        try:
            repo._git("rev-parse", "--git-dir")
        except RepositoryError as exc:
            raise RepositoryError(f"cannot open repository at {path}") from exc
        return repo

    def _git(self, *args: str, check: bool = True) -> str:
        try:
            return git(*args, cwd=self.path, check=check)
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip()
            raise RepositoryError(f"git {' '.join(args)} failed: {detail}") from exc
        except OSError as exc:
            raise RepositoryError(f"cannot run git: {exc}") from exc

    def tags(self) -> list[TagRef]:
        """List every tag that points (directly or through a tag object) at a commit.

        Returned in ref-name order. Annotated tags on other tag objects are
        peeled down to their commit. Tags on trees or blobs are skipped.
        """
        output = self._git(
            "for-each-ref",
            "--format=%(objecttype)%09%(objectname)%09%(*objecttype)"
            "%09%(*objectname)%09%(tag)%09%(refname)",
            "refs/tags",
        )
        tags: list[TagRef] = []
        for line in output.splitlines():
            objtype, objname, peeled_type, peeled_name, tag_name, refname = line.split(
                _TAB
            )
            short = refname.removeprefix("refs/tags/")
            if objtype == "commit":
                tags.append(TagRef(name=short, commit=objname))
            elif objtype == "tag":
                # for-each-ref only dereferences one level
                if peeled_type == "tag":
                    peeled_name = self.resolve(refname) or ""
                elif peeled_type != "commit":
                    continue
                if peeled_name:
                    tags.append(
                        TagRef(
                            name=tag_name or short, commit=peeled_name, annotated=True
                        )
                    )
        return tags

    def resolve(self, refname: str) -> str | None:
        """Resolve a reference to a commit hash, or None if it does not exist."""
        output = self._git(
            "rev-parse", "--verify", "--quiet", f"{refname}^{{commit}}", check=False
        )
        return output or None

    def symbolic_target(self, refname: str) -> str | None:
        """Return the ref a symbolic ref points at, or None if it is not symbolic."""
        output = self._git("symbolic-ref", "--quiet", refname, check=False)
        return output or None

    def head(self) -> Head:
        """Return the checked-out commit and the branch HEAD is attached to.

        Raises:
            RepositoryError: If HEAD does not resolve (e.g., no commits yet).
        """
        hash_ = self.resolve("HEAD")
        if hash_ is None:
            raise RepositoryError("cannot resolve HEAD; the repository has no commits")
        return Head(hash=hash_, ref=self.symbolic_target("HEAD"))

    def branches(self) -> list[Reference]:
        """List local branches (refs/heads/*) in ref-name order."""
        output = self._git(
            "for-each-ref", "--format=%(objectname)%09%(refname)", "refs/heads"
        )
        branches: list[Reference] = []
        for line in output.splitlines():
            hash_, name = line.split(_TAB, 1)
            branches.append(Reference(name=name, hash=hash_))
        return branches

    def has_remote(self, name: str) -> bool:
        return name in self._git("remote").splitlines()

    def fetch_refspecs(self, remote: str) -> list[str]:
        """Return the configured fetch refspecs of a remote."""
        output = self._git("config", "--get-all", f"remote.{remote}.fetch", check=False)
        return [line for line in output.splitlines() if line]

    def first_parent_history(self, start: str) -> Iterator[CommitInfo]:
        """Yield commits from ``start`` back to the root along first parents.

        Merge commits contribute only their first parent, so the walk is a
        single linear chain, newest first.
        """
        fmt = f"--format=%H{_UNIT}%B"
        output = self._git("log", "--first-parent", "-z", fmt, start)
        for chunk in output.split("\x00"):
            chunk = chunk.strip("\n")
            if not chunk:
                continue
            hash_, message = chunk.split(_UNIT, 1)
            yield CommitInfo(hash=hash_, message=message.strip())
