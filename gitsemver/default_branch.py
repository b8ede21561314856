"""Default branch resolution.

Every version is computed relative to the default branch, so failing to
find it is fatal. Resolution order, first success wins:

1. The preferred name given on the command line.
2. The conventional default, refs/heads/master.
3. The remote "origin": its HEAD, mapped through the remote's fetch
   refspecs back to a local branch.
"""

from __future__ import annotations

from .errors import RepositoryError
from .models import Reference
from .repository import Repository
from .shell import note

CONVENTIONAL_DEFAULT = "refs/heads/master"
REMOTE = "origin"


def qualify_branch(name: str) -> str:
    """Turn a short branch name into a full ref name.

    Examples:
        "main" → "refs/heads/main"
        "refs/heads/main" → "refs/heads/main"
    """
    return name if name.startswith("refs/") else f"refs/heads/{name}"


def _match(pattern: str, refname: str) -> str | None:
    """Match refname against a refspec side; return the part covered by '*'."""
    if "*" not in pattern:
        return "" if pattern == refname else None
    head, tail = pattern.split("*", 1)
    if (
        refname.startswith(head)
        and refname.endswith(tail)
        and len(refname) >= len(head) + len(tail)
    ):
        return refname[len(head) : len(refname) - len(tail)]
    return None


def map_refspec(refspec: str, refname: str) -> str | None:
    """Map a remote-tracking ref back to the source ref of a fetch refspec.

    The refspec is applied in reverse: its destination side is matched and
    its source side is produced. A leading force marker is ignored.

    Examples:
        map_refspec("+refs/heads/*:refs/remotes/origin/*",
                    "refs/remotes/origin/main") → "refs/heads/main"
        map_refspec("+refs/heads/*:refs/remotes/origin/*",
                    "refs/remotes/upstream/main") → None
    """
    spec = refspec.removeprefix("+")
    if ":" not in spec:
        return None
    src, dst = spec.split(":", 1)
    matched = _match(dst, refname)
    if matched is None:
        return None
    local = src.replace("*", matched, 1) if "*" in src else src
    return local.removeprefix("+")


def locate_default_branch(
    repo: Repository, preferred: str, verbose: bool = False
) -> Reference:
    """Find the reference to treat as the default branch.

    Args:
        repo: Repository to search.
        preferred: Preferred branch, short ("main") or full ("refs/heads/main").
        verbose: Print each attempt to stderr.

    Raises:
        RepositoryError: If no candidate resolves.
    """

    def try_resolve(refname: str) -> Reference | None:
        if verbose:
            note(f"attempting to resolve {refname}")
        hash_ = repo.resolve(refname)
        if hash_ is None:
            return None
        if verbose:
            note(f"resolved default branch {refname}")
        return Reference(name=refname, hash=hash_)

    preferred = qualify_branch(preferred)
    ref = try_resolve(preferred)
    if ref is not None:
        return ref

    if preferred != CONVENTIONAL_DEFAULT:
        ref = try_resolve(CONVENTIONAL_DEFAULT)
        if ref is not None:
            return ref

    if repo.has_remote(REMOTE):
        remote_head = repo.symbolic_target(f"refs/remotes/{REMOTE}/HEAD")
        if remote_head is not None:
            if verbose:
                note(f"{REMOTE}/HEAD points at {remote_head}")
            for refspec in repo.fetch_refspecs(REMOTE):
                local = map_refspec(refspec, remote_head)
                if local is None:
                    continue
                ref = try_resolve(local)
                if ref is not None:
                    return ref

    raise RepositoryError("cannot determine default branch")
