"""Git operations used by the release lifecycle.

Usage:
    from relcut.git import Repository

    repo = Repository(Path("/path/to/clone"))
    repo.tag("v1.2.3", "Release version 1.2.3")
"""

from relcut.git.repository import (
    GitError,
    NothingToCommit,
    Repository,
    StatusEntry,
    TagAlreadyExists,
    VcsFailure,
)

__all__ = [
    "GitError",
    "NothingToCommit",
    "Repository",
    "StatusEntry",
    "TagAlreadyExists",
    "VcsFailure",
]
