"""Error types for the version lifecycle.

Input/state errors (``MissingVersionFile``, ``MalformedVersion``,
``NotASnapshot``, ``AlreadySnapshot``, ``UnpushedHistory``) are detected
before anything is mutated. ``PartialRelease`` is the one recoverable
condition: the release commit and tag exist, and running
``advance_snapshot`` alone finishes the job.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relcut.git.repository import GitError
from relcut.platform.process import ProcessError
from relcut.release.version import Version


@dataclass(frozen=True, slots=True)
class MissingVersionFile:
    path: Path


@dataclass(frozen=True, slots=True)
class MalformedVersion:
    path: Path
    text: str


@dataclass(frozen=True, slots=True)
class ReadFailure:
    """The version file exists but could not be read (permissions, I/O)."""

    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class WriteFailure:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class NotASnapshot:
    version: Version


@dataclass(frozen=True, slots=True)
class AlreadySnapshot:
    version: Version


@dataclass(frozen=True, slots=True)
class UnpushedHistory:
    """The branch is ahead of its upstream before a new cut starts."""

    branch: str
    ahead: int


@dataclass(frozen=True, slots=True)
class BinaryPublishFailed:
    """The binary-repository publish hook exited non-zero."""

    version: Version
    error: ProcessError


@dataclass(frozen=True, slots=True)
class PartialRelease:
    """Released and tagged, but the next snapshot commit is missing.

    ``cause`` is the failure that stopped the run, or None when a re-run
    found the repository already in this state.
    """

    version: Version
    tag: str
    cause: StoreError | TransitionError | GitError | BinaryPublishFailed | None = None


StoreError = MissingVersionFile | MalformedVersion | ReadFailure | WriteFailure

TransitionError = NotASnapshot | AlreadySnapshot

ReleaseError = (
    StoreError
    | TransitionError
    | UnpushedHistory
    | PartialRelease
    | BinaryPublishFailed
    | GitError
)
