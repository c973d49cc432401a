from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class BucketNotFound:
    bucket: str
    reason: str


@dataclass(frozen=True, slots=True)
class UploadFailure:
    """One object failed to upload; the rest of the walk was abandoned."""

    bucket: str
    key: str
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class SourceNotFound:
    """The local directory to publish does not exist."""

    path: Path


PublishError = BucketNotFound | UploadFailure | SourceNotFound
