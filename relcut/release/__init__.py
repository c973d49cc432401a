"""Version lifecycle: version file, transitions and the release orchestrator.

Usage:
    from relcut.release import ReleaseOrchestrator, VersionStore

    orchestrator = ReleaseOrchestrator(
        store=VersionStore(root / "version.txt"),
        git=Repository(root),
        console=RichConsole(),
    )
    orchestrator.run_release()
"""

from __future__ import annotations

from relcut.release.errors import (
    AlreadySnapshot,
    BinaryPublishFailed,
    MalformedVersion,
    MissingVersionFile,
    NotASnapshot,
    PartialRelease,
    ReadFailure,
    ReleaseError,
    UnpushedHistory,
    WriteFailure,
)
from relcut.release.orchestrator import (
    AdvanceResult,
    CutResult,
    ReleaseOrchestrator,
    ReleaseRun,
    SourceControl,
)
from relcut.release.store import VersionStore
from relcut.release.transition import to_next_snapshot, to_release
from relcut.release.version import Version, parse_version, repository_key

__all__ = [
    "AdvanceResult",
    "AlreadySnapshot",
    "BinaryPublishFailed",
    "CutResult",
    "MalformedVersion",
    "MissingVersionFile",
    "NotASnapshot",
    "PartialRelease",
    "ReadFailure",
    "ReleaseError",
    "ReleaseOrchestrator",
    "ReleaseRun",
    "SourceControl",
    "UnpushedHistory",
    "Version",
    "VersionStore",
    "WriteFailure",
    "parse_version",
    "repository_key",
    "to_next_snapshot",
    "to_release",
]
