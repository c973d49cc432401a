"""Error presentation utilities.

Centralized error messages, hints and exit code mapping for release and
publish failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relcut.core.errors import ErrorCode
from relcut.git.repository import NothingToCommit, TagAlreadyExists, VcsFailure
from relcut.output.console import Style
from relcut.publish.errors import BucketNotFound, PublishError, SourceNotFound, UploadFailure
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

if TYPE_CHECKING:
    from relcut.output.console import ConsoleProtocol

__all__ = ["describe_error", "error_exit_code", "error_hint", "print_error"]

AnyError = ReleaseError | PublishError


def describe_error(error: AnyError) -> str:
    """One-line description naming the failed step and resource."""
    match error:
        case MissingVersionFile(path=path):
            return f"version file not found: {path}"
        case MalformedVersion(path=path, text=text):
            return f"malformed version in {path}: {text!r}"
        case ReadFailure(path=path, reason=reason):
            return f"failed to read {path}: {reason}"
        case WriteFailure(path=path, reason=reason):
            return f"failed to write {path}: {reason}"
        case NotASnapshot(version=version):
            return f"version {version} is not a snapshot version"
        case AlreadySnapshot(version=version):
            return f"version {version} is already a snapshot version"
        case UnpushedHistory(branch=branch, ahead=ahead):
            return f"{branch} is {ahead} commit(s) ahead of its upstream"
        case BinaryPublishFailed(version=version, error=e):
            return f"binary publish failed for {version}: {e}"
        case PartialRelease(version=version, tag=tag, cause=None):
            return f"{version} is released and tagged {tag} but the next snapshot is missing"
        case PartialRelease(version=version, tag=tag, cause=cause):
            return (
                f"{version} is released and tagged {tag} but the run stopped: "
                f"{describe_error(cause)}"
            )
        case VcsFailure(command=command, message=message, returncode=rc):
            return f"git {command} failed (exit {rc}): {message}"
        case NothingToCommit(paths=paths):
            return f"nothing to commit in {', '.join(paths)}"
        case TagAlreadyExists(name=name, existing=existing, head=head):
            return f"tag {name} already points at {existing[:12]}, not HEAD {head[:12]}"
        case BucketNotFound(bucket=bucket, reason=reason):
            return f"bucket {bucket} not found: {reason}"
        case UploadFailure(bucket=bucket, key=key, reason=reason):
            return f"upload to s3://{bucket}/{key} failed: {reason}"
        case SourceNotFound(path=path):
            return f"directory not found: {path}"
    return str(error)


def error_hint(error: AnyError) -> str | None:
    match error:
        case PartialRelease(cause=BinaryPublishFailed()):
            return (
                "Run: relcut release publish-binaries, then relcut release advance, "
                "then relcut release push"
            )
        case PartialRelease():
            return "Run: relcut release advance, then relcut release push"
        case BinaryPublishFailed():
            return "Fix the publish command, then re-run: relcut release publish-binaries"
        case UnpushedHistory():
            return "A previous run was not pushed. Inspect the history, then: relcut release push"
        case NothingToCommit():
            return "The version file matches HEAD; check that it is tracked by git"
        case TagAlreadyExists():
            return "Tags are never moved; bump the version or delete the tag by hand"
        case VcsFailure(command="push"):
            return "Pushes are not retried automatically; push by hand once the remote is fixed"
        case UploadFailure():
            return "Re-running the publish overwrites objects already uploaded"
        case NotASnapshot() | AlreadySnapshot():
            return "Check the version file against the release state"
        case _:
            return None


def error_exit_code(error: AnyError) -> int:
    match error:
        case MalformedVersion():
            return int(ErrorCode.USER_ERROR)
        case MissingVersionFile() | ReadFailure() | WriteFailure() | SourceNotFound():
            return int(ErrorCode.IO_ERROR)
        case NotASnapshot() | AlreadySnapshot() | UnpushedHistory():
            return int(ErrorCode.STATE_ERROR)
        case PartialRelease():
            return int(ErrorCode.PARTIAL_RELEASE)
        case VcsFailure() | NothingToCommit() | TagAlreadyExists():
            return int(ErrorCode.VCS_ERROR)
        case BinaryPublishFailed() | BucketNotFound() | UploadFailure():
            return int(ErrorCode.NETWORK_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)


def print_error(error: AnyError, console: ConsoleProtocol) -> None:
    console.error(describe_error(error))
    hint = error_hint(error)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)
