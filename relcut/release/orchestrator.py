"""Release lifecycle: cut a release, advance to the next snapshot, push.

The orchestrator owns the version file and the clone's history for the
duration of one run. There is no locking: two runs against the same clone
can both read the same snapshot version, so CI must serialize release
pipelines.

Side effects of each transition happen in a fixed order: write the version
file, commit it, then (for a release) tag the commit. A commit failure
restores the previous file content; a tag failure leaves the commit in
place and a re-run of ``cut_release`` only adds the missing tag.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relcut.core.result import Err, Ok, Result
from relcut.git.repository import NothingToCommit, TagAlreadyExists, VcsFailure
from relcut.output.console import ConsoleProtocol, Style
from relcut.release.errors import (
    AlreadySnapshot,
    BinaryPublishFailed,
    NotASnapshot,
    PartialRelease,
    ReleaseError,
    UnpushedHistory,
)
from relcut.release.store import VersionStore
from relcut.release.transition import to_next_snapshot, to_release
from relcut.release.version import Version, release_message, snapshot_message


class SourceControl(Protocol):
    """The git operations the orchestrator relies on."""

    def current_branch(self) -> str | None: ...

    def head_sha(self) -> Result[str, VcsFailure]: ...

    def head_subject(self) -> Result[str, VcsFailure]: ...

    def commit(
        self, paths: Sequence[Path], message: str
    ) -> Result[str, VcsFailure | NothingToCommit]: ...

    def tag_target(self, name: str) -> Result[str | None, VcsFailure]: ...

    def tag(self, name: str, message: str) -> Result[None, VcsFailure | TagAlreadyExists]: ...

    def ahead_of_upstream(self) -> Result[int | None, VcsFailure]: ...

    def push(
        self, remote: str, refs: Sequence[str], *, include_tags: bool
    ) -> Result[None, VcsFailure]: ...


BinaryPublishStep = Callable[[Version], Result[None, BinaryPublishFailed]]


@dataclass(frozen=True, slots=True)
class CutResult:
    version: Version
    tag: str
    commit: str | None  # None on dry run
    resumed: bool = False


@dataclass(frozen=True, slots=True)
class AdvanceResult:
    version: Version
    commit: str | None


@dataclass(frozen=True, slots=True)
class ReleaseRun:
    released: CutResult
    next_snapshot: AdvanceResult
    pushed_branch: str | None


class ReleaseOrchestrator:
    """Drives the version file through snapshot -> release -> next snapshot.

    Attributes:
        store: The version file
        git: Gateway to the clone holding the version file
        remote: Remote to push to
        branch: Branch to push (None = current branch)
        dry_run: Print the steps without mutating anything
    """

    def __init__(
        self,
        *,
        store: VersionStore,
        git: SourceControl,
        console: ConsoleProtocol,
        remote: str = "origin",
        branch: str | None = None,
        dry_run: bool = False,
    ) -> None:
        self.store = store
        self.git = git
        self.console = console
        self.remote = remote
        self.branch = branch
        self.dry_run = dry_run

    def cut_release(self) -> Result[CutResult, ReleaseError]:
        """Snapshot -> Released: write, commit and tag ``v<version>``."""
        current = self.store.read()
        if isinstance(current, Err):
            return current
        return self._cut(current.value)

    def advance_snapshot(self) -> Result[AdvanceResult, ReleaseError]:
        """Released -> Snapshot: bump the last component and commit.

        This is also the resume point after a :class:`PartialRelease`.
        """
        current = self.store.read()
        if isinstance(current, Err):
            return current
        return self._advance(current.value)

    def push(self) -> Result[str, ReleaseError]:
        """Push the branch together with the annotated tags it reaches."""
        branch = self.branch or self.git.current_branch()
        if branch is None:
            return Err(
                VcsFailure(
                    command="push",
                    message="HEAD is detached and no branch is configured",
                )
            )

        self.console.print(f"git push --atomic --follow-tags {self.remote} {branch}", Style.DIM)
        if self.dry_run:
            return Ok(branch)

        pushed = self.git.push(self.remote, [branch], include_tags=True)
        if isinstance(pushed, Err):
            return pushed
        return Ok(branch)

    def publish_binaries(self, step: BinaryPublishStep) -> Result[Version, ReleaseError]:
        """Run the binary publish step for the released version on disk.

        This is the resume point when a full run stopped at the publish
        step: the version file is still released, so the next snapshot
        has not been written yet.
        """
        current = self.store.read()
        if isinstance(current, Err):
            return current
        version = current.value
        if version.is_snapshot:
            return Err(AlreadySnapshot(version=version))

        self.console.print(f"publish binaries for {version}", Style.DIM)
        if self.dry_run:
            return Ok(version)
        published = step(version)
        if isinstance(published, Err):
            return published
        return Ok(version)

    def run_release(
        self,
        *,
        publish_binaries: BinaryPublishStep | None = None,
        push: bool = True,
    ) -> Result[ReleaseRun, ReleaseError]:
        """Full run: cut, publish binaries, advance, push.

        Once the cut has succeeded, any later failure is reported as
        :class:`PartialRelease`. A re-run against a released and tagged
        version reports it again instead of cutting twice.
        """
        current = self.store.read()
        if isinstance(current, Err):
            return current
        version = current.value

        if version.is_release:
            tag = version.tag_name()
            target = self.git.tag_target(tag)
            if isinstance(target, Err):
                return target
            if target.value is not None:
                return Err(PartialRelease(version=version, tag=tag))
        else:
            ahead = self.git.ahead_of_upstream()
            if isinstance(ahead, Err):
                return ahead
            if ahead.value:
                branch = self.branch or self.git.current_branch() or "HEAD"
                return Err(UnpushedHistory(branch=branch, ahead=ahead.value))

        cut = self._cut(version)
        if isinstance(cut, Err):
            return cut
        released = cut.value

        if publish_binaries is not None:
            self.console.print(f"publish binaries for {released.version}", Style.DIM)
            if not self.dry_run:
                published = publish_binaries(released.version)
                if isinstance(published, Err):
                    return Err(self._partial(released, published.error))

        if self.dry_run:
            advanced = self._advance(released.version)
        else:
            advanced = self.advance_snapshot()
        if isinstance(advanced, Err):
            return Err(self._partial(released, advanced.error))

        pushed_branch: str | None = None
        if push:
            pushed = self.push()
            if isinstance(pushed, Err):
                return pushed
            pushed_branch = pushed.value

        return Ok(
            ReleaseRun(
                released=released,
                next_snapshot=advanced.value,
                pushed_branch=pushed_branch,
            )
        )

    def _cut(self, current: Version) -> Result[CutResult, ReleaseError]:
        self.console.header(f"Release {current}")
        if current.is_release:
            resumed = self._resume_tag(current)
            if resumed is not None:
                return resumed
            return Err(NotASnapshot(version=current))

        released = to_release(current)
        if isinstance(released, Err):
            return released
        version = released.value
        tag = version.tag_name()
        message = release_message(version)

        # A tag that already exists would conflict with the new commit.
        existing = self.git.tag_target(tag)
        if isinstance(existing, Err):
            return existing
        if existing.value is not None:
            head = self.git.head_sha()
            if isinstance(head, Err):
                return head
            return Err(TagAlreadyExists(name=tag, existing=existing.value, head=head.value))

        commit = self._write_and_commit(current, version, message)
        if isinstance(commit, Err):
            return commit

        self.console.print(f"git tag -a {tag} -m {message!r}", Style.DIM)
        if not self.dry_run:
            tagged = self.git.tag(tag, message)
            if isinstance(tagged, Err):
                return tagged

        self.console.success(f"released {version} ({tag})")
        return Ok(CutResult(version=version, tag=tag, commit=commit.value))

    def _resume_tag(self, current: Version) -> Result[CutResult, ReleaseError] | None:
        """Tag a release commit left untagged by an interrupted cut.

        Returns None when the repository is not in that state.
        """
        tag = current.tag_name()
        message = release_message(current)

        target = self.git.tag_target(tag)
        if isinstance(target, Err):
            return target
        if target.value is not None:
            return None

        subject = self.git.head_subject()
        if isinstance(subject, Err):
            return subject
        if subject.value != message:
            return None

        self.console.warning(f"HEAD is the release commit for {current} but {tag} is missing")
        self.console.print(f"git tag -a {tag} -m {message!r}", Style.DIM)
        if self.dry_run:
            return Ok(CutResult(version=current, tag=tag, commit=None, resumed=True))

        tagged = self.git.tag(tag, message)
        if isinstance(tagged, Err):
            return tagged
        head = self.git.head_sha()
        if isinstance(head, Err):
            return head

        self.console.success(f"tagged {tag}")
        return Ok(CutResult(version=current, tag=tag, commit=head.value, resumed=True))

    def _advance(self, current: Version) -> Result[AdvanceResult, ReleaseError]:
        self.console.header(f"Next snapshot after {current}")
        if current.is_snapshot:
            return Err(AlreadySnapshot(version=current))

        bumped = to_next_snapshot(current)
        if isinstance(bumped, Err):
            return bumped
        version = bumped.value

        commit = self._write_and_commit(current, version, snapshot_message(version))
        if isinstance(commit, Err):
            return commit

        self.console.success(f"now at {version}")
        return Ok(AdvanceResult(version=version, commit=commit.value))

    def _write_and_commit(
        self, current: Version, new: Version, message: str
    ) -> Result[str | None, ReleaseError]:
        path = self.store.path
        self.console.print(f"write {path.name}: {current} -> {new}", Style.DIM)
        self.console.print(f"git commit -m {message!r} -- {path.name}", Style.DIM)
        if self.dry_run:
            return Ok(None)

        previous = self.store.read_raw()
        if isinstance(previous, Err):
            return previous

        written = self.store.write(new)
        if isinstance(written, Err):
            return written

        committed = self.git.commit([path], message)
        match committed:
            case Ok(sha):
                return Ok(sha)
            case Err(VcsFailure(command="rev-parse HEAD")):
                # The commit exists; only reading its sha back failed.
                return committed
            case Err(_):
                # No commit was made: put the previous content back.
                restored = self.store.write_raw(previous.value)
                if isinstance(restored, Err):
                    self.console.error(f"could not restore {path}: {restored.error.reason}")
                return committed

    def _partial(
        self,
        released: CutResult,
        cause: ReleaseError,
    ) -> PartialRelease:
        if isinstance(cause, PartialRelease):
            return cause
        return PartialRelease(version=released.version, tag=released.tag, cause=cause)
