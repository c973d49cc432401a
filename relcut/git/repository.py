"""Git repository gateway for release commits, tags and pushes.

All operations shell out to ``git -C <root>`` through
:func:`relcut.platform.process.run` and return Result types.

Usage:
    repo = Repository(Path("/path/to/clone"))

    match repo.commit([Path("version.txt")], "Release version 1.2.3"):
        case Ok(sha):
            print(f"committed {sha}")
        case Err(NothingToCommit()):
            print("version file unchanged")
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from relcut.core.result import Err, Ok, Result
from relcut.platform.process import ProcessError
from relcut.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = [
    "GitError",
    "NothingToCommit",
    "Repository",
    "StatusEntry",
    "TagAlreadyExists",
    "VcsFailure",
]


@dataclass(frozen=True, slots=True)
class VcsFailure:
    """A git command failed (non-zero exit, timeout, network error).

    Attributes:
        command: The git subcommand that failed (e.g. "push")
        message: Error message (stderr, or a summary)
        returncode: Process return code
        repo: Repository root the command ran in
    """

    command: str
    message: str
    returncode: int = 1
    repo: Path | None = None


@dataclass(frozen=True, slots=True)
class NothingToCommit:
    """None of the requested paths has a tracked change."""

    paths: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TagAlreadyExists:
    """The tag name is bound to a commit other than HEAD."""

    name: str
    existing: str
    head: str


GitError = VcsFailure | NothingToCommit | TagAlreadyExists


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single ``git status --porcelain`` entry.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path relative to the repository root
    """

    xy: str
    path: str

    @property
    def is_tracked_change(self) -> bool:
        """True for modifications git can commit by path."""
        return self.xy not in ("??", "!!")


class Repository:
    """Git repository abstraction for one clone.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def current_branch(self) -> str | None:
        """Current branch name, None on detached HEAD or error."""
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def head_sha(self) -> Result[str, VcsFailure]:
        result = self._run(["rev-parse", "--verify", "HEAD^{commit}"])
        match result:
            case Err(e):
                return Err(self._failure("rev-parse HEAD", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def head_subject(self) -> Result[str, VcsFailure]:
        """First line of the HEAD commit message."""
        result = self._run(["log", "-1", "--format=%s", "HEAD"])
        match result:
            case Err(e):
                return Err(self._failure("log", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def changes(self, paths: Sequence[Path]) -> Result[list[StatusEntry], VcsFailure]:
        """Status entries limited to ``paths``."""
        result = self._run(["status", "--porcelain=v1", "--", *self._pathspecs(paths)])
        match result:
            case Err(e):
                return Err(self._failure("status", e))
            case Ok(stdout):
                entries = [self._parse_entry(ln) for ln in stdout.splitlines()]
                return Ok([e for e in entries if e is not None])

    def commit(
        self, paths: Sequence[Path], message: str
    ) -> Result[str, VcsFailure | NothingToCommit]:
        """Commit the current content of ``paths`` and return the new HEAD sha.

        Only the listed paths are committed, whatever else is staged. A
        ``VcsFailure`` with command ``"rev-parse HEAD"`` means the commit was
        made but its sha could not be read back.
        """
        specs = self._pathspecs(paths)
        changes = self.changes(paths)
        if isinstance(changes, Err):
            return changes
        if not any(entry.is_tracked_change for entry in changes.value):
            return Err(NothingToCommit(paths=tuple(specs)))

        result = self._run(["commit", "-m", message, "--", *specs])
        if isinstance(result, Err):
            return Err(self._failure("commit", result.error))
        return self.head_sha()

    def tag_target(self, name: str) -> Result[str | None, VcsFailure]:
        """Commit sha a tag points at (annotated tags are peeled), None if absent."""
        ref = f"refs/tags/{name}"
        result = self._run(
            ["for-each-ref", "--format=%(refname) %(objectname) %(*objectname)", ref]
        )
        if isinstance(result, Err):
            return Err(self._failure("for-each-ref", result.error))

        for line in result.value.splitlines():
            parts = line.split()
            if not parts or parts[0] != ref:
                continue
            # Annotated tags report the peeled commit third; lightweight ones do not.
            return Ok(parts[2] if len(parts) > 2 else parts[1])
        return Ok(None)

    def tag(self, name: str, message: str) -> Result[None, VcsFailure | TagAlreadyExists]:
        """Create an annotated tag on HEAD.

        Re-tagging the same commit is a no-op so an interrupted release can
        be resumed; a tag bound to any other commit is a conflict.
        """
        head = self.head_sha()
        if isinstance(head, Err):
            return head
        existing = self.tag_target(name)
        if isinstance(existing, Err):
            return existing

        if existing.value is not None:
            if existing.value == head.value:
                return Ok(None)
            return Err(TagAlreadyExists(name=name, existing=existing.value, head=head.value))

        result = self._run(["tag", "-a", name, "-m", message])
        if isinstance(result, Err):
            return Err(self._failure("tag", result.error))
        return Ok(None)

    def ahead_of_upstream(self) -> Result[int | None, VcsFailure]:
        """Commits on HEAD not on its upstream; None when no upstream is set."""
        upstream = self._run(["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"])
        if isinstance(upstream, Err):
            return Ok(None)

        result = self._run(["rev-list", "--count", "@{u}..HEAD"])
        match result:
            case Err(e):
                return Err(self._failure("rev-list", e))
            case Ok(stdout):
                try:
                    return Ok(int(stdout.strip() or "0"))
                except ValueError:
                    return Err(
                        VcsFailure(
                            command="rev-list",
                            message=f"unexpected output: {stdout.strip()}",
                            repo=self.path,
                        )
                    )

    def push(
        self,
        remote: str,
        refs: Sequence[str],
        *,
        include_tags: bool,
    ) -> Result[None, VcsFailure]:
        """Push ``refs`` atomically; ``include_tags`` adds ``--follow-tags``.

        Never retried here: after an unknown partial push a retry could
        publish commits twice.
        """
        args = ["push", "--atomic"]
        if include_tags:
            args.append("--follow-tags")
        args.extend([remote, *refs])

        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._failure("push", result.error))
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)

    def _failure(self, command: str, error: ProcessError) -> VcsFailure:
        return VcsFailure(
            command=command,
            message=error.detail or f"git {command} failed",
            returncode=error.returncode,
            repo=self.path,
        )

    def _pathspecs(self, paths: Sequence[Path]) -> list[str]:
        specs: list[str] = []
        for p in paths:
            if p.is_absolute():
                try:
                    p = p.relative_to(self.path)
                except ValueError:
                    pass
            specs.append(p.as_posix())
        return specs

    def _parse_entry(self, line: str) -> StatusEntry | None:
        """Parse one porcelain v1 line: ``XY path``."""
        if len(line) < 4:
            return None
        return StatusEntry(xy=line[:2], path=line[3:])
