"""Tests for git/repository.py."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any
from unittest.mock import patch

from relcut.core.result import Err, Ok
from relcut.git.repository import (
    NothingToCommit,
    Repository,
    StatusEntry,
    TagAlreadyExists,
    VcsFailure,
)


def make_completed_process(
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> subprocess.CompletedProcess[str]:
    """Create a mock CompletedProcess."""
    return subprocess.CompletedProcess(
        args=["git"],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


class FakeGitProcess:
    """Answers ``git -C <root> <sub> ...`` calls by subcommand."""

    def __init__(self, answers: dict[str, subprocess.CompletedProcess[str]]) -> None:
        self.answers = answers
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        del kwargs
        self.calls.append(cmd)
        sub = cmd[3]
        if sub == "rev-parse" and "@{u}" in cmd:
            return self.answers.get("upstream", make_completed_process("origin/master\n"))
        return self.answers.get(sub, make_completed_process())

    def subcommands(self) -> list[str]:
        return [c[3] for c in self.calls]


# =============================================================================
# StatusEntry Tests
# =============================================================================


class TestStatusEntry:
    def test_modified_is_tracked_change(self) -> None:
        assert StatusEntry(xy=" M", path="version.txt").is_tracked_change is True
        assert StatusEntry(xy="M ", path="version.txt").is_tracked_change is True

    def test_untracked_is_not_tracked_change(self) -> None:
        assert StatusEntry(xy="??", path="version.txt").is_tracked_change is False

    def test_ignored_is_not_tracked_change(self) -> None:
        assert StatusEntry(xy="!!", path="build").is_tracked_change is False


# =============================================================================
# Repository Tests - Mocked subprocess
# =============================================================================


class TestRepository:
    def test_current_branch(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({"rev-parse": make_completed_process("master\n")})
        with patch("subprocess.run", side_effect=fake):
            assert Repository(tmp_path).current_branch() == "master"
        assert fake.calls[0][:3] == ["git", "-C", str(tmp_path)]

    def test_current_branch_detached(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({"rev-parse": make_completed_process("HEAD\n")})
        with patch("subprocess.run", side_effect=fake):
            assert Repository(tmp_path).current_branch() is None

    def test_head_subject(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({"log": make_completed_process("Release version 1.2.3\n")})
        with patch("subprocess.run", side_effect=fake):
            assert Repository(tmp_path).head_subject() == Ok("Release version 1.2.3")

    def test_changes_parses_porcelain(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({"status": make_completed_process(" M version.txt\n?? notes.md\n")})
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).changes([tmp_path / "version.txt"])

        assert result == Ok(
            [StatusEntry(xy=" M", path="version.txt"), StatusEntry(xy="??", path="notes.md")]
        )
        assert fake.calls[0][-2:] == ["--", "version.txt"]


class TestCommit:
    def test_commit_only_the_given_path(self, tmp_path: Path) -> None:
        fake = FakeGitProcess(
            {
                "status": make_completed_process(" M version.txt\n"),
                "rev-parse": make_completed_process("abc123\n"),
            }
        )
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).commit(
                [tmp_path / "version.txt"], "Release version 1.2.3"
            )

        assert result == Ok("abc123")
        commit_call = next(c for c in fake.calls if c[3] == "commit")
        assert commit_call[4:] == ["-m", "Release version 1.2.3", "--", "version.txt"]

    def test_nothing_to_commit(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({"status": make_completed_process("")})
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).commit([tmp_path / "version.txt"], "msg")

        assert result == Err(NothingToCommit(paths=("version.txt",)))
        assert "commit" not in fake.subcommands()

    def test_untracked_file_is_nothing_to_commit(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({"status": make_completed_process("?? version.txt\n")})
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).commit([tmp_path / "version.txt"], "msg")

        assert isinstance(result, Err)
        assert isinstance(result.error, NothingToCommit)

    def test_sha_lookup_failure_after_commit(self, tmp_path: Path) -> None:
        fake = FakeGitProcess(
            {
                "status": make_completed_process(" M version.txt\n"),
                "rev-parse": make_completed_process(stderr="fatal: bad object HEAD", returncode=128),
            }
        )
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).commit([tmp_path / "version.txt"], "msg")

        assert "commit" in fake.subcommands()
        assert isinstance(result, Err)
        assert isinstance(result.error, VcsFailure)
        assert result.error.command == "rev-parse HEAD"

    def test_commit_failure(self, tmp_path: Path) -> None:
        fake = FakeGitProcess(
            {
                "status": make_completed_process(" M version.txt\n"),
                "commit": make_completed_process(
                    stderr="error: gpg failed to sign the data\n", returncode=128
                ),
            }
        )
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).commit([tmp_path / "version.txt"], "msg")

        assert result == Err(
            VcsFailure(
                command="commit",
                message="error: gpg failed to sign the data",
                returncode=128,
                repo=tmp_path,
            )
        )


class TestTag:
    def test_tag_target_absent(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({"for-each-ref": make_completed_process("")})
        with patch("subprocess.run", side_effect=fake):
            assert Repository(tmp_path).tag_target("v1.2.3") == Ok(None)

    def test_tag_target_peels_annotated_tag(self, tmp_path: Path) -> None:
        line = "refs/tags/v1.2.3 tagobj commitsha\n"
        fake = FakeGitProcess({"for-each-ref": make_completed_process(line)})
        with patch("subprocess.run", side_effect=fake):
            assert Repository(tmp_path).tag_target("v1.2.3") == Ok("commitsha")

    def test_tag_target_lightweight_tag(self, tmp_path: Path) -> None:
        line = "refs/tags/v1.2.3 commitsha \n"
        fake = FakeGitProcess({"for-each-ref": make_completed_process(line)})
        with patch("subprocess.run", side_effect=fake):
            assert Repository(tmp_path).tag_target("v1.2.3") == Ok("commitsha")

    def test_tag_creates_annotated_tag(self, tmp_path: Path) -> None:
        fake = FakeGitProcess(
            {
                "rev-parse": make_completed_process("abc123\n"),
                "for-each-ref": make_completed_process(""),
            }
        )
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).tag("v1.2.3", "Release version 1.2.3")

        assert result == Ok(None)
        tag_call = next(c for c in fake.calls if c[3] == "tag")
        assert tag_call[4:] == ["-a", "v1.2.3", "-m", "Release version 1.2.3"]

    def test_tag_on_same_commit_is_noop(self, tmp_path: Path) -> None:
        fake = FakeGitProcess(
            {
                "rev-parse": make_completed_process("abc123\n"),
                "for-each-ref": make_completed_process("refs/tags/v1.2.3 t1 abc123\n"),
            }
        )
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).tag("v1.2.3", "Release version 1.2.3")

        assert result == Ok(None)
        assert "tag" not in fake.subcommands()

    def test_tag_on_other_commit_conflicts(self, tmp_path: Path) -> None:
        fake = FakeGitProcess(
            {
                "rev-parse": make_completed_process("abc123\n"),
                "for-each-ref": make_completed_process("refs/tags/v1.2.3 t1 def456\n"),
            }
        )
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).tag("v1.2.3", "Release version 1.2.3")

        assert result == Err(TagAlreadyExists(name="v1.2.3", existing="def456", head="abc123"))


class TestUpstream:
    def test_ahead_count(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({"rev-list": make_completed_process("2\n")})
        with patch("subprocess.run", side_effect=fake):
            assert Repository(tmp_path).ahead_of_upstream() == Ok(2)

    def test_no_upstream(self, tmp_path: Path) -> None:
        fake = FakeGitProcess(
            {"upstream": make_completed_process(stderr="fatal: no upstream", returncode=128)}
        )
        with patch("subprocess.run", side_effect=fake):
            assert Repository(tmp_path).ahead_of_upstream() == Ok(None)
        assert "rev-list" not in fake.subcommands()


class TestPush:
    def test_push_is_atomic_with_tags(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({})
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).push("origin", ["master"], include_tags=True)

        assert result == Ok(None)
        assert fake.calls[0][3:] == ["push", "--atomic", "--follow-tags", "origin", "master"]

    def test_push_without_tags(self, tmp_path: Path) -> None:
        fake = FakeGitProcess({})
        with patch("subprocess.run", side_effect=fake):
            Repository(tmp_path).push("origin", ["master"], include_tags=False)

        assert fake.calls[0][3:] == ["push", "--atomic", "origin", "master"]

    def test_push_rejected(self, tmp_path: Path) -> None:
        fake = FakeGitProcess(
            {"push": make_completed_process(stderr="! [rejected] (fetch first)\n", returncode=1)}
        )
        with patch("subprocess.run", side_effect=fake):
            result = Repository(tmp_path).push("origin", ["master"], include_tags=True)

        assert isinstance(result, Err)
        assert result.error.command == "push"
        assert "rejected" in result.error.message

    def test_push_uses_network_timeout(self, tmp_path: Path) -> None:
        seen: dict[str, Any] = {}

        def capture(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            del cmd
            seen.update(kwargs)
            return make_completed_process()

        with patch("subprocess.run", side_effect=capture):
            Repository(tmp_path).push("origin", ["master"], include_tags=True)

        assert seen["timeout"] == 180.0
