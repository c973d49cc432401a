from __future__ import annotations

import os
from pathlib import Path

import pytest

from relcut.core.result import Err, Ok
from relcut.release.errors import MalformedVersion, MissingVersionFile, ReadFailure, WriteFailure
from relcut.release.store import VersionStore
from relcut.release.version import Version


def test_read_version(tmp_path: Path) -> None:
    path = tmp_path / "version.txt"
    path.write_text("1.2.3-SNAPSHOT\n", encoding="utf-8")

    assert VersionStore(path).read() == Ok(Version((1, 2, 3), snapshot=True))


def test_read_missing_file(tmp_path: Path) -> None:
    path = tmp_path / "version.txt"

    assert VersionStore(path).read() == Err(MissingVersionFile(path=path))


def test_read_malformed(tmp_path: Path) -> None:
    path = tmp_path / "version.txt"
    path.write_text("1.2.3-beta\n", encoding="utf-8")

    assert VersionStore(path).read() == Err(MalformedVersion(path=path, text="1.2.3-beta"))


def test_read_empty_file_is_malformed(tmp_path: Path) -> None:
    path = tmp_path / "version.txt"
    path.write_text("", encoding="utf-8")

    result = VersionStore(path).read()
    assert isinstance(result, Err)
    assert isinstance(result.error, MalformedVersion)


def test_read_invalid_utf8_is_malformed(tmp_path: Path) -> None:
    path = tmp_path / "version.txt"
    path.write_bytes(b"1.2.\xff-SNAPSHOT")

    result = VersionStore(path).read()

    assert result == Err(MalformedVersion(path=path, text="1.2.\ufffd-SNAPSHOT"))


def test_read_unreadable_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "version.txt"
    path.write_text("1.2.3\n", encoding="utf-8")

    def deny(self: Path, *args: object, **kwargs: object) -> None:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "open", deny)
    result = VersionStore(path).read()

    assert isinstance(result, Err)
    assert isinstance(result.error, ReadFailure)
    assert "Permission denied" in result.error.reason


def test_write_without_trailing_newline(tmp_path: Path) -> None:
    path = tmp_path / "version.txt"
    path.write_text("1.2.3-SNAPSHOT", encoding="utf-8")

    assert VersionStore(path).write(Version((1, 2, 3))) == Ok(None)
    assert path.read_text(encoding="utf-8") == "1.2.3"


def test_write_keeps_trailing_newline(tmp_path: Path) -> None:
    path = tmp_path / "version.txt"
    path.write_text("1.2.3\n", encoding="utf-8")

    VersionStore(path).write(Version((1, 2, 4), snapshot=True))

    assert path.read_text(encoding="utf-8") == "1.2.4-SNAPSHOT\n"


def test_write_leaves_no_temp_files(tmp_path: Path) -> None:
    path = tmp_path / "version.txt"
    path.write_text("1.0", encoding="utf-8")

    VersionStore(path).write(Version((1, 1), snapshot=True))

    assert sorted(p.name for p in tmp_path.iterdir()) == ["version.txt"]


def test_write_failure_keeps_previous_content(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "version.txt"
    path.write_text("1.0-SNAPSHOT", encoding="utf-8")

    def fail_replace(_src: Path, _dst: Path) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", fail_replace)

    result = VersionStore(path).write(Version((1, 0)))

    assert isinstance(result, Err)
    assert result.error == WriteFailure(path=path, reason="replace failed")
    assert path.read_text(encoding="utf-8") == "1.0-SNAPSHOT"
    assert list(tmp_path.glob(".version.txt.*.tmp")) == []


def test_raw_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "version.txt"
    path.write_text("2.0-SNAPSHOT\r\n", encoding="utf-8")
    store = VersionStore(path)

    raw = store.read_raw()
    assert isinstance(raw, Ok)
    store.write(Version((2, 0)))
    store.write_raw(raw.value)

    assert path.read_bytes() == b"2.0-SNAPSHOT\r\n"
