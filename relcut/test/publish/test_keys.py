from __future__ import annotations

from pathlib import PurePosixPath, PureWindowsPath

import pytest

from relcut.publish.keys import build_key_prefix, object_key


@pytest.mark.parametrize(
    ("prefix", "version", "classifier", "expected"),
    [
        ("midi-studio", "1.2.3", "linux-x64", "midi-studio/1.2.3/linux-x64"),
        ("/midi-studio/", "1.2.3", "linux-x64", "midi-studio/1.2.3/linux-x64"),
        ("", "1.2.3", "windows-x64", "1.2.3/windows-x64"),
        ("releases/app", "2.0-SNAPSHOT", "macos-arm64", "releases/app/2.0-SNAPSHOT/macos-arm64"),
        ("  ", "", "", ""),
    ],
)
def test_build_key_prefix(prefix: str, version: str, classifier: str, expected: str) -> None:
    assert build_key_prefix(prefix, version, classifier) == expected


def test_object_key_joins_relative_path() -> None:
    key = object_key("app/1.2.3/linux-x64", PurePosixPath("deb/app_1.2.3_amd64.deb"))
    assert key == "app/1.2.3/linux-x64/deb/app_1.2.3_amd64.deb"


def test_object_key_uses_forward_slashes() -> None:
    key = object_key("app/1.2.3/windows-x64", PureWindowsPath("msi\\app-1.2.3.msi"))
    assert key == "app/1.2.3/windows-x64/msi/app-1.2.3.msi"


def test_object_key_without_prefix() -> None:
    assert object_key("", PurePosixPath("app.dmg")) == "app.dmg"
