from __future__ import annotations

import pytest

from relcut.core.config import MavenConfig
from relcut.release.version import (
    Version,
    parse_version,
    release_message,
    repository_key,
    snapshot_message,
)


def test_parse_snapshot_version() -> None:
    assert parse_version("1.2.3-SNAPSHOT") == Version((1, 2, 3), snapshot=True)


def test_parse_release_version() -> None:
    assert parse_version("1.2.3") == Version((1, 2, 3))
    assert parse_version("0") == Version((0,))


def test_parse_ignores_surrounding_whitespace() -> None:
    assert parse_version("  4.5\n") == Version((4, 5))


@pytest.mark.parametrize(
    "text",
    [
        "",
        "v1.2.3",
        "1.2.x",
        "1..2",
        "1.2.",
        ".1",
        "01.2",
        "1.2-snapshot",
        "1.2-SNAPSHOT-SNAPSHOT",
        "1.2 3",
    ],
)
def test_parse_rejects_malformed(text: str) -> None:
    assert parse_version(text) is None


def test_version_needs_components() -> None:
    with pytest.raises(ValueError):
        Version(())


def test_str_and_tag_name() -> None:
    v = Version((1, 2, 3), snapshot=True)
    assert str(v) == "1.2.3-SNAPSHOT"
    assert v.numeric == "1.2.3"
    assert v.tag_name() == "v1.2.3"
    assert str(Version((10,))) == "10"


def test_repository_key_follows_snapshot_state() -> None:
    maven = MavenConfig()
    assert repository_key(Version((1, 0), snapshot=True), maven) == "libs-snapshot-local"
    assert repository_key(Version((1, 0)), maven) == "libs-release-local"

    custom = MavenConfig(snapshot_repository="snap", release_repository="rel")
    assert repository_key(Version((1, 0)), custom) == "rel"


def test_commit_messages() -> None:
    assert release_message(Version((1, 2, 3))) == "Release version 1.2.3"
    assert (
        snapshot_message(Version((1, 2, 4), snapshot=True))
        == "Switch to next snapshot version 1.2.4-SNAPSHOT"
    )
