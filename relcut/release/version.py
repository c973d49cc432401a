from __future__ import annotations

import re
from dataclasses import dataclass

from relcut.core.config import MavenConfig


SNAPSHOT_SUFFIX = "-SNAPSHOT"
TAG_PREFIX = "v"

_VERSION_RE = re.compile(r"^((?:0|[1-9]\d*)(?:\.(?:0|[1-9]\d*))*)(-SNAPSHOT)?$")


@dataclass(frozen=True, slots=True)
class Version:
    """Project version: numeric components plus an optional snapshot marker.

    Construct through :func:`parse_version` to get the grammar check; the
    dataclass itself only guards against an empty component sequence.
    """

    components: tuple[int, ...]
    snapshot: bool = False

    def __post_init__(self) -> None:
        if not self.components:
            raise ValueError("version needs at least one numeric component")
        if any(c < 0 for c in self.components):
            raise ValueError(f"negative version component in {self.components}")

    @property
    def is_snapshot(self) -> bool:
        return self.snapshot

    @property
    def is_release(self) -> bool:
        return not self.snapshot

    @property
    def numeric(self) -> str:
        """The numeric part only, e.g. ``1.2.3`` for ``1.2.3-SNAPSHOT``."""
        return ".".join(str(c) for c in self.components)

    def tag_name(self) -> str:
        return f"{TAG_PREFIX}{self.numeric}"

    def __str__(self) -> str:
        return self.numeric + (SNAPSHOT_SUFFIX if self.snapshot else "")


def parse_version(text: str) -> Version | None:
    """Parse ``N(.N)*(-SNAPSHOT)?``; surrounding whitespace is ignored."""
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    components = tuple(int(part) for part in m.group(1).split("."))
    return Version(components=components, snapshot=m.group(2) is not None)


def repository_key(version: Version, maven: MavenConfig) -> str:
    """Binary repository the build for this version is published to."""
    if version.is_snapshot:
        return maven.snapshot_repository
    return maven.release_repository


def release_message(version: Version) -> str:
    return f"Release version {version}"


def snapshot_message(version: Version) -> str:
    return f"Switch to next snapshot version {version}"
