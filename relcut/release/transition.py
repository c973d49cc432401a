"""Pure version transitions: snapshot -> release -> next snapshot."""

from __future__ import annotations

from dataclasses import replace

from relcut.core.result import Err, Ok, Result
from relcut.release.errors import AlreadySnapshot, NotASnapshot
from relcut.release.version import Version


def to_release(version: Version) -> Result[Version, NotASnapshot]:
    """Strip the snapshot marker, keeping every numeric component."""
    if not version.is_snapshot:
        return Err(NotASnapshot(version=version))
    return Ok(replace(version, snapshot=False))


def to_next_snapshot(version: Version) -> Result[Version, AlreadySnapshot]:
    """Bump the last component by one and re-add the snapshot marker.

    There is no carrying: ``1.9`` becomes ``1.10-SNAPSHOT``.
    """
    if version.is_snapshot:
        return Err(AlreadySnapshot(version=version))
    *head, last = version.components
    return Ok(Version(components=(*head, last + 1), snapshot=True))
