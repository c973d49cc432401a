"""Object key scheme for packaged outputs.

Keys look like ``<prefix>/<buildVersion>/<classifier>/<relative/path>``.
The same inputs always produce the same key, so re-running an upload
overwrites objects instead of adding new ones.
"""

from __future__ import annotations

from pathlib import PurePath


def _segment(value: str) -> str:
    return value.strip().strip("/")


def build_key_prefix(prefix: str, build_version: str, classifier: str) -> str:
    """Join the non-empty segments of a per-build, per-platform key prefix."""
    parts = [_segment(p) for p in (prefix, build_version, classifier)]
    return "/".join(p for p in parts if p)


def object_key(key_prefix: str, relative_path: PurePath) -> str:
    """``key_prefix + "/" + relative_path`` with forward slashes."""
    rel = relative_path.as_posix()
    base = _segment(key_prefix)
    if not base:
        return rel
    return f"{base}/{rel}"
