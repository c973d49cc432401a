"""Host platform detection for artifact classifiers.

Packaged installers are uploaded under a ``<os>-<arch>`` segment so that
builds from different CI agents never collide on the same object key.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from enum import Enum, auto
from functools import lru_cache

__all__ = [
    "Platform",
    "Arch",
    "detect_platform",
    "detect_arch",
    "platform_classifier",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    ARM64 = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()


_MACHINES = {
    "x86_64": Arch.X64,
    "amd64": Arch.X64,
    "aarch64": Arch.ARM64,
    "arm64": Arch.ARM64,
}

_SYSTEMS: tuple[tuple[tuple[str, ...], Platform], ...] = (
    (("linux",), Platform.LINUX),
    (("darwin",), Platform.MACOS),
    (("win32", "cygwin", "msys"), Platform.WINDOWS),
)


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    # NOTE: avoid platform.system() on Windows, it may query WMI.
    system = _sys.platform.lower()
    for prefixes, platform in _SYSTEMS:
        if system.startswith(prefixes):
            return platform
    return Platform.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    if detect_platform() == Platform.WINDOWS:
        env_arch = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
        machine = env_arch.lower()
    else:
        machine = _platform.machine().lower()
    return _MACHINES.get(machine, Arch.UNKNOWN)


def platform_classifier(platform: Platform | None = None, arch: Arch | None = None) -> str:
    """Return the ``<os>-<arch>`` key segment, e.g. ``linux-x64``.

    Defaults to the host platform when arguments are omitted.
    """
    p = platform if platform is not None else detect_platform()
    a = arch if arch is not None else detect_arch()
    return f"{p}-{a}"
