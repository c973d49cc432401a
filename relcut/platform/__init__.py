"""Platform abstraction layer."""

from .detection import Arch, Platform, detect_arch, detect_platform, platform_classifier
from .process import ProcessError, run

__all__ = [
    # detection
    "Arch",
    "Platform",
    "detect_arch",
    "detect_platform",
    "platform_classifier",
    # process
    "ProcessError",
    "run",
]
