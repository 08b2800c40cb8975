from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
import sys

from .exceptions import UnsupportedPlatformError


class PlatformTarget(Enum):
    WINDOWS = "windows"
    LINUX = "linux"
    MACOSX = "macosx"


@dataclass(frozen=True, slots=True)
class PlatformDescriptor:
    executable_name: str
    resource_segment: str


_DESCRIPTORS: dict[PlatformTarget, PlatformDescriptor] = {
    PlatformTarget.WINDOWS: PlatformDescriptor("redis-server.exe", "windows"),
    PlatformTarget.LINUX: PlatformDescriptor("redis-server", "linux"),
    PlatformTarget.MACOSX: PlatformDescriptor("redis-server", "macosx"),
}


def describe(target: PlatformTarget) -> PlatformDescriptor:
    return _DESCRIPTORS[target]


def platform_for(sys_platform: str) -> PlatformTarget:
    """Map a ``sys.platform`` value to the build that runs there."""
    value = sys_platform.strip().lower()
    if value in {"win32", "cygwin", "msys"}:
        return PlatformTarget.WINDOWS
    if value.startswith("linux"):
        return PlatformTarget.LINUX
    if value == "darwin":
        return PlatformTarget.MACOSX
    raise UnsupportedPlatformError(f"Unsupported os/architecture: {sys_platform}")


@lru_cache(maxsize=None)
def current_platform() -> PlatformTarget:
    return platform_for(sys.platform)
