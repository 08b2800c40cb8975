from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from importlib import resources
import logging
from pathlib import Path
import shutil
import stat
import tempfile
from typing import BinaryIO

from .cleanup import ScratchRegistry, scratch_registry
from .exceptions import ArtifactNotFoundError, ExtractionError
from .platforms import PlatformTarget, describe

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "embedded-redis-"


def resource_key(version: str, target: PlatformTarget) -> str:
    descriptor = describe(target)
    return f"{version}/{descriptor.resource_segment}/{descriptor.executable_name}"


@dataclass(frozen=True, slots=True)
class ResolvedArtifact:
    executable: Path
    scratch_dir: Path


class ArtifactSource(ABC):
    @abstractmethod
    def open(self, version: str, target: PlatformTarget) -> BinaryIO:
        """Open the redis-server bytes for ``version`` on ``target``."""
        raise NotImplementedError


class PackageArtifactSource(ArtifactSource):
    """Executables shipped as package data under ``<package>/<root>/``."""

    def __init__(self, package: str = "embedded_redis", root: str = "binaries") -> None:
        self.package = package
        self.root = root

    def open(self, version: str, target: PlatformTarget) -> BinaryIO:
        key = resource_key(version, target)
        try:
            resource = resources.files(self.package).joinpath(self.root)
            for part in key.split("/"):
                resource = resource.joinpath(part)
            if not resource.is_file():
                raise ArtifactNotFoundError(
                    f"No bundled redis-server for {key} in package {self.package}."
                )
            return resource.open("rb")
        except (ModuleNotFoundError, FileNotFoundError) as exc:
            raise ArtifactNotFoundError(
                f"No bundled redis-server for {key} in package {self.package}."
            ) from exc


class DirectoryArtifactSource(ArtifactSource):
    """Executables laid out as ``<root>/<version>/<platform>/<name>`` on disk."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def open(self, version: str, target: PlatformTarget) -> BinaryIO:
        key = resource_key(version, target)
        path = self.root.joinpath(*key.split("/"))
        if not path.is_file():
            raise ArtifactNotFoundError(f"No redis-server for {key} under {self.root}.")
        return path.open("rb")


def extract_executable(
    source: ArtifactSource,
    version: str,
    target: PlatformTarget,
    scratch_root: Path | None = None,
    registry: ScratchRegistry = scratch_registry,
) -> ResolvedArtifact:
    """Copy the executable into a fresh private directory and mark it executable."""
    descriptor = describe(target)
    try:
        opened = source.open(version, target)
    except OSError as exc:
        raise ExtractionError(
            f"Could not read {resource_key(version, target)}: {exc}"
        ) from exc
    with opened as stream:
        try:
            scratch_dir = Path(
                tempfile.mkdtemp(
                    prefix=SCRATCH_PREFIX,
                    dir=str(scratch_root) if scratch_root is not None else None,
                )
            ).resolve()
        except OSError as exc:
            raise ExtractionError(f"Could not create scratch directory: {exc}") from exc
        registry.register(scratch_dir)

        executable = scratch_dir / descriptor.executable_name
        registry.register(executable)
        try:
            with executable.open("wb") as handle:
                shutil.copyfileobj(stream, handle)
            mode = executable.stat().st_mode
            executable.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as exc:
            raise ExtractionError(
                f"Could not extract {resource_key(version, target)} to {executable}: {exc}"
            ) from exc

    logger.debug("Extracted redis-server %s to %s", version, executable)
    return ResolvedArtifact(executable=executable, scratch_dir=scratch_dir)
