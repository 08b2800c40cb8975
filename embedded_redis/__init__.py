import logging

from .artifacts import (
    ArtifactSource,
    DirectoryArtifactSource,
    PackageArtifactSource,
    ResolvedArtifact,
    extract_executable,
)
from .exceptions import (
    AlreadyRunningError,
    ArtifactNotFoundError,
    ConfigurationError,
    EmbeddedRedisError,
    ExtractionError,
    LaunchError,
    ProcessExitedBeforeReadyError,
    ReadinessTimeoutError,
    ServerNotReadyError,
    ServerStoppedError,
    UnsupportedPlatformError,
)
from .models import DEFAULT_REDIS_VERSION, LifecycleState, ServerConfig
from .platforms import PlatformTarget, current_platform
from .ports import allocate_free_port
from .server import RedisServer

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AlreadyRunningError",
    "ArtifactNotFoundError",
    "ArtifactSource",
    "ConfigurationError",
    "DEFAULT_REDIS_VERSION",
    "DirectoryArtifactSource",
    "EmbeddedRedisError",
    "ExtractionError",
    "LaunchError",
    "LifecycleState",
    "PackageArtifactSource",
    "PlatformTarget",
    "ProcessExitedBeforeReadyError",
    "ReadinessTimeoutError",
    "RedisServer",
    "ResolvedArtifact",
    "ServerConfig",
    "ServerNotReadyError",
    "ServerStoppedError",
    "UnsupportedPlatformError",
    "allocate_free_port",
    "current_platform",
    "extract_executable",
]
