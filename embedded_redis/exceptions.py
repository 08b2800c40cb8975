class EmbeddedRedisError(Exception):
    """Base exception for embedded_redis."""


class ConfigurationError(EmbeddedRedisError):
    """Raised when server settings are invalid."""


class UnsupportedPlatformError(ConfigurationError):
    """Raised when the host OS has no matching redis-server build."""


class ArtifactNotFoundError(EmbeddedRedisError):
    """Raised when no executable is bundled for a version/platform pair."""


class ExtractionError(EmbeddedRedisError):
    """Raised when the executable cannot be written to its scratch directory."""


class AlreadyRunningError(EmbeddedRedisError):
    """Raised when start() is called on a running server."""


class ServerStoppedError(EmbeddedRedisError):
    """Raised when start() is called on a server that was already stopped."""


class LaunchError(EmbeddedRedisError):
    """Raised when the redis-server process cannot be spawned."""


class ServerNotReadyError(EmbeddedRedisError):
    """Raised when redis-server never reported that it accepts connections."""

    def __init__(self, message: str, output: list[str] | None = None) -> None:
        super().__init__(message)
        self.output = list(output or [])


class ProcessExitedBeforeReadyError(ServerNotReadyError):
    """Raised when redis-server closed its output before becoming ready."""


class ReadinessTimeoutError(ServerNotReadyError):
    """Raised when redis-server did not become ready within the startup timeout."""
