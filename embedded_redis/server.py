from __future__ import annotations

import logging
from pathlib import Path
import threading
from typing import Pattern

from .artifacts import ArtifactSource, PackageArtifactSource, ResolvedArtifact, extract_executable
from .exceptions import (
    AlreadyRunningError,
    ConfigurationError,
    ProcessExitedBeforeReadyError,
    ReadinessTimeoutError,
    ServerStoppedError,
)
from .models import DEFAULT_REDIS_VERSION, LifecycleState, ServerConfig
from .platforms import PlatformTarget, current_platform
from .ports import allocate_free_port
from .process import ServerProcess, build_command
from .readiness import READY_PATTERN, LineHandler, ReadinessOutcome

logger = logging.getLogger(__name__)

DEFAULT_STARTUP_TIMEOUT = 30.0
DEFAULT_STOP_TIMEOUT = 10.0


def _check_timeout(name: str, value: float | None) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigurationError(
            f"{name} must be a non-negative number or None, got {value!r}."
        )
    return float(value)


class RedisServer:
    """A disposable redis-server child process.

    The executable is extracted and the port fixed when the object is built;
    ``start()`` launches the process and blocks until it prints its ready
    line, and ``stop()`` terminates it and waits for the exit. A stopped
    server cannot be started again: build a new one instead.
    """

    def __init__(
        self,
        version: str | None = None,
        port: int | None = None,
        password: str | None = None,
        *,
        artifact_source: ArtifactSource | None = None,
        platform: PlatformTarget | None = None,
        startup_timeout: float | None = DEFAULT_STARTUP_TIMEOUT,
        stop_timeout: float | None = DEFAULT_STOP_TIMEOUT,
        ready_pattern: Pattern[str] | str = READY_PATTERN,
        log_handler: LineHandler | None = None,
        scratch_root: Path | None = None,
    ) -> None:
        self.platform = platform or current_platform()
        self.config = ServerConfig(
            port=port if port is not None else allocate_free_port(),
            version=version if version is not None else DEFAULT_REDIS_VERSION,
            password=password,
        )
        self.startup_timeout = _check_timeout("startup_timeout", startup_timeout)
        self.stop_timeout = _check_timeout("stop_timeout", stop_timeout)
        self.ready_pattern = ready_pattern
        self._log_handler = log_handler
        self._artifact: ResolvedArtifact = extract_executable(
            source=artifact_source or PackageArtifactSource(),
            version=self.config.version,
            target=self.platform,
            scratch_root=scratch_root,
        )
        self._lock = threading.Lock()
        self._state = LifecycleState.IDLE
        self._process: ServerProcess | None = None
        self._last_output: list[str] = []

    def __repr__(self) -> str:
        return (
            f"RedisServer(version={self.version!r}, port={self.port}, "
            f"state={self._state.value})"
        )

    def __enter__(self) -> RedisServer:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:  # noqa: ANN001
        self.stop()
        return False

    @property
    def port(self) -> int:
        return self.config.port

    @property
    def version(self) -> str:
        return self.config.version

    @property
    def password(self) -> str | None:
        return self.config.password

    @property
    def executable(self) -> Path:
        return self._artifact.executable

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is LifecycleState.RUNNING

    @property
    def pid(self) -> int | None:
        process = self._process
        if process is None or not process.is_running():
            return None
        return process.pid

    @property
    def recent_lines(self) -> list[str]:
        process = self._process
        return process.recent_lines if process is not None else list(self._last_output)

    def wait(self, timeout: float | None = None) -> int | None:
        """Block until the child exits on its own; None if it was never started."""
        process = self._process
        if process is None:
            return None
        return process.wait(timeout=timeout)

    def command(self) -> list[str]:
        return build_command(self.executable, self.port, self.password)

    def start(self) -> None:
        with self._lock:
            if self._state is LifecycleState.RUNNING:
                raise AlreadyRunningError(
                    f"redis-server on port {self.port} is already running."
                )
            if self._state is LifecycleState.STOPPED:
                raise ServerStoppedError(
                    f"redis-server on port {self.port} was stopped; create a new RedisServer."
                )

            self._state = LifecycleState.STARTING
            try:
                process = ServerProcess.launch(
                    command=self.command(),
                    cwd=self.executable.parent,
                    log_handler=self._log_handler,
                )
                self._await_ready(process)
            except BaseException:
                self._state = LifecycleState.IDLE
                raise

            process.start_pump()
            self._process = process
            self._state = LifecycleState.RUNNING
            logger.info(
                "redis-server %s ready on port %d (pid %d)",
                self.version,
                self.port,
                process.pid,
            )

    def _await_ready(self, process: ServerProcess) -> None:
        try:
            result = process.await_ready(
                timeout=self.startup_timeout,
                pattern=self.ready_pattern,
            )
        except BaseException:
            process.terminate(timeout=self.stop_timeout)
            raise
        if result.ready:
            return

        process.terminate(timeout=self.stop_timeout)
        output = process.recent_lines
        logger.warning(
            "redis-server on port %d did not become ready (%s)",
            self.port,
            result.outcome.value,
        )
        if result.outcome is ReadinessOutcome.TIMED_OUT:
            raise ReadinessTimeoutError(
                f"redis-server on port {self.port} was not ready after "
                f"{self.startup_timeout}s.",
                output=output,
            )
        raise ProcessExitedBeforeReadyError(
            f"redis-server on port {self.port} exited before accepting connections.",
            output=output,
        )

    def stop(self) -> None:
        with self._lock:
            if self._state is not LifecycleState.RUNNING or self._process is None:
                return
            code = self._process.terminate(timeout=self.stop_timeout)
            self._last_output = self._process.recent_lines
            self._process = None
            self._state = LifecycleState.STOPPED
            logger.info("redis-server on port %d stopped with code %s", self.port, code)
