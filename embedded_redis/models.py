from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import ConfigurationError

DEFAULT_REDIS_VERSION = "2.8.9"
MIN_PORT = 1
MAX_PORT = 65535


class LifecycleState(Enum):
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class ServerConfig:
    port: int
    version: str = DEFAULT_REDIS_VERSION
    password: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.version, str) or not self.version.strip():
            raise ConfigurationError("Redis version cannot be empty.")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ConfigurationError(f"Port must be an integer, got {self.port!r}.")
        if not MIN_PORT <= self.port <= MAX_PORT:
            raise ConfigurationError(
                f"Port {self.port} is outside the range {MIN_PORT}-{MAX_PORT}."
            )
        if self.password is not None and not isinstance(self.password, str):
            raise ConfigurationError("Password must be a string.")
        if self.password and any(char in self.password for char in ("\x00", "\r", "\n")):
            raise ConfigurationError("Password contains unsupported characters.")

    @property
    def requires_password(self) -> bool:
        return bool(self.password)
