from __future__ import annotations

from collections import deque
import logging
from pathlib import Path
import subprocess
import threading
from typing import Pattern

from .exceptions import LaunchError
from .readiness import (
    READY_PATTERN,
    LineHandler,
    ReadinessOutcome,
    ReadinessResult,
    await_ready,
)

logger = logging.getLogger(__name__)


def build_command(executable: Path, port: int, password: str | None = None) -> list[str]:
    command = [str(executable), "--port", str(port)]
    if password:
        command.extend(["--requirepass", password])
    return command


def mask_command(command: list[str]) -> list[str]:
    masked = list(command)
    for idx, token in enumerate(masked[:-1]):
        if token == "--requirepass":
            masked[idx + 1] = "******"
    return masked


class ServerProcess:
    def __init__(
        self,
        process: subprocess.Popen[str],
        command: list[str],
        cwd: Path,
        log_handler: LineHandler | None = None,
    ) -> None:
        self._process = process
        self.command = command
        self.cwd = cwd
        self._log_handler = log_handler
        self._recent_lines: deque[str] = deque(maxlen=400)
        self._reader_thread: threading.Thread | None = None
        self._scan_abandoned = False

    @classmethod
    def launch(
        cls,
        command: list[str],
        cwd: Path,
        log_handler: LineHandler | None = None,
        env: dict[str, str] | None = None,
    ) -> ServerProcess:
        logger.debug("Launching %s in %s", " ".join(mask_command(command)), cwd)
        try:
            process = subprocess.Popen(
                command,
                cwd=str(cwd),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=env,
            )
        except OSError as exc:
            raise LaunchError(f"Could not start {command[0]}: {exc}") from exc
        return cls(process=process, command=command, cwd=cwd, log_handler=log_handler)

    def _record(self, line: str) -> None:
        self._recent_lines.append(line)
        if self._log_handler:
            self._log_handler(line)

    def await_ready(
        self,
        timeout: float | None = None,
        pattern: Pattern[str] | str = READY_PATTERN,
    ) -> ReadinessResult:
        if self._process.stdout is None:
            raise LaunchError("redis-server was started without a stdout pipe.")
        result = await_ready(
            self._process.stdout,
            timeout=timeout,
            pattern=pattern,
            on_line=self._record,
        )
        self._scan_abandoned = result.outcome is ReadinessOutcome.TIMED_OUT
        return result

    def start_pump(self) -> None:
        """Keep draining stdout so the child never blocks on a full pipe."""
        if self._reader_thread is not None:
            return
        self._reader_thread = threading.Thread(
            target=self._pump_stdout,
            name="embedded-redis-log-reader",
            daemon=True,
        )
        self._reader_thread.start()

    def _pump_stdout(self) -> None:
        if self._process.stdout is None:
            return
        for line in self._process.stdout:
            self._record(line.rstrip("\r\n"))

    def poll(self) -> int | None:
        return self._process.poll()

    def is_running(self) -> bool:
        return self.poll() is None

    def wait(self, timeout: float | None = None) -> int:
        return self._process.wait(timeout=timeout)

    def terminate(self, timeout: float | None = None) -> int:
        """Send the graceful stop signal, escalating to kill after ``timeout``."""
        if not self.is_running():
            code = self.wait()
        else:
            self._process.terminate()
            try:
                code = self.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.warning(
                    "redis-server (pid %d) ignored terminate for %.1fs, killing it",
                    self.pid,
                    timeout,
                )
                self._process.kill()
                code = self.wait()
        if self._reader_thread is not None:
            self._reader_thread.join(timeout=5)
            idle_pipe = not self._reader_thread.is_alive()
        else:
            # a timed-out readiness scan may still be inside readline()
            idle_pipe = not self._scan_abandoned
        if self._process.stdout is not None and idle_pipe:
            self._process.stdout.close()
        return code

    @property
    def recent_lines(self) -> list[str]:
        return list(self._recent_lines)

    @property
    def pid(self) -> int:
        return self._process.pid
