from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import queue
import re
import threading
from typing import Callable, Pattern, TextIO

READY_PATTERN = re.compile(r"The server is now ready to accept connections on port")

LineHandler = Callable[[str], None]


class ReadinessOutcome(Enum):
    READY = "ready"
    EXITED = "exited"
    TIMED_OUT = "timed_out"


@dataclass(slots=True)
class ReadinessResult:
    outcome: ReadinessOutcome
    lines: list[str] = field(default_factory=list)

    @property
    def ready(self) -> bool:
        return self.outcome is ReadinessOutcome.READY


def _scan(
    stream: TextIO,
    pattern: Pattern[str],
    seen: list[str],
    on_line: LineHandler | None,
) -> ReadinessOutcome:
    while True:
        line = stream.readline()
        if not line:
            return ReadinessOutcome.EXITED
        line = line.rstrip("\r\n")
        seen.append(line)
        if on_line:
            on_line(line)
        if pattern.search(line):
            return ReadinessOutcome.READY


def await_ready(
    stream: TextIO,
    timeout: float | None = None,
    pattern: Pattern[str] | str = READY_PATTERN,
    on_line: LineHandler | None = None,
) -> ReadinessResult:
    """Read ``stream`` line by line until the ready line shows up or the stream ends.

    Nothing past the matching line is consumed. With ``timeout=None`` the scan
    runs on the calling thread and may block for as long as the child keeps
    its stdout open without printing. Otherwise the scan runs on a daemon
    thread and ``TIMED_OUT`` is returned once ``timeout`` seconds pass; that
    thread ends when the stream is closed.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    seen: list[str] = []

    if timeout is None:
        outcome = _scan(stream, compiled, seen, on_line)
        return ReadinessResult(outcome=outcome, lines=list(seen))

    results: queue.Queue[ReadinessOutcome | BaseException] = queue.Queue(maxsize=1)

    def _worker() -> None:
        try:
            results.put(_scan(stream, compiled, seen, on_line))
        except BaseException as exc:  # noqa: BLE001
            results.put(exc)

    thread = threading.Thread(target=_worker, name="embedded-redis-readiness", daemon=True)
    thread.start()
    try:
        outcome = results.get(timeout=timeout)
    except queue.Empty:
        return ReadinessResult(outcome=ReadinessOutcome.TIMED_OUT, lines=list(seen))
    if isinstance(outcome, BaseException):
        raise outcome
    return ReadinessResult(outcome=outcome, lines=list(seen))
