from __future__ import annotations

import atexit
import logging
from pathlib import Path
import shutil
import threading

logger = logging.getLogger(__name__)


class ScratchRegistry:
    """Scratch directories scheduled for best-effort removal at interpreter exit."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._paths: list[Path] = []
        self._hooked = False

    def register(self, path: Path) -> None:
        with self._lock:
            self._paths.append(Path(path))
            if not self._hooked:
                atexit.register(self.drain)
                self._hooked = True

    @property
    def paths(self) -> list[Path]:
        with self._lock:
            return list(self._paths)

    def drain(self) -> None:
        with self._lock:
            paths, self._paths = self._paths, []
        for path in reversed(paths):
            if path.is_dir():
                shutil.rmtree(path, ignore_errors=True)
            else:
                try:
                    path.unlink()
                except OSError:
                    pass
            logger.debug("Removed scratch path %s", path)


scratch_registry = ScratchRegistry()
