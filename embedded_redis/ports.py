from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)


def allocate_free_port(host: str = "127.0.0.1") -> int:
    """Return a port the OS reported free; nothing stays reserved after return."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        port = sock.getsockname()[1]
    logger.debug("Allocated free port %d on %s", port, host)
    return port
