from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from .artifacts import ArtifactSource, DirectoryArtifactSource
from .exceptions import EmbeddedRedisError
from .models import DEFAULT_REDIS_VERSION
from .platforms import current_platform, describe
from .ports import allocate_free_port
from .server import DEFAULT_STARTUP_TIMEOUT, DEFAULT_STOP_TIMEOUT, RedisServer


def _cmd_platform() -> int:
    target = current_platform()
    print(f"{target.value}\t{describe(target).executable_name}")
    return 0


def _cmd_free_port(args: argparse.Namespace) -> int:
    print(allocate_free_port(args.host))
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    def _log(line: str) -> None:
        print(line)

    source: ArtifactSource | None = None
    if args.binaries:
        source = DirectoryArtifactSource(Path(args.binaries).resolve())

    startup_timeout = args.startup_timeout if args.startup_timeout > 0 else None
    server = RedisServer(
        version=args.redis_version,
        port=args.port,
        password=args.password,
        artifact_source=source,
        startup_timeout=startup_timeout,
        stop_timeout=args.stop_timeout,
        log_handler=_log,
    )
    server.start()
    print(f"redis-server {server.version} listening on port {server.port} (PID {server.pid}).")
    print("Press Ctrl+C to stop.")
    try:
        return_code = server.wait() or 0
        print(f"redis-server exited with code {return_code}.")
        return return_code
    except KeyboardInterrupt:
        print("Stopping redis-server...")
        server.stop()
        print("redis-server stopped.")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="embedded-redis",
        description="Run a disposable redis-server from bundled binaries.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("platform", help="Print the detected platform and executable name.")

    free_port = sub.add_parser("free-port", help="Print a currently unused TCP port.")
    free_port.add_argument("--host", default="127.0.0.1", help="Interface to probe.")

    run = sub.add_parser("run", help="Start redis-server and wait for Ctrl+C.")
    run.add_argument(
        "--redis-version",
        default=DEFAULT_REDIS_VERSION,
        help=f"Bundled redis version (default: {DEFAULT_REDIS_VERSION}).",
    )
    run.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: a free ephemeral port).",
    )
    run.add_argument("--password", default=None, help="Value for --requirepass.")
    run.add_argument(
        "--binaries",
        default=None,
        help="Directory laid out as <version>/<platform>/<executable> to extract from.",
    )
    run.add_argument(
        "--startup-timeout",
        type=float,
        default=DEFAULT_STARTUP_TIMEOUT,
        help="Seconds to wait for the ready line; 0 waits forever.",
    )
    run.add_argument(
        "--stop-timeout",
        type=float,
        default=DEFAULT_STOP_TIMEOUT,
        help="Seconds to wait after terminate before killing the process.",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "platform":
            return _cmd_platform()
        if args.command == "free-port":
            return _cmd_free_port(args)
        if args.command == "run":
            return _cmd_run(args)
    except EmbeddedRedisError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
