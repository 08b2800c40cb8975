import sys

import pytest

from embedded_redis.cli import build_parser, main
from embedded_redis.platforms import current_platform, describe

posix_only = pytest.mark.skipif(
    sys.platform.startswith("win"),
    reason="fake redis-server binaries are POSIX shell scripts",
)


def test_platform_command_prints_target(capsys):
    assert main(["platform"]) == 0
    out = capsys.readouterr().out
    target = current_platform()
    assert out.strip() == f"{target.value}\t{describe(target).executable_name}"


def test_free_port_command_prints_port(capsys):
    assert main(["free-port"]) == 0
    port = int(capsys.readouterr().out.strip())
    assert 1 <= port <= 65535


def test_run_defaults():
    args = build_parser().parse_args(["run"])
    assert args.redis_version == "2.8.9"
    assert args.port is None
    assert args.password is None
    assert args.startup_timeout == 30.0


def test_run_reports_missing_binaries(tmp_path, capsys):
    assert main(["run", "--binaries", str(tmp_path)]) == 1
    assert "error:" in capsys.readouterr().err


@posix_only
def test_run_returns_server_exit_code(make_source, tmp_path, capsys):
    make_source("exiting")
    code = main(["run", "--binaries", str(tmp_path / "binaries"), "--port", "19998"])
    out = capsys.readouterr().out
    assert code == 0
    assert "listening on port 19998" in out
