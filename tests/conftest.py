from pathlib import Path

import pytest

from embedded_redis.artifacts import DirectoryArtifactSource, resource_key
from embedded_redis.models import DEFAULT_REDIS_VERSION
from embedded_redis.platforms import current_platform

_SCRIPTS = {
    "ready": """\
#!/bin/sh
echo "starting up"
echo "args: $*"
echo "cwd: $(pwd -P)"
echo "The server is now ready to accept connections on port $2"
exec sleep 300
""",
    "slow": """\
#!/bin/sh
echo "starting up"
sleep 1
echo "The server is now ready to accept connections on port $2"
exec sleep 300
""",
    "crash": """\
#!/bin/sh
echo "starting up"
echo "bad config" >&2
exit 1
""",
    "silent": """\
#!/bin/sh
exec sleep 300
""",
    "stubborn": """\
#!/bin/sh
trap '' TERM
echo "The server is now ready to accept connections on port $2"
while true; do sleep 1; done
""",
    "exiting": """\
#!/bin/sh
echo "The server is now ready to accept connections on port $2"
exit 0
""",
}


@pytest.fixture
def make_source(tmp_path):
    """Lay out a fake redis-server shell script as a DirectoryArtifactSource."""

    def _make(kind: str = "ready", version: str = DEFAULT_REDIS_VERSION):
        root = tmp_path / "binaries"
        path = root.joinpath(*resource_key(version, current_platform()).split("/"))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_SCRIPTS[kind], encoding="utf-8")
        return DirectoryArtifactSource(root)

    return _make


@pytest.fixture
def scratch_root(tmp_path) -> Path:
    path = tmp_path / "scratch"
    path.mkdir()
    return path
