import pytest

from embedded_redis.exceptions import ConfigurationError, UnsupportedPlatformError
from embedded_redis.platforms import PlatformTarget, current_platform, describe, platform_for


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("win32", PlatformTarget.WINDOWS),
        ("cygwin", PlatformTarget.WINDOWS),
        ("linux", PlatformTarget.LINUX),
        ("linux2", PlatformTarget.LINUX),
        ("darwin", PlatformTarget.MACOSX),
    ],
)
def test_platform_for_known_hosts(value, expected):
    assert platform_for(value) is expected


def test_platform_for_unknown_host_is_a_configuration_error():
    with pytest.raises(UnsupportedPlatformError) as excinfo:
        platform_for("sunos5")
    assert isinstance(excinfo.value, ConfigurationError)
    assert "sunos5" in str(excinfo.value)


def test_descriptors_name_one_executable_per_target():
    assert describe(PlatformTarget.WINDOWS).executable_name == "redis-server.exe"
    assert describe(PlatformTarget.LINUX).executable_name == "redis-server"
    assert describe(PlatformTarget.MACOSX).executable_name == "redis-server"
    assert [describe(t).resource_segment for t in PlatformTarget] == [
        "windows",
        "linux",
        "macosx",
    ]


def test_current_platform_is_resolved_once(monkeypatch):
    current_platform.cache_clear()
    try:
        first = current_platform()
        monkeypatch.setattr("embedded_redis.platforms.sys.platform", "sunos5")
        assert current_platform() is first

        current_platform.cache_clear()
        with pytest.raises(UnsupportedPlatformError):
            current_platform()
    finally:
        monkeypatch.undo()
        current_platform.cache_clear()
