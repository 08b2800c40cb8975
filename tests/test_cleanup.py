from embedded_redis.cleanup import ScratchRegistry


def test_drain_removes_registered_directories_and_files(tmp_path):
    registry = ScratchRegistry()
    scratch = tmp_path / "embedded-redis-x"
    scratch.mkdir()
    executable = scratch / "redis-server"
    executable.write_bytes(b"binary")
    stray = tmp_path / "stray-file"
    stray.write_bytes(b"")

    registry.register(scratch)
    registry.register(executable)
    registry.register(stray)
    registry.drain()

    assert not scratch.exists()
    assert not stray.exists()
    assert registry.paths == []


def test_drain_ignores_paths_that_are_already_gone(tmp_path):
    registry = ScratchRegistry()
    registry.register(tmp_path / "missing-dir")
    registry.register(tmp_path / "missing-file")
    registry.drain()
    assert registry.paths == []


def test_register_hooks_interpreter_exit_once(monkeypatch, tmp_path):
    hooks = []
    monkeypatch.setattr("embedded_redis.cleanup.atexit.register", hooks.append)
    registry = ScratchRegistry()
    registry.register(tmp_path / "a")
    registry.register(tmp_path / "b")
    assert hooks == [registry.drain]
