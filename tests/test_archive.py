import os
from pathlib import Path

from hots_replay_analyzer.archive import Archive, ArchiveCache
from hots_replay_analyzer.exceptions import InvalidReplayError
from hots_replay_analyzer.sections import DETAILS

from conftest import REPLAY_BUILD, UNKNOWN_BUILD, FakeContainer


def test_second_open_returns_cached_archive(cache, replay_path, containers) -> None:
    first = cache.open(replay_path)
    second = cache.open(replay_path)

    assert isinstance(first, Archive)
    assert second is first
    assert len(containers) == 1


def test_cache_key_is_absolute_path(cache, replay_path, containers, monkeypatch) -> None:
    monkeypatch.chdir(replay_path.parent)
    first = cache.open(replay_path.name)
    second = cache.open(str(replay_path))

    assert first.filename == replay_path.absolute()
    assert second is first
    assert len(containers) == 1


def test_bypass_cache_rereads(cache, replay_path, containers) -> None:
    first = cache.open(replay_path)
    first.get(DETAILS)
    second = cache.open(replay_path, bypass_cache=True)

    assert second is not first
    assert len(containers) == 2
    assert DETAILS not in second.data
    assert cache.current is second


def test_opening_another_archive_replaces_slot(cache, replay_path, tmp_path, containers) -> None:
    other_path = tmp_path / "otra.StormReplay"
    other_path.write_bytes(b"MPQ\x1b")

    first = cache.open(replay_path)
    other = cache.open(other_path)
    again = cache.open(replay_path)

    assert cache.current is again
    assert other is not first
    assert again is not first
    assert len(containers) == 3


def test_separate_caches_do_not_share_slot(registry, opener, replay_path) -> None:
    cache_a = ArchiveCache(registry, opener=opener)
    cache_b = ArchiveCache(registry, opener=opener)
    assert cache_a.open(replay_path) is not cache_b.open(replay_path)


def test_open_container_handle_is_reused(cache) -> None:
    container = FakeContainer(REPLAY_BUILD, {"replay.details": b"x"})
    archive = cache.open(container)

    assert archive.container is container
    assert archive.filename is None
    assert cache.open(container) is archive


def test_open_archive_instance_returned_as_is(cache, replay_path) -> None:
    archive = cache.open(replay_path)
    assert cache.open(archive) is archive


def test_unsupported_parameter_returns_error(cache) -> None:
    result = cache.open(42)
    assert isinstance(result, InvalidReplayError)
    assert cache.current is None


def test_open_failure_returns_error_not_raises(registry, replay_path) -> None:
    def broken_opener(path: Path):
        raise ValueError("Invalid file header")

    cache = ArchiveCache(registry, opener=broken_opener)
    result = cache.open(replay_path)

    assert isinstance(result, InvalidReplayError)
    assert isinstance(result.__cause__, ValueError)
    assert cache.current is None


def test_missing_file_with_default_opener(registry, tmp_path) -> None:
    cache = ArchiveCache(registry)
    result = cache.open(tmp_path / "no_existe.StormReplay")
    assert isinstance(result, InvalidReplayError)
    assert "no_existe" in str(result)


def test_container_without_user_data_header(cache) -> None:
    container = FakeContainer(REPLAY_BUILD)
    container.header = {}
    assert isinstance(cache.open(container), InvalidReplayError)


def test_unknown_build_archive_is_cached_with_error(cache, unknown_replay_path) -> None:
    archive = cache.open(unknown_replay_path)

    assert isinstance(archive, Archive)
    assert archive.error == f"protocol {UNKNOWN_BUILD} not found"
    assert cache.open(unknown_replay_path) is archive


def test_clear(cache, replay_path, containers) -> None:
    cache.open(replay_path)
    cache.clear()
    assert cache.current is None
    cache.open(os.fspath(replay_path))
    assert len(containers) == 2
