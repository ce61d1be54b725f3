import os
import time

from action_drift.cache import (
    CACHE_TTL_SECONDS,
    FileCache,
    QueryKind,
    default_cache_dir,
)


class TestFileCache:
    def test_roundtrip_within_ttl(self, tmp_path):
        cache = FileCache(tmp_path)
        cache.set(QueryKind.LATEST_RELEASE, "actions/checkout", value="v4.1.0")
        assert cache.get(QueryKind.LATEST_RELEASE, "actions/checkout") == "v4.1.0"

    def test_miss(self, tmp_path):
        cache = FileCache(tmp_path)
        assert cache.get(QueryKind.LATEST_RELEASE, "actions/checkout") is None

    def test_stale_entry_is_a_miss(self, tmp_path):
        cache = FileCache(tmp_path)
        cache.set(QueryKind.LATEST_RELEASE, "actions/checkout", value="v4")

        entry = tmp_path / FileCache.key(QueryKind.LATEST_RELEASE, "actions/checkout")
        old = time.time() - CACHE_TTL_SECONDS - 60
        os.utime(entry, (old, old))

        assert cache.get(QueryKind.LATEST_RELEASE, "actions/checkout") is None

    def test_keys_depend_on_kind_and_params(self):
        a = FileCache.key(QueryKind.LATEST_RELEASE, "actions/checkout")
        b = FileCache.key(QueryKind.DEFAULT_BRANCH, "actions/checkout")
        c = FileCache.key(QueryKind.AHEAD_COUNT, "o/r", "ab", "c")
        d = FileCache.key(QueryKind.AHEAD_COUNT, "o/r", "a", "bc")
        assert a != b
        assert c != d
        assert a == FileCache.key(QueryKind.LATEST_RELEASE, "actions/checkout")

    def test_empty_value_is_stored(self, tmp_path):
        cache = FileCache(tmp_path)
        cache.set(QueryKind.COMMIT_SHA, "o/r", "v1", value="")
        assert cache.get(QueryKind.COMMIT_SHA, "o/r", "v1") == ""

    def test_creates_directory(self, tmp_path):
        cache = FileCache(tmp_path / "nested" / "cache")
        cache.set(QueryKind.COMPATIBILITY, "o/r", "1", "2", value="85")
        assert cache.get(QueryKind.COMPATIBILITY, "o/r", "1", "2") == "85"


class TestDefaultCacheDir:
    def test_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ACTION_DRIFT_CACHE_DIR", str(tmp_path))
        assert default_cache_dir() == tmp_path

    def test_xdg(self, monkeypatch, tmp_path):
        monkeypatch.delenv("ACTION_DRIFT_CACHE_DIR", raising=False)
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
        assert default_cache_dir() == tmp_path / "action-drift"

    def test_home(self, monkeypatch):
        monkeypatch.delenv("ACTION_DRIFT_CACHE_DIR", raising=False)
        monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
        assert default_cache_dir().parts[-2:] == (".cache", "action-drift")
