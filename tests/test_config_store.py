"""
Tests for the Configuration Store

These tests verify that:
1. Missing and corrupt files load as default settings
2. Settings survive a save / reopen round trip
3. Saves are atomic: temp file cleaned up, target never half-written
4. A failed save surfaces an error and keeps the in-memory change
5. Readers and writers do not interleave, across separate stores too

Run with: python -m pytest tests/test_config_store.py -v
"""

import json
import logging
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

sys.path.insert(0, str(Path(__file__).parent.parent))

from weather_cli import config_store
from weather_cli.config_store import ConfigStore, ReadWriteLock, save_settings_atomic, serialize_settings
from weather_cli.errors import ConfigIoError
from weather_cli.models import ProviderConfig, Settings


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "weather-cli" / "config.json"


class TestLoad:
    """Loading never fails."""

    def test_missing_file_gives_defaults(self, config_path):
        store = ConfigStore.open(config_path)

        assert store.snapshot() == Settings.default()
        assert not config_path.exists(), "Opening must not create the file"

    def test_corrupt_file_gives_defaults(self, config_path, caplog):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{ not json", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="weather_cli.config_store"):
            store = ConfigStore(config_path)

        logger.info(f"[TEST] Warnings: {caplog.messages}")
        assert store.snapshot() == Settings.default()
        assert any("Using default settings" in m for m in caplog.messages)

    def test_wrong_shape_gives_defaults(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text('["home", "work"]', encoding="utf-8")

        assert ConfigStore(config_path).snapshot() == Settings.default()

    def test_partial_file_loads_without_mock_defaults(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text('{"addresses": {"work": "Berlin"}}', encoding="utf-8")

        settings = ConfigStore(config_path).snapshot()
        assert settings.addresses == {"work": "Berlin"}
        assert settings.providers == {}


class TestSave:
    """Persistence and atomic replace."""

    def test_round_trip(self, config_path):
        store = ConfigStore(config_path)

        def mutate(settings):
            settings.addresses["home"] = "London, UK"
            settings.addresses["work"] = "Berlin"
            settings.default_alias = "home"
            settings.providers["ow"] = ProviderConfig(key="abc123")
            settings.default_provider = "ow"

        store.update(mutate)
        reopened = ConfigStore(config_path)

        assert reopened.snapshot() == store.snapshot()
        assert reopened.snapshot().providers["ow"].key == "abc123"

    def test_update_returns_mutator_result(self, config_path):
        store = ConfigStore(config_path)
        assert store.update(lambda s: "done") == "done"

    def test_file_is_pretty_and_sorted(self, config_path):
        store = ConfigStore(config_path)

        def mutate(settings):
            settings.addresses["zz"] = "Last"
            settings.addresses["aa"] = "First"

        store.update(mutate)
        text = config_path.read_text(encoding="utf-8")
        logger.info(f"[TEST] Saved document:\n{text}")

        assert text == serialize_settings(store.snapshot())
        assert text.index('"aa"') < text.index('"zz"')
        assert text.index('"addresses"') < text.index('"providers"')
        assert "\n  " in text
        assert json.loads(text)["providers"]["mock"]["key"] == "mock-key"

    def test_noop_update_is_byte_identical(self, config_path):
        store = ConfigStore(config_path)
        store.update(lambda s: s.addresses.update({"home": "London, UK"}))
        first = config_path.read_bytes()

        store.update(lambda s: None)
        assert config_path.read_bytes() == first

        ConfigStore(config_path).update(lambda s: None)
        assert config_path.read_bytes() == first

    def test_no_temp_file_left_behind(self, config_path):
        ConfigStore(config_path).update(lambda s: None)

        assert config_path.exists()
        assert list(config_path.parent.iterdir()) == [config_path]

    def test_unicode_preserved(self, config_path):
        store = ConfigStore(config_path)
        store.update(lambda s: s.addresses.update({"muc": "München, DE"}))

        assert "München" in config_path.read_text(encoding="utf-8")
        assert ConfigStore(config_path).snapshot().addresses["muc"] == "München, DE"

    def test_failed_rename_cleans_up_and_raises(self, config_path, monkeypatch):
        store = ConfigStore(config_path)
        store.update(lambda s: s.addresses.update({"home": "London"}))
        before = config_path.read_bytes()

        def broken_replace(src, dst):
            raise OSError("rename refused")

        monkeypatch.setattr(config_store.os, "replace", broken_replace)

        with pytest.raises(ConfigIoError, match="rename refused"):
            store.update(lambda s: s.addresses.update({"work": "Berlin"}))

        logger.info("[TEST] Target file must be untouched, temp file removed")
        assert config_path.read_bytes() == before
        assert list(config_path.parent.iterdir()) == [config_path]

        # Documented divergence: memory keeps the change, disk does not
        assert store.snapshot().addresses == {"home": "London", "work": "Berlin"}
        assert ConfigStore(config_path).snapshot().addresses == {"home": "London"}

    def test_failed_write_removes_temp_file(self, config_path, monkeypatch):
        store = ConfigStore(config_path)
        store.update(lambda s: s.addresses.update({"home": "London"}))
        before = config_path.read_bytes()

        def broken_fsync(fd):
            raise OSError("No space left on device")

        monkeypatch.setattr(config_store.os, "fsync", broken_fsync)

        with pytest.raises(ConfigIoError, match="No space left"):
            store.update(lambda s: s.addresses.update({"work": "Berlin"}))

        assert config_path.read_bytes() == before
        assert list(config_path.parent.iterdir()) == [config_path]

    def test_unwritable_location_raises(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(ConfigIoError):
            save_settings_atomic(Settings.default(), blocker / "config.json")


class TestConcurrency:
    """Snapshots and the reader/writer lock."""

    def test_snapshot_is_isolated(self, config_path):
        store = ConfigStore(config_path)

        with store.read() as settings:
            settings.addresses["home"] = "Nowhere"

        assert store.snapshot().addresses == {}

    def test_writer_waits_for_reader(self):
        lock = ReadWriteLock()
        acquired = threading.Event()

        def writer():
            with lock.write_locked():
                acquired.set()

        lock.acquire_read()
        thread = threading.Thread(target=writer)
        thread.start()
        try:
            assert not acquired.wait(0.2), "Writer must block while a reader holds the lock"
        finally:
            lock.release_read()

        assert acquired.wait(5)
        thread.join(5)

    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        both_inside = threading.Barrier(2, timeout=5)

        def reader():
            with lock.read_locked():
                both_inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        assert not both_inside.broken

    def test_no_torn_reads(self, config_path):
        """Writers keep two fields equal; readers must never see them differ."""
        store = ConfigStore(config_path)
        store.update(lambda s: s.addresses.update({"a": "0", "b": "0"}))
        torn = []

        def write(i):
            def mutate(settings):
                settings.addresses["a"] = str(i)
                settings.addresses["b"] = str(i)
            store.update(mutate)

        def read(_):
            with store.read() as settings:
                if settings.addresses["a"] != settings.addresses["b"]:
                    torn.append(dict(settings.addresses))

        with ThreadPoolExecutor(max_workers=8) as pool:
            jobs = []
            for i in range(1, 41):
                jobs.append(pool.submit(write, i))
                jobs.append(pool.submit(read, i))
            for job in jobs:
                job.result()

        logger.info(f"[TEST] Torn reads: {len(torn)}")
        assert torn == []
        on_disk = ConfigStore(config_path).snapshot().addresses
        assert on_disk["a"] == on_disk["b"]
        assert on_disk == store.snapshot().addresses

    def test_separate_stores_share_one_file(self, config_path):
        """Two stores on one path stand in for two CLI processes."""
        first = ConfigStore(config_path)
        second = ConfigStore(config_path)
        first.update(lambda s: s.addresses.update({"seed": "x" * 2000}))

        errors = []
        torn = []
        writers_done = threading.Event()

        def write(store, name):
            for i in range(150):
                def mutate(settings):
                    settings.addresses[name] = f"{i}-" + "y" * 2000
                try:
                    store.update(mutate)
                except ConfigIoError as e:
                    errors.append(str(e))

        def read_file():
            while not writers_done.is_set():
                try:
                    json.loads(config_path.read_text(encoding="utf-8"))
                except ValueError as e:
                    torn.append(str(e))

        reader = threading.Thread(target=read_file)
        reader.start()
        writers = [
            threading.Thread(target=write, args=(first, "a")),
            threading.Thread(target=write, args=(second, "b")),
        ]
        for t in writers:
            t.start()
        for t in writers:
            t.join(60)
        writers_done.set()
        reader.join(10)

        logger.info(f"[TEST] Save errors: {len(errors)}, torn reads: {len(torn)}")
        assert errors == []
        assert torn == []
        assert list(config_path.parent.glob("*.tmp")) == []
        assert list(config_path.parent.iterdir()) == [config_path]


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
