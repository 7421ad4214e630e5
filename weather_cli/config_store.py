"""
Configuration Store for weather-cli

Sole owner of the settings file on disk.

Guarantees:
- Loading never fails: a missing file gives default settings silently, an
  unreadable or malformed one gives defaults with the cause logged
- Readers never see a half-applied update (shared/exclusive lock)
- The file on disk is never partially written: saves go to a unique sibling
  temp file which is fsync'd and then renamed over the real path

Known limitation: if a save fails after a mutator ran, the in-memory settings
keep the change and differ from the file until the next successful save.
"""

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, TypeVar, Union

from weather_cli.errors import ConfigIoError
from weather_cli.models import Settings

logger = logging.getLogger(__name__)

T = TypeVar('T')

TEMP_SUFFIX = ".tmp"


class ReadWriteLock:
    """
    Many-readers / one-writer lock.

    Waiting writers block new readers so a steady stream of reads cannot
    starve an update. Waiters block without timeout.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


def load_settings(path: Path) -> Settings:
    """
    Load settings from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigIoError: If it cannot be read or does not hold valid settings
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigIoError(f"Failed to read config file {path}: {e}") from e

    return Settings.from_dict(raw)


def serialize_settings(settings: Settings) -> str:
    """Pretty-printed, key-sorted JSON document for the settings."""
    return json.dumps(settings.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)


def save_settings_atomic(settings: Settings, path: Path) -> None:
    """
    Write settings so that `path` only ever holds a complete document.

    Serializes to a uniquely named `<name>.*.tmp` sibling, flushes and fsyncs
    it, then renames it over `path`. Concurrent savers, in this process or
    another, each get their own temp file. On any failure the temp file is
    removed and the error is raised.

    Raises:
        ConfigIoError: On any I/O failure
    """
    tmp_name = None

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        document = serialize_settings(settings)

        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=path.name + ".", suffix=TEMP_SUFFIX, delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(document)
            tmp.flush()
            os.fsync(tmp.fileno())

        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            _discard_temp_file(Path(tmp_name))
        raise ConfigIoError(f"Failed to save config file {path}: {e}") from e

    logger.debug(f"[ConfigStore] Settings saved to {path}")


def _discard_temp_file(tmp_path: Path) -> None:
    try:
        tmp_path.unlink()
    except OSError as cleanup_error:
        logger.debug(f"[ConfigStore] Failed to remove temporary file {tmp_path}: {cleanup_error}")


class ConfigStore:
    """
    Thread-safe access to the settings file.

    Features:
    - Defaults when the file is missing or corrupt
    - Consistent snapshots for any number of concurrent readers
    - update() runs a mutator under an exclusive lock and saves atomically
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = ReadWriteLock()
        self._settings = self._load()

    @classmethod
    def open(cls, path: Union[str, Path]) -> "ConfigStore":
        return cls(path)

    def _load(self) -> Settings:
        try:
            settings = load_settings(self.path)
            logger.debug(f"[ConfigStore] Loaded settings from {self.path}")
            return settings
        except FileNotFoundError:
            logger.debug(f"[ConfigStore] Config file not found at {self.path}, using defaults")
        except ConfigIoError as e:
            logger.warning(f"[ConfigStore] {e}. Using default settings.")
        return Settings.default()

    @contextmanager
    def read(self) -> Iterator[Settings]:
        """
        Hold a shared lock and yield a snapshot of the settings.

        The snapshot is a copy: changing it does not affect the store.
        """
        with self._lock.read_locked():
            yield copy.deepcopy(self._settings)

    def snapshot(self) -> Settings:
        """Copy of the current settings."""
        with self.read() as settings:
            return settings

    def update(self, mutator: Callable[[Settings], T]) -> T:
        """
        Apply `mutator` to the settings and persist the result.

        The exclusive lock is held across the mutation and the save, and
        released only after the file is on disk.

        Args:
            mutator: Function that changes the settings in place; its return
                     value is passed back to the caller

        Returns:
            Whatever the mutator returned

        Raises:
            ConfigIoError: If saving fails. The in-memory change is kept.
        """
        with self._lock.write_locked():
            result = mutator(self._settings)
            save_settings_atomic(self._settings, self.path)
            return result


__all__ = [
    "ConfigStore",
    "ReadWriteLock",
    "load_settings",
    "save_settings_atomic",
    "serialize_settings",
]
