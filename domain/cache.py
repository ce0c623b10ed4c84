"""Two tier cache for recipe API responses.

Entries live in a bounded in-memory tier and are mirrored to one file per key
on disk. Expiry is checked lazily on read; nothing sweeps in the background.
Disk failures are logged and degrade to a miss, they are never raised.
"""
import base64
import binascii
import hashlib
import logging
from pathlib import Path
import threading
import time
from typing import Any, Callable

from domain import codec
from domain.errors import CacheIOError, DecodeError, EncodeError


logger = logging.getLogger(__name__)


DEFAULT_TTL = 60 * 60
MEMORY_LIMIT = 100


class CacheEntry:
    def __init__(self, *, value_bytes: bytes, expires_at: float) -> None:
        self.value_bytes = value_bytes
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        return not now < self.expires_at

    def to_dict(self) -> dict[str, codec.Value]:
        return {
            "valueBytes": base64.b64encode(self.value_bytes).decode("ascii"),
            "expiresAt": self.expires_at,
        }

    @classmethod
    def from_dict(cls, value: codec.Value) -> "CacheEntry":
        if not isinstance(value, dict):
            raise DecodeError("cache entry is not a mapping")
        raw, expires_at = value.get("valueBytes"), value.get("expiresAt")
        if not isinstance(raw, str) or isinstance(expires_at, bool):
            raise DecodeError("cache entry is missing its payload")
        if not isinstance(expires_at, (int, float)):
            raise DecodeError("cache entry is missing its expiry")
        try:
            value_bytes = base64.b64decode(raw, validate=True)
        except binascii.Error as e:
            raise DecodeError(f"cache entry payload is not base64: {e}") from e
        return cls(value_bytes=value_bytes, expires_at=float(expires_at))


class MemoryTier:
    """Bounded key/entry map. The oldest insertion is evicted first."""

    def __init__(self, limit: int = MEMORY_LIMIT) -> None:
        self.limit = limit
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        self._entries.pop(key, None)
        self._entries[key] = entry
        while len(self._entries) > self.limit:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

    def pop(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


class DiskTier:
    def __init__(self, directory: Path, *, hash_filenames: bool = False) -> None:
        self.directory = directory
        self.hash_filenames = hash_filenames
        self.reads = 0
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Error creating cache directory %s: %s", directory, e)

    def path_for(self, key: str) -> Path:
        if self.hash_filenames:
            return self.directory / hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / key

    def read(self, key: str) -> CacheEntry | None:
        path = self.path_for(key)
        if not path.is_file():
            return None
        self.reads += 1
        try:
            data = path.read_bytes()
        except OSError as e:
            raise CacheIOError(f"Error loading {path}: {e}") from e
        return codec.decode(data, CacheEntry.from_dict)

    def write(self, key: str, entry: CacheEntry) -> None:
        path = self.path_for(key)
        try:
            path.write_bytes(codec.encode(entry))
        except (OSError, ValueError) as e:
            raise CacheIOError(f"Error saving {path}: {e}") from e

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except (OSError, ValueError) as e:
            raise CacheIOError(f"Error removing {path}: {e}") from e

    def clear(self) -> None:
        try:
            for path in self.directory.iterdir():
                if path.is_file():
                    path.unlink()
        except OSError as e:
            raise CacheIOError(f"Error clearing {self.directory}: {e}") from e


class CacheStore:
    """Memory tier in front of a disk tier, both keyed by the same string.

    All operations take one lock, so a `get` after a `put` on the same key
    always sees the new value, whatever thread it runs on.
    """

    def __init__(
        self,
        *,
        directory: Path,
        memory_limit: int = MEMORY_LIMIT,
        hash_filenames: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.memory = MemoryTier(memory_limit)
        self.disk = DiskTier(directory, hash_filenames=hash_filenames)
        self.clock = clock
        self.memory_hits = 0
        self.disk_hits = 0
        self.misses = 0
        self._lock = threading.RLock()

    def put(self, key: str, value: Any, ttl: float = DEFAULT_TTL) -> None:
        try:
            value_bytes = codec.encode(value)
        except EncodeError as e:
            logger.warning("Not caching %s: %s", key, e)
            return

        entry = CacheEntry(value_bytes=value_bytes, expires_at=self.clock() + ttl)
        with self._lock:
            self.memory.set(key, entry)
            try:
                self.disk.write(key, entry)
            except CacheIOError as e:
                logger.warning("%s", e)

    def get(self, key: str, shape: codec.Shape | None = None) -> Any | None:
        """Cached value rebuilt by `shape`, or None when absent or expired."""
        with self._lock:
            now = self.clock()
            entry = self.memory.get(key)
            if entry is not None:
                if entry.is_expired(now):
                    self.memory.pop(key)
                else:
                    try:
                        value = codec.decode(entry.value_bytes, shape)
                    except DecodeError as e:
                        logger.warning("Dropping undecodable entry %s: %s", key, e)
                        self.memory.pop(key)
                    else:
                        self.memory_hits += 1
                        return value

            value = self._load_from_disk(key, shape, now)
            if value is None:
                self.misses += 1
            return value

    def _load_from_disk(self, key: str, shape: codec.Shape | None, now: float) -> Any | None:
        try:
            entry = self.disk.read(key)
        except CacheIOError as e:
            logger.warning("%s", e)
            return None
        except DecodeError as e:
            logger.warning("Corrupt cache file for %s: %s", key, e)
            self._remove_from_disk(key)
            return None

        if entry is None:
            return None
        if entry.is_expired(now):
            self._remove_from_disk(key)
            return None

        try:
            value = codec.decode(entry.value_bytes, shape)
        except DecodeError as e:
            logger.warning("Dropping undecodable entry %s: %s", key, e)
            self._remove_from_disk(key)
            return None

        self.memory.set(key, entry)
        self.disk_hits += 1
        return value

    def _remove_from_disk(self, key: str) -> None:
        try:
            self.disk.remove(key)
        except CacheIOError as e:
            logger.warning("%s", e)

    def remove(self, key: str) -> None:
        with self._lock:
            self.memory.pop(key)
            self._remove_from_disk(key)

    def clear(self) -> None:
        with self._lock:
            self.memory.clear()
            try:
                self.disk.clear()
            except CacheIOError as e:
                logger.warning("%s", e)
