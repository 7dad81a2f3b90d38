from __future__ import annotations

import copy
import enum
import logging
import threading
from datetime import datetime
from typing import Callable, TypeVar

from . import codec
from .ini_format import Sections, read_ini, write_ini

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InvalidNameError(ValueError):
    pass


def check_names(section: str, key: str) -> None:
    """Reject names the file format cannot hold.

    Empty names would be written as `[]` or `=value` and skipped on reload; a
    key containing `=` would be split at the wrong place.
    """
    if not section.strip():
        raise InvalidNameError(f"Empty section name: {section!r}")
    if not key.strip():
        raise InvalidNameError(f"Empty key name in [{section}]: {key!r}")
    if "=" in key:
        raise InvalidNameError(f"Key may not contain '=': {key!r}")


class LoadState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADED = "loaded"


class IniStore:
    """Cached, section-keyed view of an ini file.

    All values live in memory as strings; typed accessors convert at the
    boundary. Reading a missing key stores its default, so a later flush
    writes out every setting the program asked for.

    One lock guards the cache, the lazy load and flush.
    """

    def __init__(self, path: str, *, lazy: bool = False) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._sections: Sections = {}
        self._dirty = False
        self._state = LoadState.UNINITIALIZED
        if not lazy:
            with self._lock:
                self._load_locked()
                self._state = LoadState.LOADED

    def __enter__(self) -> "IniStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def path(self) -> str:
        return self._path

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def state(self) -> LoadState:
        return self._state

    def _load_locked(self) -> None:
        self._sections = read_ini(self._path)

    def _ensure_loaded_locked(self) -> None:
        if self._state is LoadState.UNINITIALIZED:
            logger.debug("Lazy load of %s", self._path)
            self._load_locked()
            self._state = LoadState.LOADED

    def _set_locked(self, section: str, key: str, value: str) -> None:
        self._dirty = True
        self._sections.setdefault(section, {})[key] = value

    def refresh(self) -> None:
        """Re-read the file, replacing the cache."""
        with self._lock:
            self._load_locked()

    def get_value(self, section: str, key: str, default: str) -> str:
        check_names(section, key)
        with self._lock:
            self._ensure_loaded_locked()
            entries = self._sections.get(section)
            if entries is None or key not in entries:
                # Missing settings are materialized with their default.
                self._set_locked(section, key, default)
                return default
            return entries[key]

    def set_value(self, section: str, key: str, value: str) -> None:
        check_names(section, key)
        with self._lock:
            self._ensure_loaded_locked()
            self._set_locked(section, key, value)

    def snapshot(self) -> Sections:
        with self._lock:
            if self._state is LoadState.UNINITIALIZED:
                # Peek at the file without promoting the lazy load.
                return read_ini(self._path)
            return copy.deepcopy(self._sections)

    def flush(self) -> None:
        with self._lock:
            logger.info("Ini flush (modified=%s): %s", self._dirty, self._path)
            if not self._dirty:
                return
            write_ini(self._path, self._sections)
            self._dirty = False

    def close(self) -> None:
        self.flush()

    def _get_typed(
        self,
        section: str,
        key: str,
        default: T,
        encode: Callable[[T], str],
        decode: Callable[[str], T],
    ) -> T:
        text = self.get_value(section, key, encode(default))
        try:
            return decode(text)
        except codec.ValueFormatError:
            logger.warning("Malformed value for [%s] %s: %r, using default", section, key, text)
            return default

    def get_string(self, section: str, key: str, default: str) -> str:
        return self.get_value(section, key, default)

    def get_bool(self, section: str, key: str, default: bool) -> bool:
        return self._get_typed(section, key, default, codec.encode_bool, codec.decode_bool)

    def get_int(self, section: str, key: str, default: int) -> int:
        return self._get_typed(section, key, default, codec.encode_int, codec.decode_int)

    def get_float(self, section: str, key: str, default: float) -> float:
        return self._get_typed(section, key, default, codec.encode_float, codec.decode_float)

    def get_bytes(self, section: str, key: str, default: bytes) -> bytes:
        return self._get_typed(section, key, default, codec.encode_bytes, codec.decode_bytes)

    def get_timestamp(self, section: str, key: str, default: datetime) -> datetime:
        return self._get_typed(section, key, default, codec.encode_timestamp, codec.decode_timestamp)

    def set_string(self, section: str, key: str, value: str) -> None:
        self.set_value(section, key, value)

    def set_bool(self, section: str, key: str, value: bool) -> None:
        self.set_value(section, key, codec.encode_bool(value))

    def set_int(self, section: str, key: str, value: int) -> None:
        self.set_value(section, key, codec.encode_int(value))

    def set_float(self, section: str, key: str, value: float) -> None:
        self.set_value(section, key, codec.encode_float(value))

    def set_bytes(self, section: str, key: str, value: bytes) -> None:
        self.set_value(section, key, codec.encode_bytes(value))

    def set_timestamp(self, section: str, key: str, value: datetime) -> None:
        self.set_value(section, key, codec.encode_timestamp(value))


def open_store(path: str, *, lazy: bool = False) -> IniStore:
    return IniStore(path, lazy=lazy)

