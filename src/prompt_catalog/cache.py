import time
from typing import Any, NamedTuple


class _Entry(NamedTuple):
    value: Any
    expires_at: float


class ContentCache:
    """In-process key/value cache whose entries expire after a TTL.

    Expired entries are only evicted when they are read.
    """

    def __init__(self, default_ttl: float = 300.0, clock=time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = _Entry(value, self._clock() + ttl)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
