"""In-process key/value cache."""

from typing import Any

from resurface.core import CACHE_MISS, KeyValueCache


class MemoryCache(KeyValueCache):
    """Dict-backed cache; ``None`` is a valid cached value."""

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self._entries.get(key, CACHE_MISS)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
