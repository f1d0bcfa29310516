"""Storage adapters."""

from resurface.adapters.storage.memory_cache import MemoryCache
from resurface.adapters.storage.yaml_store import YamlHighlightStore

__all__ = ["MemoryCache", "YamlHighlightStore"]
