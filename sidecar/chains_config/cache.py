import threading
from collections import OrderedDict
from typing import Any, Hashable, Optional

from sidecar.chains_config.controller_config import CacheOptions


class LRUCache:
    """
    Bounded key/value store with least-recently-used eviction.

    Reads and writes both count as a use. Once more than ``max_size`` entries are
    held, the entry that was used longest ago is dropped. Safe to share between
    the executor threads of the chain-state accessor.
    """

    def __init__(self, max_size: int):
        if max_size < 1:
            raise ValueError(f"LRU cache size must be positive, got {max_size}")
        self.max_size = max_size
        self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable, default: Optional[Any] = None) -> Optional[Any]:
        with self._lock:
            if key not in self._entries:
                return default
            self._entries.move_to_end(key)
            return self._entries[key]

    def set(self, key: Hashable, value: Any):
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def init_lru_cache(options: Optional[CacheOptions] = None) -> LRUCache:
    """Build the block store for a controller config."""
    options = options or CacheOptions()
    return LRUCache(options.max_size)
