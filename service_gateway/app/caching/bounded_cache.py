"""
In-process bounded cache with insertion-order eviction.
"""

from collections import OrderedDict
from typing import Any, List, Optional


class BoundedCache:
    """Key/value map holding at most ``max_entries`` items.

    ``put`` moves the key to the most-recent end; overflow evicts from the
    least-recently-inserted end. Reads do not change the order. All methods
    run without awaiting, so they never interleave on the event loop.
    """

    def __init__(self, max_entries: int):
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Any]" = OrderedDict()
        self.evictions = 0

    def get(self, key: str) -> Optional[Any]:
        return self._entries.get(key)

    def put(self, key: str, value: Any) -> List[str]:
        """Insert or refresh ``key``; returns the keys evicted to make room."""
        self._entries[key] = value
        self._entries.move_to_end(key)

        evicted = []
        while len(self._entries) > self.max_entries:
            oldest, _ = self._entries.popitem(last=False)
            evicted.append(oldest)
        self.evictions += len(evicted)
        return evicted

    def invalidate(self, key: str) -> bool:
        """Drop ``key``; True when an entry existed."""
        return self._entries.pop(key, None) is not None

    def keys(self) -> List[str]:
        """Keys from least- to most-recently inserted."""
        return list(self._entries.keys())

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
