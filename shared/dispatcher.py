"""
Round-robin replica selection.

A ReplicaSet cycles deterministically through its configured base URLs.
There is no health checking: a replica that is down is still returned in its
turn and the failure surfaces on the eventual call.
"""

from typing import List, Optional, Sequence, Union


def parse_replicas(raw: Optional[Union[str, Sequence[str]]]) -> List[str]:
    """Split a comma-separated replica list, dropping blanks."""
    if not raw:
        return []
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return [item.strip().rstrip("/") for item in items if item and item.strip()]


class ReplicaSet:
    """Ordered replica addresses plus a cursor."""

    def __init__(self, addresses: Sequence[str], fallback: str):
        self._addresses = list(addresses)
        self.fallback = fallback.rstrip("/")
        self._cursor = 0

    @property
    def addresses(self) -> List[str]:
        """Effective address list; the fallback alone when none configured."""
        return list(self._addresses) if self._addresses else [self.fallback]

    def next(self) -> str:
        """Return the next address and advance the cursor."""
        if not self._addresses:
            return self.fallback
        chosen = self._addresses[self._cursor % len(self._addresses)]
        self._cursor = (self._cursor + 1) % len(self._addresses)
        return chosen

    def __repr__(self) -> str:
        return f"ReplicaSet(addresses={self._addresses!r}, fallback={self.fallback!r})"


def configure_replicas(raw: Optional[Union[str, Sequence[str]]], fallback: str) -> ReplicaSet:
    """Build a ReplicaSet from a replica list (or None) and a fallback URL."""
    return ReplicaSet(parse_replicas(raw), fallback)
