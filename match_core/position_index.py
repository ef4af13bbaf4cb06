from __future__ import annotations

from typing import Generic, List, Optional, Tuple, TypeVar

V = TypeVar("V")

DEFAULT_BUCKETS = 53
_PRIME = 31
_MAX_KEY_CHARS = 100


def key_for(row: int, col: int) -> str:
    """Index key for a grid cell, e.g. '2,3'."""
    return f"{row},{col}"


class PositionIndex(Generic[V]):
    """
    Fixed-capacity hash table with separate chaining, keyed by cell strings.

    The bucket count never changes after construction. Grid sizes up to 6x6
    store at most 36 keys, so chains stay a handful of entries long.
    """

    def __init__(self, size: int = DEFAULT_BUCKETS):
        if size <= 0:
            raise ValueError("bucket count must be positive")
        self._buckets: List[Optional[List[Tuple[str, V]]]] = [None] * size
        self._count = 0

    @property
    def table_size(self) -> int:
        return len(self._buckets)

    def _hash(self, key: str) -> int:
        total = 0
        for ch in key[:_MAX_KEY_CHARS]:
            total = (total * _PRIME + (ord(ch) - 96)) % len(self._buckets)
        return total

    def set(self, key: str, value: V) -> None:
        index = self._hash(key)
        chain = self._buckets[index]
        if chain is None:
            chain = self._buckets[index] = []
        for i, (k, _) in enumerate(chain):
            if k == key:
                chain[i] = (key, value)
                return
        chain.append((key, value))
        self._count += 1

    def get(self, key: str) -> Optional[V]:
        chain = self._buckets[self._hash(key)]
        if chain:
            for k, v in chain:
                if k == key:
                    return v
        return None

    def bucket_lengths(self) -> List[int]:
        return [len(chain) if chain else 0 for chain in self._buckets]

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return self._count
