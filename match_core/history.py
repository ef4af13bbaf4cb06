from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .card import Card

FLIP = "flip"


@dataclass(frozen=True)
class MoveEntry:
    card: Card
    action: str
    timestamp: float


class MoveHistory:
    """LIFO stack of flip actions backing single-step undo."""

    def __init__(self) -> None:
        self._items: List[MoveEntry] = []

    def push(self, entry: MoveEntry) -> None:
        self._items.append(entry)

    def pop(self) -> Optional[MoveEntry]:
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> Optional[MoveEntry]:
        if not self._items:
            return None
        return self._items[-1]

    def is_empty(self) -> bool:
        return not self._items

    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)
