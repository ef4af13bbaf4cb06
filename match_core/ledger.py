from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class LedgerEntry:
    label: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "score": self.score}


@dataclass
class _Node:
    entry: LedgerEntry
    left: Optional["_Node"] = None
    right: Optional["_Node"] = None


class ScoreLedger:
    """
    Completed-game scores kept in a binary insertion tree, ascending by score.

    A new entry goes left only when its score is strictly lower than the node's,
    so equal scores always land to the right and an in-order walk lists them in
    insertion order. Retrieval sorts that walk (stable) by descending score.
    """

    def __init__(self) -> None:
        self._root: Optional[_Node] = None
        self._size = 0

    def insert(self, label: str, score: int) -> LedgerEntry:
        entry = LedgerEntry(label=label, score=int(score))
        node = _Node(entry)
        self._size += 1
        if self._root is None:
            self._root = node
            return entry
        current = self._root
        while True:
            if entry.score < current.entry.score:
                if current.left is None:
                    current.left = node
                    return entry
                current = current.left
            else:
                if current.right is None:
                    current.right = node
                    return entry
                current = current.right

    def entries(self) -> List[LedgerEntry]:
        """In-order traversal (ascending score), iterative."""
        out: List[LedgerEntry] = []
        stack: List[_Node] = []
        current = self._root
        while stack or current is not None:
            while current is not None:
                stack.append(current)
                current = current.left
            current = stack.pop()
            out.append(current.entry)
            current = current.right
        return out

    def top_n(self, limit: int = 10) -> List[LedgerEntry]:
        if limit <= 0:
            return []
        ranked = sorted(self.entries(), key=lambda e: e.score, reverse=True)
        return ranked[:limit]

    def __len__(self) -> int:
        return self._size
