from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Optional, Set


class AdjacencyGraph:
    """Undirected graph over card ids; edges join orthogonally adjacent cells."""

    def __init__(self) -> None:
        self._adj: Dict[int, List[int]] = {}

    def add_vertex(self, vertex: int) -> None:
        if vertex not in self._adj:
            self._adj[vertex] = []

    def add_edge(self, a: int, b: int) -> None:
        """Registers a-b in both directions. Repeats and self-loops are ignored."""
        if a == b:
            return
        self.add_vertex(a)
        self.add_vertex(b)
        if b not in self._adj[a]:
            self._adj[a].append(b)
        if a not in self._adj[b]:
            self._adj[b].append(a)

    def neighbors(self, vertex: int) -> List[int]:
        return list(self._adj.get(vertex, ()))

    def edge_count(self) -> int:
        return sum(len(n) for n in self._adj.values()) // 2

    def __contains__(self, vertex: int) -> bool:
        return vertex in self._adj

    def __len__(self) -> int:
        return len(self._adj)

    def _collect(self, start: int, visited: Set[int]) -> List[int]:
        # Depth-first with an explicit stack; neighbours are pushed in reverse
        # so they are visited in insertion order.
        component: List[int] = []
        stack = [start]
        visited.add(start)
        while stack:
            current = stack.pop()
            component.append(current)
            for nxt in reversed(self._adj.get(current, ())):
                if nxt not in visited:
                    visited.add(nxt)
                    stack.append(nxt)
        return component

    def connected_components(self, order: Optional[Iterable[int]] = None) -> List[List[int]]:
        """
        Partitions the vertices into connected components.

        `order` controls which unvisited vertex seeds the next component
        (defaults to vertex insertion order).
        """
        visited: Set[int] = set()
        components: List[List[int]] = []
        for vertex in (order if order is not None else self._adj):
            if vertex in self._adj and vertex not in visited:
                components.append(self._collect(vertex, visited))
        return components

    def shortest_path(self, start: int, target: int) -> Optional[List[int]]:
        """Breadth-first search. Returns [start, ..., target] or None if unreachable."""
        if start not in self._adj or target not in self._adj:
            return None
        parent: Dict[int, int] = {}
        visited = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            if current == target:
                path = [current]
                while current != start:
                    current = parent[current]
                    path.append(current)
                path.reverse()
                return path
            for nxt in self._adj[current]:
                if nxt not in visited:
                    visited.add(nxt)
                    parent[nxt] = current
                    queue.append(nxt)
        return None
