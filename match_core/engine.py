from __future__ import annotations

import itertools
import logging
import random
import time
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .card import Card, Position
from .deal import deal_cards, validate_dimensions
from .graph import AdjacencyGraph
from .history import FLIP, MoveEntry, MoveHistory
from .ledger import ScoreLedger
from .outcome import ErrorKind, Outcome
from .position_index import DEFAULT_BUCKETS, PositionIndex, key_for

logger = logging.getLogger(__name__)

Clock = Callable[[], float]  # seconds, monotonic

MATCH_POINTS = 10
TIME_BONUS_CAP = 1000
MOVE_BONUS_CAP = 50

# up, down, left, right
_DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Phase(str, Enum):
    PLAYING = "playing"
    WON = "won"


@dataclass(frozen=True)
class Hint:
    message: str
    symbol: Optional[str] = None
    positions: Tuple[Position, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "symbol": self.symbol,
            "cards": [{"row": p.row, "col": p.col} for p in self.positions],
        }


def time_bonus(elapsed_ms: int) -> int:
    return max(0, TIME_BONUS_CAP - elapsed_ms // 1000)


def move_bonus(moves: int) -> int:
    return max(0, MOVE_BONUS_CAP - moves)


def final_score(matched_pairs: int, elapsed_ms: int, moves: int) -> int:
    """Score awarded on a win: match points plus time and move bonuses (each floored at 0)."""
    return MATCH_POINTS * matched_pairs + time_bonus(elapsed_ms) + move_bonus(moves)


def counter_labels(prefix: str = "Player") -> Callable[[], str]:
    """Label source yielding Player_1, Player_2, ..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}_{next(counter)}"


class GameEngine:
    """
    State machine for one card-matching game.

    Every operation completes synchronously. Failures come back as
    `Outcome.failure(...)` and leave the game untouched. Mismatched pairs stay
    face up until the caller invokes `flip_back()`; the engine never waits.
    """

    def __init__(
        self,
        rows: int = 4,
        cols: int = 4,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        label_source: Optional[Callable[[], str]] = None,
        ledger: Optional[ScoreLedger] = None,
        index_size: int = DEFAULT_BUCKETS,
    ):
        reason = validate_dimensions(rows, cols)
        if reason is not None:
            raise ValueError(reason)
        self.rows = rows
        self.cols = cols
        self._clock: Clock = clock or time.monotonic
        self._next_label = label_source or counter_labels()

        self.cards: List[Card] = deal_cards(rows, cols, rng=rng, seed=seed)
        self.index: PositionIndex[Card] = PositionIndex(index_size)
        for card in self.cards:
            self.index.set(key_for(*card.position), card)
        self.graph = self._build_graph()
        self.history = MoveHistory()
        # a host may pass one ledger to several games so scores carry across them
        self.ledger = ledger if ledger is not None else ScoreLedger()

        self.pending: List[Card] = []
        self.moves = 0
        self.score = 0
        self.phase = Phase.PLAYING
        self._started = self._clock()
        self._elapsed_ms: Optional[int] = None
        logger.debug("new %dx%d game, %d cards", rows, cols, len(self.cards))

    # ---------- construction helpers ----------

    def _build_graph(self) -> AdjacencyGraph:
        graph = AdjacencyGraph()
        for row in range(self.rows):
            for col in range(self.cols):
                current = self.card_at(row, col)
                if current is None:
                    continue
                graph.add_vertex(current.id)
                for dr, dc in _DIRECTIONS:
                    neighbour = self.card_at(row + dr, col + dc)
                    if neighbour is not None:
                        graph.add_edge(current.id, neighbour.id)
        return graph

    # ---------- queries ----------

    @property
    def total_cards(self) -> int:
        return self.rows * self.cols

    @property
    def matched_pairs(self) -> int:
        return sum(1 for c in self.cards if c.matched) // 2

    @property
    def elapsed_ms(self) -> int:
        if self._elapsed_ms is not None:
            return self._elapsed_ms
        return max(0, int((self._clock() - self._started) * 1000))

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def card_at(self, row: int, col: int) -> Optional[Card]:
        if not self.in_bounds(row, col):
            return None
        return self.index.get(key_for(row, col))

    def is_won(self) -> bool:
        return all(card.matched for card in self.cards)

    def get_state(self) -> Dict[str, Any]:
        """Read-only snapshot suitable for rendering or JSON."""
        return {
            "rows": self.rows,
            "cols": self.cols,
            "cards": [card.to_dict() for card in self.cards],
            "moves": self.moves,
            "score": self.score,
            "phase": self.phase.value,
            "elapsed_ms": self.elapsed_ms,
            "pending": len(self.pending),
        }

    # ---------- operations ----------

    def flip(self, row: int, col: int) -> Outcome:
        if not self.in_bounds(row, col):
            return Outcome.failure(
                ErrorKind.OUT_OF_BOUNDS,
                f"Invalid card position: ({row}, {col}). "
                f"Valid range: row 0-{self.rows - 1}, col 0-{self.cols - 1}",
            )
        card = self.card_at(row, col)
        if card is None:
            return Outcome.failure(ErrorKind.CARD_NOT_FOUND, f"No card at ({row}, {col})")
        if card.matched:
            return Outcome.failure(ErrorKind.ALREADY_MATCHED, "This card is already matched")
        if card.flipped:
            return Outcome.failure(ErrorKind.ALREADY_FLIPPED, "This card is already flipped")
        if len(self.pending) == 2:
            return Outcome.failure(ErrorKind.PAIR_PENDING, "Flip the unmatched pair back first")

        self.history.push(MoveEntry(card=card, action=FLIP, timestamp=self._clock()))
        card.flip()
        self.pending.append(card)
        self.moves += 1
        logger.debug("flip %s at (%d, %d), moves=%d", card.symbol, row, col, self.moves)

        message = f"Flipped {card.symbol}"
        if len(self.pending) == 2:
            message = self._resolve_pair()
        return Outcome.success(message, self.get_state(), card=card)

    def _resolve_pair(self) -> str:
        first, second = self.pending
        if first.symbol != second.symbol:
            logger.debug("mismatch %s / %s", first.symbol, second.symbol)
            return f"No match: {first.symbol} and {second.symbol}"
        first.match()
        second.match()
        self.score += MATCH_POINTS
        self.pending = []
        logger.debug("match %s, score=%d", first.symbol, self.score)
        if self.is_won():
            self._finish()
            return f"Match found! {first.symbol} - all pairs matched, final score {self.score}"
        return f"Match found! {first.symbol}"

    def _finish(self) -> None:
        self._elapsed_ms = max(0, int((self._clock() - self._started) * 1000))
        self.phase = Phase.WON
        # match points are already in self.score; only the bonuses are added here
        self.score += time_bonus(self._elapsed_ms) + move_bonus(self.moves)
        entry = self.ledger.insert(self._next_label(), self.score)
        logger.info(
            "game won: %s scored %d in %d moves, %d ms",
            entry.label, entry.score, self.moves, self._elapsed_ms,
        )

    def flip_back(self) -> Outcome:
        if self.phase is Phase.WON:
            return Outcome.failure(ErrorKind.GAME_OVER, "Game is over")
        if len(self.pending) != 2 or any(card.matched for card in self.pending):
            return Outcome.failure(ErrorKind.NO_PENDING_PAIR, "No cards to flip back")
        for card in self.pending:
            card.flip()
        self.pending = []
        return Outcome.success("Cards flipped back", self.get_state())

    def undo(self) -> Outcome:
        """
        Reverts the most recent flip: the card goes face down, leaves the pending
        pair and the move counter drops by one. A match the flip completed is
        not reversed and its points are not refunded. A won game is final.
        """
        if self.phase is Phase.WON:
            return Outcome.failure(ErrorKind.GAME_OVER, "Game is over")
        entry = self.history.pop()
        if entry is None:
            return Outcome.failure(ErrorKind.NO_MOVE_TO_UNDO, "No moves to undo")
        card = entry.card
        card.flipped = False
        if card in self.pending:
            self.pending.remove(card)
        self.moves -= 1
        logger.debug("undo flip of card %d, moves=%d", card.id, self.moves)
        return Outcome.success("Move undone", self.get_state(), card=card)

    # ---------- derived analyses ----------

    def hint(self) -> Hint:
        """
        Suggests a pair still on the board. The first symbol (in card order)
        with two unmatched cards is chosen; any such pair is a valid hint.
        """
        unmatched = [card for card in self.cards if not card.matched]
        if not unmatched:
            return Hint("No hints needed - you've matched all cards!")
        counts = Counter(card.symbol for card in unmatched)
        for card in unmatched:
            if counts[card.symbol] >= 2:
                symbol = card.symbol
                positions = tuple(c.position for c in unmatched if c.symbol == symbol)[:2]
                return Hint(f'Look for the symbol "{symbol}"', symbol, positions)
        return Hint("No obvious pairs found. Keep exploring!")

    def connected_components(self) -> List[List[int]]:
        return self.graph.connected_components(card.id for card in self.cards)

    def connectivity_analysis(self) -> Dict[str, Any]:
        components = self.connected_components()
        sizes = [len(c) for c in components]
        return {
            "components": len(components),
            "sizes": sizes,
            "largest": max(sizes, default=0),
            "total_vertices": len(self.graph),
        }

    def path_analysis(self, start: Tuple[int, int], end: Tuple[int, int]) -> Optional[Dict[str, Any]]:
        """Shortest card-to-card path between two cells, or None if either cell is empty or unreachable."""
        a = self.card_at(*start)
        b = self.card_at(*end)
        if a is None or b is None:
            return None
        ids = self.graph.shortest_path(a.id, b.id)
        if ids is None:
            return None
        by_id = {card.id: card for card in self.cards}
        return {
            "ids": ids,
            "positions": [by_id[i].position for i in ids],
            "steps": len(ids) - 1,
        }

    def sort_by_symbol(self) -> List[Card]:
        return sorted(self.cards, key=lambda c: c.symbol)

    def sort_by_position(self) -> List[Card]:
        return sorted(self.cards, key=lambda c: (c.position.row, c.position.col))

    def get_high_scores(self, limit: int = 10) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.ledger.top_n(limit)]

    def get_analysis(self) -> Dict[str, Any]:
        connectivity = self.connectivity_analysis()
        return {
            "history": {
                "total_moves": self.history.size(),
                "has_last_move": self.history.peek() is not None,
            },
            "graph": {
                "connected_components": connectivity["components"],
                "largest_component": connectivity["largest"],
                "total_vertices": connectivity["total_vertices"],
                "edges": self.graph.edge_count(),
            },
            "index": {
                "total_cards": len(self.cards),
                "stored_keys": len(self.index),
                "table_size": self.index.table_size,
                "longest_chain": max(self.index.bucket_lengths()),
            },
            "sorting": {
                "by_symbol": len(self.sort_by_symbol()),
                "by_position": len(self.sort_by_position()),
            },
        }

    def pretty(self, reveal: bool = False) -> str:
        """Grid as text: '#' face down, the symbol when face up, 'M' once matched."""
        lines: List[str] = []
        for r in range(self.rows):
            row: List[str] = []
            for c in range(self.cols):
                card = self.card_at(r, c)
                if card is None:
                    row.append("?")
                elif reveal:
                    row.append(card.symbol)
                elif card.matched:
                    row.append("M")
                elif card.flipped:
                    row.append(card.symbol)
                else:
                    row.append("#")
            lines.append(" ".join(row))
        return "\n".join(lines)


def new_game(rows: int = 4, cols: int = 4, **kwargs: Any) -> Tuple[Outcome, Optional[GameEngine]]:
    """Validated constructor: an odd or non-positive grid yields INVALID_DIMENSIONS, not an exception."""
    reason = validate_dimensions(rows, cols)
    if reason is not None:
        return Outcome.failure(ErrorKind.INVALID_DIMENSIONS, reason), None
    engine = GameEngine(rows, cols, **kwargs)
    return Outcome.success("Game started! Flip cards to find matches.", engine.get_state()), engine
