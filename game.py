from __future__ import annotations

# Facade module that re-exports the match_core functionality.
# Hosts and tests import from here; single-responsibility modules live under match_core/*.

from match_core.card import Card, Position
from match_core.position_index import DEFAULT_BUCKETS, PositionIndex, key_for
from match_core.graph import AdjacencyGraph
from match_core.history import FLIP, MoveEntry, MoveHistory
from match_core.ledger import LedgerEntry, ScoreLedger
from match_core.outcome import ErrorKind, Outcome
from match_core.deal import BASE_SYMBOLS, deal_cards, make_symbols, validate_dimensions
from match_core.engine import (
    MATCH_POINTS,
    GameEngine,
    Hint,
    Phase,
    counter_labels,
    final_score,
    move_bonus,
    new_game,
    time_bonus,
)
from match_core.registry import GameSlot, GameStore

__all__ = [
    "AdjacencyGraph",
    "BASE_SYMBOLS",
    "Card",
    "DEFAULT_BUCKETS",
    "ErrorKind",
    "FLIP",
    "GameEngine",
    "GameSlot",
    "GameStore",
    "Hint",
    "LedgerEntry",
    "MATCH_POINTS",
    "MoveEntry",
    "MoveHistory",
    "Outcome",
    "Phase",
    "Position",
    "PositionIndex",
    "ScoreLedger",
    "counter_labels",
    "deal_cards",
    "final_score",
    "key_for",
    "make_symbols",
    "move_bonus",
    "new_game",
    "time_bonus",
    "validate_dimensions",
]


def main() -> None:
    # CLI driver delegated to match_core.cli
    from match_core.cli import main as _main
    raise SystemExit(_main())


if __name__ == '__main__':
    main()
