from __future__ import annotations

import random
from typing import List, Optional

from .card import Card, Position

BASE_SYMBOLS = (
    "♠", "♥", "♦", "♣", "★", "●", "▲", "■", "◆",
    "♪", "☀", "☂", "☘", "⚑", "✿", "♛", "☾", "✚",
)


def validate_dimensions(rows: int, cols: int) -> Optional[str]:
    """Returns a user-facing reason the grid is unusable, or None if it is fine."""
    if isinstance(rows, bool) or isinstance(cols, bool) or not isinstance(rows, int) or not isinstance(cols, int):
        return "rows and cols must be integers"
    if rows <= 0 or cols <= 0:
        return f"rows and cols must be positive (got {rows}x{cols})"
    if (rows * cols) % 2 != 0:
        return f"a {rows}x{cols} grid has {rows * cols} cells; the card count must be even"
    return None


def make_symbols(pairs: int) -> List[str]:
    """Distinct symbols for `pairs` pairs; numbered variants once the base set runs out."""
    symbols: List[str] = []
    round_no = 1
    while len(symbols) < pairs:
        for base in BASE_SYMBOLS:
            if len(symbols) == pairs:
                break
            symbols.append(base if round_no == 1 else f"{base}{round_no}")
        round_no += 1
    return symbols


def deal_cards(rows: int, cols: int, rng: Optional[random.Random] = None, seed: Optional[int] = None) -> List[Card]:
    """Creates rows*cols cards (two per symbol), shuffles them and assigns row-major positions."""
    reason = validate_dimensions(rows, cols)
    if reason is not None:
        raise ValueError(reason)
    rng = rng or random.Random(seed)
    deck: List[tuple] = []
    for i, symbol in enumerate(make_symbols(rows * cols // 2)):
        deck.append((i * 2, symbol))
        deck.append((i * 2 + 1, symbol))
    rng.shuffle(deck)
    return [
        Card(id=card_id, symbol=symbol, position=Position(*divmod(index, cols)))
        for index, (card_id, symbol) in enumerate(deck)
    ]
