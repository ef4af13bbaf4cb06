from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, NamedTuple


class Position(NamedTuple):
    row: int
    col: int


@dataclass(eq=False)
class Card:
    """A single card. Identity and symbol never change; flags do."""
    id: int
    symbol: str
    position: Position
    flipped: bool = False
    matched: bool = False

    def flip(self) -> None:
        self.flipped = not self.flipped

    def match(self) -> None:
        self.matched = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "flipped": self.flipped,
            "matched": self.matched,
            "position": {"row": self.position.row, "col": self.position.col},
        }
