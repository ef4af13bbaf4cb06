from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .card import Card


class ErrorKind(str, Enum):
    INVALID_DIMENSIONS = "InvalidDimensions"
    OUT_OF_BOUNDS = "OutOfBounds"
    CARD_NOT_FOUND = "CardNotFound"
    ALREADY_MATCHED = "AlreadyMatched"
    ALREADY_FLIPPED = "AlreadyFlipped"
    PAIR_PENDING = "PairPending"
    NO_PENDING_PAIR = "NoPendingPair"
    NO_MOVE_TO_UNDO = "NoMoveToUndo"
    GAME_OVER = "GameOver"


@dataclass(frozen=True)
class Outcome:
    """Result of an engine operation: success with a snapshot, or a named failure."""
    ok: bool
    message: str
    error: Optional[ErrorKind] = None
    snapshot: Optional[Dict[str, Any]] = None
    card: Optional[Card] = None

    @classmethod
    def success(cls, message: str, snapshot: Dict[str, Any], card: Optional[Card] = None) -> "Outcome":
        return cls(ok=True, message=message, snapshot=snapshot, card=card)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "Outcome":
        return cls(ok=False, message=message, error=error)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"ok": self.ok, "message": self.message}
        if self.error is not None:
            out["error"] = self.error.value
        if self.snapshot is not None:
            out["state"] = self.snapshot
        if self.card is not None:
            out["card"] = self.card.to_dict()
        return out
