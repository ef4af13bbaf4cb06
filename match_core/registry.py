from __future__ import annotations

import logging
import os
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from .engine import Clock, GameEngine, new_game
from .outcome import Outcome

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 1800.0
DEFAULT_MAX_GAMES = 1000


def _env_number(name: str, default: Any, cast: Callable[[str], Any]) -> Any:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("ignoring %s=%r, using %s", name, raw, default)
        return default


def _uuid_ids() -> str:
    return uuid.uuid4().hex


@dataclass
class GameSlot:
    """A live game plus the lock that serializes calls to it."""
    engine: GameEngine
    last_used: float
    lock: threading.Lock = field(default_factory=threading.Lock)

    def __enter__(self) -> GameEngine:
        self.lock.acquire()
        return self.engine

    def __exit__(self, *exc: Any) -> None:
        self.lock.release()


class GameStore:
    """
    Registry of live games for a host serving several players.

    Games idle longer than `ttl` are reaped on every create/get, and when the
    store is full the least recently used game is evicted to make room.
    """

    def __init__(
        self,
        ttl: Optional[float] = None,
        max_games: Optional[int] = None,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Clock] = None,
    ):
        if ttl is None:
            ttl = _env_number("MATCH_GAME_TTL", DEFAULT_TTL_SECONDS, float)
        if max_games is None:
            max_games = _env_number("MATCH_MAX_GAMES", DEFAULT_MAX_GAMES, int)
        if max_games <= 0:
            raise ValueError("max_games must be positive")
        self.ttl = ttl
        self.max_games = max_games
        self._new_id = id_factory or _uuid_ids
        self._clock: Clock = clock or time.monotonic
        self._slots: Dict[str, GameSlot] = {}
        self._lock = threading.Lock()

    def create(self, rows: int, cols: int, **engine_kwargs: Any) -> Tuple[Outcome, Optional[str]]:
        outcome, engine = new_game(rows, cols, **engine_kwargs)
        if engine is None:
            return outcome, None
        with self._lock:
            now = self._clock()
            self._reap(now)
            while len(self._slots) >= self.max_games:
                oldest = min(self._slots, key=lambda gid: self._slots[gid].last_used)
                del self._slots[oldest]
                logger.info("evicted game %s (store full)", oldest)
            game_id = self._new_id()
            self._slots[game_id] = GameSlot(engine=engine, last_used=now)
        logger.info("created %dx%d game %s", rows, cols, game_id)
        return outcome, game_id

    def get(self, game_id: str) -> Optional[GameSlot]:
        with self._lock:
            now = self._clock()
            self._reap(now)
            slot = self._slots.get(game_id)
            if slot is not None:
                slot.last_used = now
            return slot

    def remove(self, game_id: str) -> bool:
        with self._lock:
            return self._slots.pop(game_id, None) is not None

    def evict_expired(self) -> int:
        with self._lock:
            return self._reap(self._clock())

    def _reap(self, now: float) -> int:
        expired = [gid for gid, slot in self._slots.items() if now - slot.last_used > self.ttl]
        for gid in expired:
            del self._slots[gid]
            logger.info("evicted idle game %s", gid)
        return len(expired)

    def __contains__(self, game_id: str) -> bool:
        return game_id in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._slots))

    def __len__(self) -> int:
        return len(self._slots)
