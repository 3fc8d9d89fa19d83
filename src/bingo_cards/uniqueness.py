from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Set

from .models import CELL_BLANK, CELL_FREE, GeneratedCell

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_MS = 3_600_000
DEFAULT_CLEANUP_INTERVAL_MS = 60_000
HASH_SEPARATOR = "-"


def generate_card_hash(cells: Sequence[GeneratedCell]) -> str:
    """Position-aware fingerprint of a cell sequence.

    Free cells map to 'F', blanks to 'B', numbers to their decimal value.
    """
    parts = []
    for cell in cells:
        if cell.type == CELL_FREE:
            parts.append("F")
        elif cell.type == CELL_BLANK:
            parts.append("B")
        else:
            parts.append(str(cell.value))
    return HASH_SEPARATOR.join(parts)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class SessionData:
    last_accessed: float
    hashes: Set[str] = field(default_factory=set)


class CardRegistry:
    """Per-session set of issued card hashes with sliding TTL expiry.

    Expired sessions are swept opportunistically from `register` and `exists`
    at most once per cleanup interval; there is no background timer.
    """

    def __init__(
        self,
        *,
        session_ttl_ms: float = DEFAULT_SESSION_TTL_MS,
        cleanup_interval_ms: float = DEFAULT_CLEANUP_INTERVAL_MS,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._clock = clock or _monotonic_ms
        self._sessions: Dict[str, SessionData] = {}
        self._lock = threading.Lock()
        self.set_session_ttl(session_ttl_ms)
        self.set_cleanup_interval(cleanup_interval_ms)
        self._last_cleanup = self._clock()

    @property
    def session_ttl_ms(self) -> float:
        return self._session_ttl_ms

    @property
    def cleanup_interval_ms(self) -> float:
        return self._cleanup_interval_ms

    def set_session_ttl(self, ms: float) -> None:
        if ms < 0:
            raise ValueError("session TTL must be >= 0")
        self._session_ttl_ms = ms

    def set_cleanup_interval(self, ms: float) -> None:
        if ms < 0:
            raise ValueError("cleanup interval must be >= 0")
        self._cleanup_interval_ms = ms

    def _maybe_cleanup(self, now: float) -> None:
        if now - self._last_cleanup >= self._cleanup_interval_ms:
            self._cleanup(now)

    def _cleanup(self, now: float) -> int:
        expired = [
            sid
            for sid, data in self._sessions.items()
            if now - data.last_accessed > self._session_ttl_ms
        ]
        for sid in expired:
            del self._sessions[sid]
        self._last_cleanup = now
        if expired:
            logger.debug("expired %d idle session(s)", len(expired))
        return len(expired)

    def register(self, session_id: str, card_hash: str) -> bool:
        """Record `card_hash` for the session. False means it was already issued."""
        with self._lock:
            now = self._clock()
            self._maybe_cleanup(now)
            data = self._sessions.get(session_id)
            if data is None:
                data = SessionData(last_accessed=now)
                self._sessions[session_id] = data
            data.last_accessed = now
            if card_hash in data.hashes:
                return False
            data.hashes.add(card_hash)
            return True

    def exists(self, session_id: str, card_hash: str) -> bool:
        with self._lock:
            now = self._clock()
            self._maybe_cleanup(now)
            data = self._sessions.get(session_id)
            if data is None:
                return False
            data.last_accessed = now
            return card_hash in data.hashes

    def clear_session(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def cleanup_expired_sessions(self) -> int:
        with self._lock:
            return self._cleanup(self._clock())

    def get_session_count(self, session_id: str) -> int:
        with self._lock:
            data = self._sessions.get(session_id)
            return len(data.hashes) if data else 0

    def get_active_session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get_session_last_accessed(self, session_id: str) -> Optional[float]:
        with self._lock:
            data = self._sessions.get(session_id)
            return data.last_accessed if data else None
