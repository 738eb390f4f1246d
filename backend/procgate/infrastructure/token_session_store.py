"""In-Memory Token Session Store — bearer token → identity attributes with per-entry TTL.

Invariants:
    - Every read and write happens under one lock (no torn insert/lookup/remove)
    - An entry older than ttl_seconds is treated as absent and dropped on lookup
    - evict_expired() sweeps all stale entries and returns how many were removed
    - Only identity attributes are cached — never the token's validity

Design Decisions:
    - threading.Lock over asyncio.Lock: methods are sync and never await, and the
      store stays safe if a threadpool endpoint touches it
    - Injected instance (app.state) instead of a module-level dict
      (ADR: testable, replaceable by Redis without touching callers)
"""

import logging
import threading
import time
from typing import Callable

from procgate.core.domain_types import TokenSession

logger = logging.getLogger(__name__)


class InMemoryTokenSessionStore:
    """Process-local TokenSessionStore implementation."""

    def __init__(
        self,
        ttl_seconds: float = 43_200,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, TokenSession] = {}

    def remember(
        self, token: str, login_id: str | None, login_type: str | None,
    ) -> TokenSession | None:
        if not token:
            return None
        session = TokenSession(
            login_id=login_id, login_type=login_type, stored_at=self._clock(),
        )
        with self._lock:
            self._sessions[token] = session
        return session

    def get(self, token: str) -> TokenSession | None:
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if self._is_expired(session):
                del self._sessions[token]
                return None
            return session

    def clear(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def evict_expired(self) -> int:
        with self._lock:
            stale = [t for t, s in self._sessions.items() if self._is_expired(s)]
            for token in stale:
                del self._sessions[token]
        if stale:
            logger.info(f"Evicted {len(stale)} expired token session(s)")
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _is_expired(self, session: TokenSession) -> bool:
        return self._clock() - session.stored_at >= self.ttl_seconds
