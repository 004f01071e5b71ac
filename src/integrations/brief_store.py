"""
Session-scoped storage for uploaded client briefs.

Each editing session keeps its own brief text, which expires after a TTL so
an abandoned session does not hold it forever.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_BRIEF_TTL_SECONDS = 3600


class BriefStore:
    """Thread-safe mapping of session id to brief text with expiry."""

    def __init__(self, ttl_seconds: float = DEFAULT_BRIEF_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._briefs: Dict[str, Tuple[str, float]] = {}

    @classmethod
    def from_config(cls, config: Dict[str, Any], clock: Callable[[], float] = time.monotonic) -> "BriefStore":
        """Build a store whose TTL comes from ``briefs.ttl_seconds``."""
        briefs = (config or {}).get("briefs") or {}
        return cls(ttl_seconds=briefs.get("ttl_seconds") or DEFAULT_BRIEF_TTL_SECONDS, clock=clock)

    def put(self, session_id: str, text: str) -> None:
        if not session_id:
            raise ValueError("session_id is required")
        with self._lock:
            self._briefs[session_id] = (text, self._clock() + self.ttl_seconds)
        logger.info(f"Stored brief for session {session_id} ({len(text)} chars)")

    def get(self, session_id: str) -> Optional[str]:
        """Brief text for the session, or None when absent or expired."""
        with self._lock:
            entry = self._briefs.get(session_id)
            if entry is None:
                return None
            text, expires_at = entry
            if self._clock() >= expires_at:
                del self._briefs[session_id]
                logger.debug(f"Brief for session {session_id} expired")
                return None
            return text

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._briefs.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop expired briefs; returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, (_, expires_at) in self._briefs.items() if now >= expires_at]
            for key in expired:
                del self._briefs[key]
        if expired:
            logger.info(f"Purged {len(expired)} expired briefs")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._briefs)
