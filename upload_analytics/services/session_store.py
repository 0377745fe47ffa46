"""
Session Store - in-memory registry of analysis sessions
LRU eviction with TTL expiry, guarded by an asyncio lock
"""

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from upload_analytics.config.settings import settings
from upload_analytics.core.exceptions import SessionNotFoundError
from upload_analytics.services.session import AnalysisSession
from upload_analytics.utils.logging_config import log_session_operation

logger = logging.getLogger(__name__)


class SessionStore:
    """Process-local session registry; nothing survives a restart"""

    def __init__(self, max_sessions: Optional[int] = None, ttl: Optional[int] = None):
        self.sessions: "OrderedDict[str, AnalysisSession]" = OrderedDict()
        self.expiry_map: Dict[str, float] = {}
        self.max_sessions = max_sessions or settings.MAX_SESSIONS
        self.ttl = settings.SESSION_TTL if ttl is None else ttl
        self._lock = asyncio.Lock()

        self.hit_count = 0
        self.miss_count = 0
        self.eviction_count = 0

    async def add(self, session: AnalysisSession) -> str:
        async with self._lock:
            key = session.session_id

            # Remove least recently used if at capacity
            if len(self.sessions) >= self.max_sessions and key not in self.sessions:
                oldest_key = next(iter(self.sessions))
                self._remove(oldest_key)
                self.eviction_count += 1
                logger.info(f"♻️ Evicted session {oldest_key} (capacity {self.max_sessions})")

            self.sessions[key] = session
            self.sessions.move_to_end(key)

            if self.ttl:
                self.expiry_map[key] = time.time() + self.ttl
            elif key in self.expiry_map:
                del self.expiry_map[key]

            log_session_operation("add", key)
            return key

    async def get(self, session_id: str) -> AnalysisSession:
        """
        Session by id; unknown or expired ids raise SessionNotFoundError
        """
        async with self._lock:
            if session_id not in self.sessions or self._is_expired(session_id):
                self._remove(session_id)
                self.miss_count += 1
                log_session_operation("get", session_id, hit=False)
                raise SessionNotFoundError(session_id)

            # Move to end (LRU) and extend the expiry window
            self.sessions.move_to_end(session_id)
            if self.ttl:
                self.expiry_map[session_id] = time.time() + self.ttl

            self.hit_count += 1
            log_session_operation("get", session_id, hit=True)
            return self.sessions[session_id]

    async def delete(self, session_id: str):
        async with self._lock:
            if session_id not in self.sessions:
                raise SessionNotFoundError(session_id)
            self._remove(session_id)
            log_session_operation("delete", session_id)

    async def purge_expired(self) -> int:
        async with self._lock:
            expired = [key for key in list(self.sessions) if self._is_expired(key)]
            for key in expired:
                self._remove(key)
            if expired:
                logger.info(f"🧹 Purged {len(expired)} expired sessions")
            return len(expired)

    async def clear(self):
        async with self._lock:
            self.sessions.clear()
            self.expiry_map.clear()
            log_session_operation("clear", "all")

    async def session_ids(self) -> List[str]:
        async with self._lock:
            return list(self.sessions.keys())

    def _is_expired(self, session_id: str) -> bool:
        expires_at = self.expiry_map.get(session_id)
        return expires_at is not None and time.time() > expires_at

    def _remove(self, session_id: str):
        self.sessions.pop(session_id, None)
        self.expiry_map.pop(session_id, None)

    def __len__(self) -> int:
        return len(self.sessions)

    def get_stats(self) -> Dict[str, Any]:
        total_requests = self.hit_count + self.miss_count
        hit_rate = (self.hit_count / total_requests * 100) if total_requests > 0 else 0

        return {
            "backend": "memory",
            "active_sessions": len(self.sessions),
            "max_sessions": self.max_sessions,
            "ttl_seconds": self.ttl,
            "hit_count": self.hit_count,
            "miss_count": self.miss_count,
            "eviction_count": self.eviction_count,
            "hit_rate_percent": round(hit_rate, 2),
        }
