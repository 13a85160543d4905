"""
In-memory registry of conversation engines, one per chat session.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from stackit_assistant.config import settings
from stackit_assistant.engine.conversation import ConversationEngine

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], ConversationEngine]


@dataclass
class SessionEntry:
    """Registered engine and its expiration."""
    engine: ConversationEngine
    expires_at: float  # Unix timestamp


class SessionRegistry:
    """
    Keeps one ConversationEngine per session id.
    
    Features:
    - Sliding TTL: each access pushes the expiration forward
    - Size limit: the least recently created session is evicted first
    - Nothing is persisted; a restart starts every conversation afresh
    """
    
    def __init__(
        self,
        factory: EngineFactory,
        ttl_seconds: Optional[int] = None,
        max_size: Optional[int] = None
    ):
        """
        Initialize the registry.
        
        Args:
            factory: Builds a fresh engine for a new session
            ttl_seconds: Idle time before a session expires (defaults to config)
            max_size: Maximum number of live sessions (defaults to config)
        """
        self.factory = factory
        self.ttl = ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds
        self.max_size = max_size if max_size is not None else settings.max_sessions
        self._store: Dict[str, SessionEntry] = {}
        self._lock = asyncio.Lock()
    
    async def get_or_create(self, session_id: str) -> ConversationEngine:
        """Return the session's engine, creating it if missing or expired."""
        async with self._lock:
            now = time.time()
            entry = self._store.get(session_id)
            
            if entry is not None and now > entry.expires_at:
                logger.info(f"Session {session_id} expired")
                del self._store[session_id]
                entry = None
            
            if entry is None:
                if len(self._store) >= self.max_size:
                    oldest_key = next(iter(self._store))
                    logger.info(f"Session limit reached, evicting {oldest_key}")
                    del self._store[oldest_key]
                entry = SessionEntry(engine=self.factory(), expires_at=now + self.ttl)
                self._store[session_id] = entry
                logger.info(f"Session {session_id} created")
            else:
                entry.expires_at = now + self.ttl
            
            return entry.engine
    
    async def cleanup_expired(self) -> int:
        """
        Remove expired sessions.
        
        Returns:
            Number of sessions removed
        """
        async with self._lock:
            now = time.time()
            expired_keys = [
                key for key, entry in self._store.items()
                if now > entry.expires_at
            ]
            
            for key in expired_keys:
                del self._store[key]
            
            return len(expired_keys)
    
    def size(self) -> int:
        return len(self._store)
    
    async def purge_periodically(self, interval_seconds: float) -> None:
        """Run cleanup_expired every interval until cancelled."""
        while True:
            await asyncio.sleep(interval_seconds)
            removed = await self.cleanup_expired()
            if removed:
                logger.info(f"Removed {removed} expired sessions, {self.size()} active")
