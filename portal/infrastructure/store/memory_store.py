from __future__ import annotations

import time
from uuid import uuid4

from portal.application.ports.session_store import ExtensionSessionStorePort
from portal.domain.entities.booking import Booking
from portal.domain.entities.extension_session import ExtensionSession


class MemoryExtensionSessionStore(ExtensionSessionStorePort):
    def __init__(self, ttl_seconds: float = 3600.0, limit: int = 1000) -> None:
        self._bookings: dict[str, Booking] = {}
        self._sessions: dict[str, ExtensionSession] = {}
        self._touched_at: dict[str, float] = {}
        self._ttl_seconds = ttl_seconds
        self._limit = limit

    def create(self, booking: Booking, session: ExtensionSession) -> str:
        self._evict()
        session_id = uuid4().hex
        self._bookings[session_id] = booking
        self._sessions[session_id] = session
        self._touched_at[session_id] = time.time()
        return session_id

    def get(self, session_id: str) -> tuple[Booking, ExtensionSession] | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if time.time() - self._touched_at.get(session_id, 0.0) > self._ttl_seconds:
            self.delete(session_id)
            return None
        return self._bookings[session_id], session

    def save(self, session_id: str, session: ExtensionSession) -> None:
        # Writes to a discarded session are dropped.
        if session_id not in self._sessions:
            return
        self._sessions[session_id] = session
        self._touched_at[session_id] = time.time()

    def delete(self, session_id: str) -> None:
        self._bookings.pop(session_id, None)
        self._sessions.pop(session_id, None)
        self._touched_at.pop(session_id, None)

    def _evict(self) -> None:
        now = time.time()
        for session_id, touched in list(self._touched_at.items()):
            if now - touched > self._ttl_seconds:
                self.delete(session_id)
        while len(self._sessions) >= self._limit:
            oldest = min(self._touched_at, key=self._touched_at.get)
            self.delete(oldest)
