"""In-memory session store with per-session locking."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from uuid import uuid4

from songvote.domain.errors import InvalidArgument, NotFound
from songvote.domain.sessions import Session, SessionSummary
from songvote.services.clock import Clock, SystemClock

_logger = logging.getLogger(__name__)


@dataclass
class SessionStore:
    """Owns every session for the lifetime of the process.

    Each session is guarded by its own lock so that operations on different
    sessions never wait on each other. ``_registry_lock`` only protects the
    maps themselves.
    """

    clock: Clock = field(default_factory=SystemClock)
    _sessions: dict[str, Session] = field(default_factory=dict)
    _locks: dict[str, threading.Lock] = field(default_factory=dict)
    _registry_lock: threading.Lock = field(default_factory=threading.Lock)

    def create(self, name: str) -> Session:
        """Create and register a new session."""
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgument("Session name cannot be empty")
        session = Session(id=str(uuid4()), name=name, created_at=self.clock.now())
        with self._registry_lock:
            self._sessions[session.id] = session
            self._locks[session.id] = threading.Lock()
        _logger.info("Session created: id=%s name=%s", session.id, name)
        return session

    def get(self, session_id: str) -> Session:
        """Return a session by id."""
        with self._registry_lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise NotFound("Session not found")
        return session

    def list(self) -> list[SessionSummary]:
        """Return summaries of all sessions in creation order."""
        with self._registry_lock:
            sessions = list(self._sessions.values())
        summaries = []
        for session in sessions:
            with self._lock_for(session.id):
                summaries.append(
                    SessionSummary(
                        id=session.id,
                        name=session.name,
                        created_at=session.created_at,
                        songs_count=len(session.songs),
                    )
                )
        return summaries

    @contextmanager
    def locked(self, session_id: str) -> Iterator[Session]:
        """Yield a session while holding its lock."""
        session = self.get(session_id)
        with self._lock_for(session_id):
            yield session

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks[session_id]
