from __future__ import annotations

import threading
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional

from .session import GameSession


class UnknownSessionError(KeyError):
    pass


class SessionRegistry:
    """
    In-memory store of live sessions for the HTTP layer.

    Each session has its own lock; `locked()` holds it for the duration of a
    move so that only one move is in flight per session. When more than
    `max_sessions` are stored the least recently created one is evicted.
    """

    def __init__(self, max_sessions: int = 1000) -> None:
        self.max_sessions = max(1, int(max_sessions))
        self._lock = threading.RLock()
        self._sessions: 'OrderedDict[str, GameSession]' = OrderedDict()
        self._locks: Dict[str, threading.Lock] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, factory: Callable[[], GameSession]) -> str:
        session = factory()
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = session
            self._locks[session_id] = threading.Lock()
            while len(self._sessions) > self.max_sessions:
                old_id, _ = self._sessions.popitem(last=False)
                self._locks.pop(old_id, None)
        return session_id

    def get(self, session_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSessionError(session_id)
        return session

    def find(self, session_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
            self._locks.pop(session_id, None)

    @contextmanager
    def locked(self, session_id: str) -> Iterator[GameSession]:
        """Yields the session while holding its single-writer lock."""
        with self._lock:
            session = self._sessions.get(session_id)
            lock = self._locks.get(session_id)
        if session is None or lock is None:
            raise UnknownSessionError(session_id)
        with lock:
            yield session
