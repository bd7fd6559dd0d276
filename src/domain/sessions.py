"""
Session store - volatile per-user registration state.

Interaction events arrive as independent tasks, so the in-progress
registration lives here between them, keyed by user id. Sessions are
never persisted: a process restart drops every in-flight registration.

Concurrency
===========

Callers wrap every read-validate-mutate sequence in ``locked(user_id)``.
The lock is an ``asyncio.Lock`` per user id, created on demand and dropped
once nobody holds or waits on it. Different users never contend.

get/put/delete themselves are plain dict operations with no awaits, so
they are atomic with respect to the event loop.

Expiry
======

A session untouched for ``ttl_seconds`` is treated as absent on read and
is removed by ``evict_expired()``. Sessions whose user lock is currently
held are never evicted.
"""

import logging
import time
from asyncio import Lock
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .ports import ContactInfo, SessionStep

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RegistrationSession:
    """In-progress registration for one user."""

    user_id: str
    step: SessionStep = SessionStep.AWAITING_COUNTRY
    country: str | None = None
    contact: ContactInfo | None = None
    consented_at: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    last_activity: float = 0.0


@dataclass
class _KeyLock:
    lock: Lock = field(default_factory=Lock)
    holders: int = 0  # tasks holding or waiting on the lock


class SessionStore:
    """In-memory session map with per-user locking and idle expiry."""

    def __init__(
        self,
        ttl_seconds: float = 900,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize an empty store.

        Args:
            ttl_seconds: Idle window after which a session is evictable
            clock: Monotonic clock, injectable for tests
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, RegistrationSession] = {}
        self._locks: dict[str, _KeyLock] = {}

    @asynccontextmanager
    async def locked(self, user_id: str) -> AsyncIterator[None]:
        """Exclusive critical section for one user's session."""
        entry = self._locks.get(user_id)
        if entry is None:
            entry = self._locks[user_id] = _KeyLock()
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[user_id]

    def is_locked(self, user_id: str) -> bool:
        return user_id in self._locks

    def get(self, user_id: str) -> RegistrationSession | None:
        """Return the live session for a user, dropping it first if it has expired."""
        session = self._sessions.get(user_id)
        if session is None:
            return None
        if self._is_expired(session):
            logger.info("Session for user %s expired in step %s", user_id, session.step.value)
            del self._sessions[user_id]
            return None
        return session

    def put(self, session: RegistrationSession) -> None:
        """Store a session, replacing any previous one for the same user, and refresh its idle timer."""
        session.last_activity = self._clock()
        self._sessions[session.user_id] = session

    def delete(self, user_id: str) -> RegistrationSession | None:
        return self._sessions.pop(user_id, None)

    def evict_expired(self) -> int:
        """
        Remove idle sessions.

        Returns:
            Number of sessions removed
        """
        expired = [
            user_id
            for user_id, session in self._sessions.items()
            if self._is_expired(session) and not self.is_locked(user_id)
        ]
        for user_id in expired:
            del self._sessions[user_id]
        if expired:
            logger.info("Evicted %d idle registration session(s)", len(expired))
        return len(expired)

    def _is_expired(self, session: RegistrationSession) -> bool:
        return self._clock() - session.last_activity > self._ttl

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions
