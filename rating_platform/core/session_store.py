"""
Process-wide session registry.

``SessionStore`` is the interface the authentication gate depends on;
``InMemorySessionStore`` is the single-process implementation guarded by a
lock. Validity is decided lazily by ``lookup``; the periodic sweep only
reclaims memory.
"""
import logging
import secrets
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from rating_platform.core import logging_config  # noqa: F401 – registers TRACE
from rating_platform.models.session import Session
from rating_platform.models.user import UserRole

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# 32 random bytes -> 43 url-safe characters.
TOKEN_BYTES = 32


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class SessionLookupError(LookupError):
    """Raised by ``SessionStore.lookup`` when a token does not resolve."""


class SessionNotFound(SessionLookupError):
    pass


class SessionExpired(SessionLookupError):
    pass


class SessionStore(ABC):
    """Maps opaque tokens to (user id, role snapshot, expiry)."""

    @abstractmethod
    def create(self, user_id: str, role: UserRole, ttl: timedelta) -> str:
        """Register a new session and return its token."""

    @abstractmethod
    def lookup(self, token: str) -> Session:
        """Return the live session for *token* or raise SessionLookupError."""

    @abstractmethod
    def destroy(self, token: str) -> None:
        """Forget *token*. Unknown tokens are ignored."""

    @abstractmethod
    def destroy_for_user(self, user_id: str) -> int:
        """Forget every session of *user_id* and return how many were removed."""

    @abstractmethod
    def sweep(self) -> int:
        """Drop expired sessions and return how many were removed."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every session."""


class InMemorySessionStore(SessionStore):
    def __init__(self, clock: Clock = utcnow) -> None:
        logger.trace("Initializing InMemorySessionStore")
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, user_id: str, role: UserRole, ttl: timedelta) -> str:
        if not isinstance(role, UserRole):
            raise TypeError(f"role must be a UserRole, got {role!r}")
        expires_at = self._clock() + ttl
        with self._lock:
            token = secrets.token_urlsafe(TOKEN_BYTES)
            while token in self._sessions:
                token = secrets.token_urlsafe(TOKEN_BYTES)
            self._sessions[token] = Session(
                token=token, user_id=user_id, role=role, expires_at=expires_at
            )
        logger.info(
            "Session created for user id=%s role=%s expires_at=%s",
            user_id,
            role.value,
            expires_at.isoformat(),
        )
        return token

    def lookup(self, token: str) -> Session:
        with self._lock:
            session = self._sessions.get(token)
        if session is None:
            logger.trace("Session lookup missed")
            raise SessionNotFound("Unknown session token")
        if session.is_expired(self._clock()):
            logger.info("Session for user id=%s has expired", session.user_id)
            raise SessionExpired("Session has expired")
        return session

    def destroy(self, token: str) -> None:
        with self._lock:
            session = self._sessions.pop(token, None)
        if session is not None:
            logger.info("Session destroyed for user id=%s", session.user_id)

    def destroy_for_user(self, user_id: str) -> int:
        with self._lock:
            tokens = [t for t, s in self._sessions.items() if s.user_id == user_id]
            for token in tokens:
                del self._sessions[token]
        logger.info("Destroyed %s sessions for user id=%s", len(tokens), user_id)
        return len(tokens)

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [t for t, s in self._sessions.items() if s.is_expired(now)]
            for token in expired:
                del self._sessions[token]
        logger.info("Session sweep removed %s expired sessions", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            count = len(self._sessions)
            self._sessions.clear()
        logger.info("Cleared %s sessions", count)


class SessionSweeper:
    """Runs ``store.sweep()`` on a fixed interval in a background thread."""

    JOB_ID = "session-sweep"

    def __init__(self, store: SessionStore, interval_seconds: int) -> None:
        self._store = store
        self._interval_seconds = interval_seconds
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        if self.running:
            return
        self._scheduler = BackgroundScheduler(timezone="UTC")
        self._scheduler.add_job(
            self._store.sweep,
            IntervalTrigger(seconds=self._interval_seconds),
            id=self.JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info("Session sweeper started interval=%ss", self._interval_seconds)

    def stop(self) -> None:
        if not self.running:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Session sweeper stopped")
