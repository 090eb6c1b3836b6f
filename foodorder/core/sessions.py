"""
Session storage: opaque token -> password-free user snapshot
"""
import logging
import secrets
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from foodorder.models.user import UserPublic

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Maps session tokens to user snapshots.

    Callers only go through this interface so the in-memory store can be
    replaced by a shared cache.
    """

    @abstractmethod
    def create(self, user: UserPublic) -> str:
        pass

    @abstractmethod
    def get(self, token: str) -> Optional[UserPublic]:
        pass

    @abstractmethod
    def refresh(self, token: str, user: UserPublic) -> None:
        pass

    @abstractmethod
    def invalidate(self, token: str) -> bool:
        pass

    @abstractmethod
    def invalidate_user(self, user_id: str) -> int:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class InMemorySessionStore(SessionStore):
    """Process-local store; sessions never expire on their own."""

    def __init__(self):
        self._sessions: Dict[str, UserPublic] = {}
        self._lock = threading.RLock()

    def create(self, user: UserPublic) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[token] = user
        logger.info(f"Session created for user {user.id}")
        return token

    def get(self, token: str) -> Optional[UserPublic]:
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def refresh(self, token: str, user: UserPublic) -> None:
        """Replace the snapshot behind an existing token (after a profile edit)."""
        with self._lock:
            if token in self._sessions:
                self._sessions[token] = user

    def invalidate(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def invalidate_user(self, user_id: str) -> int:
        """Drop every session belonging to a user. Returns how many were removed."""
        with self._lock:
            tokens = [t for t, u in self._sessions.items() if u.id == user_id]
            for token in tokens:
                del self._sessions[token]
        if tokens:
            logger.info(f"Invalidated {len(tokens)} session(s) for user {user_id}")
        return len(tokens)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Global Instance
session_store = InMemorySessionStore()


def get_session_store() -> SessionStore:
    return session_store
