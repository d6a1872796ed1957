"""
In-memory session table.

Maps opaque tokens to an identity snapshot taken at login. Entries expire
after a fixed idle period. Nothing is persisted across restarts.
"""

import secrets
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

from pydantic import BaseModel

from portal_backend.models.user import ROLE_ADMIN, User


class SessionSnapshot(BaseModel):
    id: int
    public_id: str
    name: str
    email: str
    role: str

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user: User) -> "SessionSnapshot":
        return cls(
            id=user.id,
            public_id=user.public_id,
            name=user.name,
            email=user.email,
            role=user.role,
        )

    def public_view(self) -> dict:
        return {"id": self.public_id, "name": self.name, "email": self.email, "role": self.role}


@dataclass
class _Entry:
    snapshot: SessionSnapshot
    last_seen: float


class SessionManager:
    def __init__(self, idle_timeout_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.idle_timeout_seconds = idle_timeout_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.last_seen > self.idle_timeout_seconds

    def create_session(self, snapshot: SessionSnapshot) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._entries[token] = _Entry(snapshot=snapshot, last_seen=self._clock())
        return token

    def create_session_if(self, snapshot: SessionSnapshot, still_valid: Callable[[], bool]) -> str | None:
        """Create a session only if ``still_valid()`` holds under the table lock.

        Account deletion revokes under the same lock, so a login that checks
        the row here cannot leave a session behind for a deleted user.
        """
        with self._lock:
            if not still_valid():
                return None
            return self.create_session(snapshot)

    def get_session(self, token: str | None) -> SessionSnapshot | None:
        if not token:
            return None
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            now = self._clock()
            if self._expired(entry, now):
                del self._entries[token]
                return None
            entry.last_seen = now
            return entry.snapshot

    def destroy_session(self, token: str | None) -> None:
        if not token:
            return
        with self._lock:
            self._entries.pop(token, None)

    def destroy_user_sessions(self, user_id: int) -> int:
        with self._lock:
            tokens = [token for token, entry in self._entries.items() if entry.snapshot.id == user_id]
            for token in tokens:
                del self._entries[token]
            return len(tokens)

    def update_user_sessions(self, snapshot: SessionSnapshot) -> None:
        with self._lock:
            for entry in self._entries.values():
                if entry.snapshot.id == snapshot.id:
                    entry.snapshot = snapshot

    @contextmanager
    def revoking_user(self, user_id: int) -> Iterator[None]:
        """Hold the table while the user's row is removed from the store.

        Lookups from other requests wait until the block finishes, so they
        never see a live session for a deleted row. Sessions are only
        dropped when the block exits without raising.
        """
        with self._lock:
            yield
            self.destroy_user_sessions(user_id)

    def purge_expired(self) -> int:
        with self._lock:
            now = self._clock()
            stale = [token for token, entry in self._entries.items() if self._expired(entry, now)]
            for token in stale:
                del self._entries[token]
            return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
