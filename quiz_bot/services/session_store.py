from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Dict, Optional

if TYPE_CHECKING:
    from quiz_bot.services.quiz_machine import Session


class SessionTable:
    """
    In-memory map of user id to quiz session.

    Every read-modify-write for a user must happen inside
    ``async with table.lock(user_id)``. Locks are per user, so different
    users never wait on each other.
    """

    def __init__(self) -> None:
        self._sessions: Dict[int, Session] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self._lock_users: Dict[int, int] = {}

    def get(self, user_id: int) -> Optional[Session]:
        return self._sessions.get(user_id)

    def put(self, user_id: int, session: Session) -> None:
        self._sessions[user_id] = session

    def delete(self, user_id: int) -> None:
        self._sessions.pop(user_id, None)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def is_locked(self, user_id: int) -> bool:
        lock = self._locks.get(user_id)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def lock(self, user_id: int) -> AsyncIterator[None]:
        """Hold the user's lock. The entry is dropped once nobody needs it."""
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if self._lock_users[user_id] == 0:
                del self._lock_users[user_id]
                del self._locks[user_id]
