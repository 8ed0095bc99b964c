"""Session store: per-user serialization around a repository.

Every inbound message for a user runs load -> step -> save under that
user's lock, so two messages from the same user never interleave while
different users proceed in parallel.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Callable, Optional

from dialogue.models.session import Session, utcnow
from dialogue.store.base import SessionRepository

log = logging.getLogger("dialogue.store")


class SessionStore:
    def __init__(
        self,
        repository: SessionRepository,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repository = repository
        self._now = now
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}  # tasks holding or waiting on each lock

    @property
    def repository(self) -> SessionRepository:
        return self._repository

    @asynccontextmanager
    async def locked(self, user_id: str) -> AsyncIterator[None]:
        """Hold ``user_id``'s lock; the lock is dropped once nobody holds or awaits it."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        self._holders[user_id] = self._holders.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[user_id] -= 1
            if not self._holders[user_id]:
                del self._holders[user_id]
                del self._locks[user_id]

    async def load_or_create(self, user_id: str) -> Session:
        session = await self._repository.load(user_id)
        if session is None:
            now = self._now()
            session = Session(
                user_id=user_id,
                created_at=now,
                last_message_timestamp=now,
                last_activity_timestamp=now,
            )
            log.info("New session created")
        return session

    @asynccontextmanager
    async def session(self, user_id: str) -> AsyncIterator[Session]:
        """Hold ``user_id``'s lock, yield its session and save it on clean exit.

        If the body raises, nothing is saved and the exception propagates.
        """
        async with self.locked(user_id):
            session = await self.load_or_create(user_id)
            yield session
            await self._repository.save(session)

    async def get(self, user_id: str) -> Optional[Session]:
        return await self._repository.load(user_id)

    async def save(self, session: Session) -> None:
        async with self.locked(session.user_id):
            await self._repository.save(session)

    async def list_sessions(self) -> list[Session]:
        return await self._repository.list_sessions()
