"""In-process session repository, the default when no store path is set."""

from __future__ import annotations

from typing import Optional

from dialogue.models.session import Session
from dialogue.store.base import SessionRepository


class InMemorySessionRepository(SessionRepository):
    """Keeps sessions as serialized JSON so loads never alias saved state."""

    def __init__(self) -> None:
        self._records: dict[str, str] = {}

    async def load(self, user_id: str) -> Optional[Session]:
        raw = self._records.get(user_id)
        return Session.model_validate_json(raw) if raw is not None else None

    async def save(self, session: Session) -> None:
        self._records[session.user_id] = session.model_dump_json()

    async def list_sessions(self) -> list[Session]:
        return [Session.model_validate_json(raw) for raw in self._records.values()]
