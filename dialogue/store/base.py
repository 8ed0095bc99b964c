"""Abstract base class for session repositories.

Any persistence backend (in-memory, JSONL file, a database) implements this
ABC.  Repositories hand out independent copies: mutating a loaded Session
has no effect until it is saved.
"""

from abc import ABC, abstractmethod
from typing import Optional

from dialogue.models.session import Session


class SessionRepository(ABC):
    """Abstract session backend keyed by ``user_id``."""

    @abstractmethod
    async def load(self, user_id: str) -> Optional[Session]:
        """Return the stored session for ``user_id``, or None."""

    @abstractmethod
    async def save(self, session: Session) -> None:
        """Insert or replace the session for ``session.user_id``."""

    @abstractmethod
    async def list_sessions(self) -> list[Session]:
        """Return every stored session (used by the inactivity sweep)."""
