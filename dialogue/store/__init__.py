"""Session persistence: repositories plus the per-user locking store."""

from .base import SessionRepository
from .jsonl import JsonlSessionRepository
from .memory import InMemorySessionRepository
from .store import SessionStore

__all__ = [
    "InMemorySessionRepository",
    "JsonlSessionRepository",
    "SessionRepository",
    "SessionStore",
]
