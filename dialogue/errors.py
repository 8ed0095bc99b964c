"""Exception taxonomy for the dialogue engine.

ValidationFailure    malformed slot input; recovered by re-prompting
PreconditionFailure  booking attempted with incomplete or invalid slots
CollaboratorFailure  catalog / booking / notification error or timeout
UnknownStateError    session carries a state the engine has no handler for
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

log = logging.getLogger("dialogue.errors")

T = TypeVar("T")


class DialogueError(Exception):
    """Base class for engine errors."""


class ValidationFailure(DialogueError):
    def __init__(self, slot: str, message_key: str) -> None:
        super().__init__(f"invalid value for {slot}")
        self.slot = slot
        self.message_key = message_key


class PreconditionFailure(DialogueError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__("booking preconditions not met: " + ", ".join(missing))
        self.missing = missing


class CollaboratorFailure(DialogueError):
    def __init__(self, collaborator: str, cause: BaseException | None = None) -> None:
        detail = f": {cause!r}" if cause is not None else ""
        super().__init__(f"{collaborator} call failed{detail}")
        self.collaborator = collaborator
        self.cause = cause


class UnknownStateError(DialogueError):
    def __init__(self, state: object) -> None:
        super().__init__(f"no handler for state {state!r}")
        self.state = state


async def bounded(call: Awaitable[T], collaborator: str, timeout: float) -> T:
    """Await a collaborator call, converting errors and timeouts to CollaboratorFailure."""
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as e:
        log.warning("%s timed out after %.1fs", collaborator, timeout)
        raise CollaboratorFailure(collaborator, e) from e
    except CollaboratorFailure:
        raise
    except Exception as e:
        log.warning("%s failed: %s", collaborator, e)
        raise CollaboratorFailure(collaborator, e) from e
