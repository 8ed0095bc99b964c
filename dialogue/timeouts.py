"""Inactivity policy: hard reset, soft "are you still there" and the sweep.

Hard reset: no message for ``hard_reset_hours`` -> silent restart before
the new message is interpreted.  Soft inactivity: idle longer than
``inactivity_warning_minutes`` -> the next message only gets the
"are you still there" prompt.  The offline sweep marks long-idle sessions
inactive and pushes the inactivity notice to the user.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from dialogue.errors import CollaboratorFailure, bounded
from dialogue.i18n import t
from dialogue.models.session import Session, redact_pii
from dialogue.providers.base import Messenger
from dialogue.store.store import SessionStore

log = logging.getLogger("dialogue.timeouts")


def hard_reset_due(session: Session, now: datetime, hours: float) -> bool:
    return now - session.last_message_timestamp > timedelta(hours=hours)


def soft_inactivity_due(session: Session, now: datetime, minutes: float) -> bool:
    if session.is_inactive:
        return False
    return now - session.last_activity_timestamp > timedelta(minutes=minutes)


def apply_hard_reset(session: Session, now: datetime, hours: float) -> bool:
    """Restart the conversation if it has been silent too long."""
    if not hard_reset_due(session, now, hours):
        return False
    log.info(
        "Hard reset after %s of silence (was %s)",
        now - session.last_message_timestamp,
        session.state,
    )
    session.restart()
    return True


def touch(session: Session, now: datetime) -> None:
    session.last_message_timestamp = now
    session.last_activity_timestamp = now


async def sweep_inactive(
    store: SessionStore,
    messenger: Optional[Messenger],
    now: datetime,
    after_hours: float = 24.0,
    timeout: float = 10.0,
) -> list[str]:
    """Mark sessions idle longer than ``after_hours`` inactive and notify them.

    Returns the user ids that were swept.  Each session is re-checked under
    its lock so a message arriving mid-sweep wins.
    """
    threshold = timedelta(hours=after_hours)
    swept: list[str] = []

    for candidate in await store.list_sessions():
        if candidate.is_inactive or now - candidate.last_activity_timestamp <= threshold:
            continue

        async with store.session(candidate.user_id) as session:
            if session.is_inactive or now - session.last_activity_timestamp <= threshold:
                continue
            session.is_inactive = True
            language = session.language
        swept.append(candidate.user_id)

        if messenger is None:
            log.info("Marked %s inactive (no messenger configured)", redact_pii(candidate.user_id))
            continue
        try:
            await bounded(
                messenger.send_text(candidate.user_id, t("inactivity_notice", language)),
                "messenger",
                timeout,
            )
            log.info("Sent inactivity message to %s", redact_pii(candidate.user_id))
        except CollaboratorFailure as exc:
            log.warning("Inactivity message to %s failed: %s", redact_pii(candidate.user_id), exc)

    log.info("Inactive conversation check completed: %d swept", len(swept))
    return swept
