"""Side-effect instructions produced by the engine and their dispatch.

The engine never calls notification, messaging or lead-log collaborators
directly; it returns effect records and the service dispatches them after
the session has been saved.  A failing effect is logged and dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from dialogue.errors import CollaboratorFailure, bounded
from dialogue.models.booking import LeadRecord
from dialogue.models.session import redact_pii
from dialogue.providers.base import LeadLog, Messenger, NotificationSink

log = logging.getLogger("dialogue.effects")


@dataclass(frozen=True)
class NotifyEffect:
    channel: str
    text: str


@dataclass(frozen=True)
class SendMediaEffect:
    to: str
    media_url: str
    caption: str = ""


@dataclass(frozen=True)
class LogLeadEffect:
    lead: LeadRecord


Effect = Union[NotifyEffect, SendMediaEffect, LogLeadEffect]


class EffectDispatcher:
    def __init__(
        self,
        notifier: Optional[NotificationSink] = None,
        messenger: Optional[Messenger] = None,
        lead_log: Optional[LeadLog] = None,
        timeout: float = 10.0,
    ) -> None:
        self._notifier = notifier
        self._messenger = messenger
        self._lead_log = lead_log
        self._timeout = timeout

    async def _run(self, effect: Effect) -> None:
        if isinstance(effect, NotifyEffect):
            if self._notifier is None:
                log.info("No notifier configured; dropping %s alert", effect.channel)
                return
            await bounded(self._notifier.notify(effect.channel, effect.text), "notifier", self._timeout)
        elif isinstance(effect, SendMediaEffect):
            if self._messenger is None:
                log.warning("No messenger configured; cannot send %s", effect.media_url)
                return
            await bounded(
                self._messenger.send_media(effect.to, effect.media_url, effect.caption),
                "messenger",
                self._timeout,
            )
        elif isinstance(effect, LogLeadEffect):
            if self._lead_log is None:
                log.info("No lead log configured; lead for %s not recorded", redact_pii(effect.lead.phone))
                return
            await bounded(self._lead_log.append(effect.lead), "lead_log", self._timeout)
        else:
            raise TypeError(f"Unknown effect {effect!r}")

    async def dispatch(self, effects: list[Effect]) -> list[CollaboratorFailure]:
        """Run every effect in order; return the failures instead of raising."""
        failures: list[CollaboratorFailure] = []
        for effect in effects:
            try:
                await self._run(effect)
            except CollaboratorFailure as exc:
                log.warning("Effect %s failed: %s", type(effect).__name__, exc)
                failures.append(exc)
        return failures
