"""Log-only collaborators used when Twilio or Google Sheets is not configured."""

from __future__ import annotations

import logging

from dialogue.models.booking import LeadRecord
from dialogue.models.session import redact_pii
from dialogue.providers.base import LeadLog, NotificationSink

log = logging.getLogger("dialogue.providers.console")


class LoggingNotifier(NotificationSink):
    async def notify(self, channel: str, text: str) -> None:
        log.info("[%s] %s", channel, text.replace("\n", " | "))


class LoggingLeadLog(LeadLog):
    async def append(self, lead: LeadRecord) -> None:
        log.info(
            "Lead: %s (%s) visit=%r purpose=%r language=%s",
            lead.name,
            redact_pii(lead.phone),
            lead.visit_time,
            lead.purpose,
            lead.language,
        )
