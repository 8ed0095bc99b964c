"""Twilio WhatsApp messaging through the Twilio REST client.

Used for messages sent outside the webhook reply: agent alerts, property
documents and images, and the inactivity sweep notice.  Webhook replies
themselves go back as TwiML (see ``dialogue.app``).
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any

from twilio.base.exceptions import TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from dialogue.errors import CollaboratorFailure
from dialogue.models.session import redact_pii
from dialogue.providers.base import Messenger, NotificationSink

log = logging.getLogger("dialogue.providers.twilio")


def whatsapp_address(number: str) -> str:
    """``+9198...`` -> ``whatsapp:+9198...`` (idempotent)."""
    number = number.strip()
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


class TwilioMessenger(Messenger, NotificationSink):
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        agent_number: str = "",
        timeout: float = 15.0,
        client: Any = None,
    ) -> None:
        if not account_sid or not auth_token or not from_number:
            raise ValueError("Twilio account SID, auth token and sender number are required.")
        if client is None:
            client = Client(account_sid, auth_token, http_client=TwilioHttpClient(timeout=timeout))
        self._client = client
        self._from = whatsapp_address(from_number)
        self._agent_number = agent_number

    async def _run_in_executor(self, func, *args, **kwargs) -> Any:
        """Run a blocking Twilio API call in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def _create_message(self, to: str, body: str, media_url: str | None = None) -> str:
        params: dict[str, Any] = {"from_": self._from, "to": whatsapp_address(to), "body": body}
        if media_url:
            params["media_url"] = [media_url]
        try:
            message = await self._run_in_executor(self._client.messages.create, **params)
        except TwilioRestException as exc:
            log.warning("Twilio send to %s failed (status %s): %s", redact_pii(to), exc.status, exc.msg)
            raise CollaboratorFailure("twilio", exc) from exc
        log.info("Message %s sent to %s", message.sid, redact_pii(to))
        return message.sid

    async def send_text(self, to: str, text: str) -> None:
        await self._create_message(to, text)

    async def send_media(self, to: str, media_url: str, caption: str = "") -> None:
        await self._create_message(to, caption, media_url)

    async def notify(self, channel: str, text: str) -> None:
        if channel != "agent":
            log.warning("No Twilio route for notification channel %r", channel)
            return
        if not self._agent_number:
            log.info("Agent number not configured; alert not sent: %s", text.splitlines()[0])
            return
        await self.send_text(self._agent_number, text)
