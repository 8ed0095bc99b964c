"""Conversation entry point: load -> step -> save -> dispatch effects.

``ConversationService.handle_inbound_message`` is what a transport calls
for every user message.  ``build_service`` wires the collaborators chosen
by configuration.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from dialogue.config import Settings
from dialogue.effects import EffectDispatcher
from dialogue.engine import DialogueEngine, InboundMedia
from dialogue.i18n import t
from dialogue.models.session import Language, Session, redact_pii, utcnow
from dialogue.providers.base import (
    BookingService,
    Catalog,
    Extractor,
    LeadLog,
    NotificationSink,
)
from dialogue.providers.booking import HttpBookingService, InMemoryBookingService
from dialogue.providers.catalog import HttpCatalog, StaticCatalog
from dialogue.providers.console import LoggingLeadLog, LoggingNotifier
from dialogue.providers.extractor import LLMExtractor
from dialogue.providers.sheets import GoogleSheetsLeadLog
from dialogue.providers.twilio import TwilioMessenger
from dialogue.store import InMemorySessionRepository, JsonlSessionRepository, SessionStore

log = logging.getLogger("dialogue.service")


class ConversationService:
    def __init__(
        self,
        engine: DialogueEngine,
        store: SessionStore,
        dispatcher: EffectDispatcher,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self._engine = engine
        self._store = store
        self._dispatcher = dispatcher
        self._now = now

    @property
    def store(self) -> SessionStore:
        return self._store

    async def handle_inbound_message(
        self,
        user_id: str,
        text: Optional[str],
        media: Optional[InboundMedia] = None,
    ) -> Optional[str]:
        """Process one message from ``user_id`` and return the reply text.

        Returns None when nothing should be sent back in the reply (e.g. a
        document was delivered through the messenger instead).
        """
        if not user_id:
            raise ValueError("user_id is required")

        language = Language.ENGLISH
        try:
            async with self._store.session(user_id) as session:
                language = session.language
                result = await self._engine.step(session, text, media, now=self._now())
        except Exception:
            log.exception("Failed to handle message from %s", redact_pii(user_id))
            return t("generic_error", language)

        log.info(
            "Turn for %s: state=%s effects=%d",
            redact_pii(user_id),
            getattr(result.session.state, "value", result.session.state),
            len(result.effects),
        )
        if result.effects:
            await self._dispatcher.dispatch(result.effects)
        return result.response

    async def get_session(self, user_id: str) -> Optional[Session]:
        return await self._store.get(user_id)


# ── Wiring ────────────────────────────────────────────────────


def build_store(config: Settings, now: Callable[[], datetime] = utcnow) -> SessionStore:
    if config.session_store_path:
        return SessionStore(JsonlSessionRepository(config.session_store_path), now=now)
    return SessionStore(InMemorySessionRepository(), now=now)


def build_messenger(config: Settings) -> Optional[TwilioMessenger]:
    if not (config.twilio_account_sid and config.twilio_auth_token and config.twilio_whatsapp_number):
        return None
    return TwilioMessenger(
        account_sid=config.twilio_account_sid,
        auth_token=config.twilio_auth_token,
        from_number=config.twilio_whatsapp_number,
        agent_number=config.agent_whatsapp_number,
        timeout=config.collaborator_timeout_seconds,
    )


def build_catalog(config: Settings) -> Catalog:
    if config.catalog_url:
        return HttpCatalog(config.catalog_url, timeout=config.collaborator_timeout_seconds)
    return StaticCatalog(config.catalog_data_path or None)


def build_booking_service(config: Settings) -> BookingService:
    if config.booking_service_url:
        return HttpBookingService(config.booking_service_url, timeout=config.collaborator_timeout_seconds)
    return InMemoryBookingService()


def build_lead_log(config: Settings) -> LeadLog:
    if config.google_sheet_id and config.google_service_account_json:
        return GoogleSheetsLeadLog(
            config.google_sheet_id,
            service_account_path=config.google_service_account_json,
            sheet_range=config.google_sheet_range,
        )
    return LoggingLeadLog()


def build_extractor(config: Settings) -> Optional[Extractor]:
    if config.llm_provider == "claude":
        return LLMExtractor(
            "claude",
            api_key=config.anthropic_api_key,
            model=config.anthropic_model,
            timeout=config.collaborator_timeout_seconds,
        )
    if config.llm_provider == "ollama":
        return LLMExtractor(
            "ollama",
            model=config.ollama_model,
            ollama_url=config.ollama_url,
            timeout=config.collaborator_timeout_seconds,
        )
    return None


def build_service(config: Settings, now: Callable[[], datetime] = utcnow) -> ConversationService:
    """Assemble a ConversationService from configuration."""
    messenger = build_messenger(config)
    notifier: NotificationSink = messenger if messenger is not None else LoggingNotifier()
    booking_service = build_booking_service(config)

    engine = DialogueEngine(
        catalog=build_catalog(config),
        booking_service=booking_service,
        extractor=build_extractor(config),
        config=config,
        media_delivery=messenger is not None,
    )
    dispatcher = EffectDispatcher(
        notifier=notifier,
        messenger=messenger,
        lead_log=build_lead_log(config),
        timeout=config.collaborator_timeout_seconds,
    )
    log.info(
        "Service wired: messenger=%s extractor=%s store=%s",
        "twilio" if messenger else "none",
        config.llm_provider,
        config.session_store_path or "memory",
    )
    return ConversationService(engine, build_store(config, now), dispatcher, now=now)
