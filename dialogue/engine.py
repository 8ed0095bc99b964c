"""Per-user dialogue state machine for the property-viewing conversation.

One call to ``DialogueEngine.step`` interprets one inbound message:

  1. Inactivity policy (hard reset, soft "are you still there")
  2. Global interrupts: restart, change language, help, end
  3. The current state's handler, which mutates the session and names an
     intent
  4. The workflow table maps (state, intent) to the next state

Handlers never talk to notification or messaging collaborators; those
actions come back as effects in the StepResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, Optional

from dialogue.commands import Command, classify_command, match_choice, parse_index
from dialogue.config import Settings, settings as default_settings
from dialogue.effects import Effect, NotifyEffect, SendMediaEffect
from dialogue.errors import CollaboratorFailure, PreconditionFailure, UnknownStateError, bounded
from dialogue.finalizer import AppointmentFinalizer
from dialogue.formatting import format_inr, format_property_card, format_property_list
from dialogue.i18n import help_key, join, t
from dialogue.models.property import PropertySummary, SearchCriteria
from dialogue.models.session import ConversationState, Language, Session, UserInfo, utcnow
from dialogue.normalize import NormalizedInput, normalize
from dialogue.providers.base import BookingService, Catalog, Extractor
from dialogue.slot_filling import fill_next_slot, prompt_keys
from dialogue.timeouts import apply_hard_reset, soft_inactivity_due, touch
from dialogue.workflows.loader import load_workflow_jsonl
from dialogue.workflows.schema import DialogueWorkflowDef

log = logging.getLogger("dialogue.engine")

LANGUAGE_OPTIONS: dict[int, tuple[str, ...]] = {
    1: ("english", "eng", "इंग्रजी"),
    2: ("marathi", "मराठी"),
}
LANGUAGE_BY_CHOICE = {1: Language.ENGLISH, 2: Language.MARATHI}

INTEREST_OPTIONS: dict[int, tuple[str, ...]] = {
    1: ("office", "offices", "office space", "ऑफिस", "कार्यालय"),
    2: ("shop", "shops", "showroom", "retail", "दुकान"),
    3: ("warehouse", "warehouses", "godown", "गोदाम"),
    4: ("all", "any", "everything", "show all", "सर्व"),
}
CATEGORY_BY_CHOICE: dict[int, Optional[str]] = {1: "office", 2: "shop", 3: "warehouse", 4: None}
CHOICE_BY_EXTRACTED = {"office": 1, "shop": 2, "warehouse": 3, "all": 4}

SCHEDULE_OPTIONS: dict[int, tuple[str, ...]] = {
    1: ("yes", "y", "yeah", "sure", "ok", "okay", "schedule", "book", "होय", "हो"),
    2: ("no", "n", "back", "go back", "नाही", "मागे", "परत"),
}

COMPLETED_OPTIONS: dict[int, tuple[str, ...]] = {
    1: ("search", "new", "नवीन"),
    2: ("details", "appointment", "तपशील"),
    3: ("documents", "document", "brochure", "कागदपत्रे"),
    4: ("similar", "similar properties", "more", "समान"),
    5: ("close", "done", "समाप्त"),
}
DETAILS_OPTIONS: dict[int, tuple[str, ...]] = {
    1: ("search", "new", "नवीन"),
    2: ("documents", "document", "brochure", "कागदपत्रे"),
    3: ("close", "done", "समाप्त"),
}
DOCUMENT_OPTIONS: dict[int, tuple[str, ...]] = {
    1: ("brochure", "माहितीपत्रक"),
    2: ("floor plan", "plan", "फ्लोअर प्लॅन"),
    3: ("price list", "price", "किंमत यादी"),
    4: ("back", "मागे"),
}
DOCUMENT_BY_CHOICE = {1: "brochure", 2: "floor_plan", 3: "price_list"}


@dataclass(frozen=True)
class InboundMedia:
    url: str
    kind: str = ""  # MIME type as reported by the transport


@dataclass
class StepResult:
    session: Session
    response: Optional[str]
    effects: list[Effect] = field(default_factory=list)


@dataclass
class Reply:
    """A handler's verdict: what to say and which transition to take."""

    text: Optional[str]
    intent: Optional[str] = None
    effects: list[Effect] = field(default_factory=list)


Handler = Callable[[Session, NormalizedInput], Awaitable[Reply]]


class DialogueEngine:
    def __init__(
        self,
        catalog: Catalog,
        booking_service: BookingService,
        extractor: Optional[Extractor] = None,
        workflow: Optional[DialogueWorkflowDef] = None,
        config: Optional[Settings] = None,
        media_delivery: bool = False,
    ) -> None:
        self._catalog = catalog
        self._booking_service = booking_service
        self._extractor = extractor
        self._workflow = workflow or load_workflow_jsonl()
        self._config = config or default_settings
        self._timeout = self._config.collaborator_timeout_seconds
        # True when a messenger can push documents/images outside the reply
        self._media_delivery = media_delivery
        self._finalizer = AppointmentFinalizer(booking_service, timeout=self._timeout)

        self._handlers: dict[ConversationState, Handler] = {
            ConversationState.LANGUAGE_SELECTION: self._on_language_selection,
            ConversationState.WELCOME: self._on_welcome,
            ConversationState.INTEREST_SELECTION: self._on_interest_selection,
            ConversationState.PROPERTY_MATCH: self._on_property_match,
            ConversationState.SCHEDULE_VISIT: self._on_schedule_visit,
            ConversationState.COLLECT_INFO: self._on_collect_info,
            ConversationState.COMPLETED: self._on_completed,
        }

    @property
    def workflow(self) -> DialogueWorkflowDef:
        return self._workflow

    # ── Public API ────────────────────────────────────────────

    async def step(
        self,
        session: Session,
        text: Optional[str],
        media: Optional[InboundMedia] = None,
        now: Optional[datetime] = None,
    ) -> StepResult:
        """Process one inbound message against ``session`` (mutated in place)."""
        now = now or utcnow()
        message = normalize(text)

        reset = apply_hard_reset(session, now, self._config.hard_reset_hours)
        if not reset and soft_inactivity_due(session, now, self._config.inactivity_warning_minutes):
            session.is_inactive = True
            touch(session, now)
            log.info("Session idle; asking whether the user is still there")
            return StepResult(session, self._t("still_there", session))
        touch(session, now)

        command = classify_command(message.text)
        if session.is_inactive:
            session.is_inactive = False
            if command == Command.END:
                return StepResult(session, self._close(session))

        if message.is_empty:
            notice = self._t("media_unsupported", session) if media else None
            return StepResult(session, join(notice, self._current_prompt(session)))

        if command is not None:
            return StepResult(session, self._interrupt(session, command))

        try:
            handler = self._handlers.get(session.state)
            if handler is None:
                raise UnknownStateError(session.state)
            reply = await handler(session, message)
        except UnknownStateError as exc:
            log.error("Recovering from %s", exc)
            session.restart()
            session.state = ConversationState.LANGUAGE_SELECTION
            return StepResult(
                session,
                join(self._t("state_error", session), self._t("language_menu", session)),
            )

        if reply.intent:
            self._transition(session, reply.intent)
        return StepResult(session, reply.text, reply.effects)

    # ── Internal: transitions ────────────────────────────────

    def _transition(self, session: Session, intent: str) -> None:
        current = session.state.value
        target = self._workflow.resolve(current, intent)
        if target != current:
            log.info("FSM advance: %s → %s (intent: %s)", current, target, intent)
        session.state = ConversationState(target)

    # ── Internal: text helpers ───────────────────────────────

    def _t(self, key: str, session: Session, **params: object) -> str:
        return t(
            key,
            session.language,
            brand=self._config.brand_name,
            agent=self._config.agent_name,
            **params,
        )

    def _render(self, keys: list[str], session: Session) -> str:
        info = session.user_info
        prop = session.selected_property
        params = {
            "property": prop.title if prop else "",
            "name": info.name or "",
            "min_length": self._config.name_min_length,
        }
        return join(*(self._t(key, session, **params) for key in keys))

    def _debug_suffix(self, text: str, exc: Exception) -> str:
        if self._config.debug:
            return f"{text}\n\n[debug: {exc}]"
        return text

    def _current_prompt(self, session: Session) -> str:
        state = session.state
        if state == ConversationState.PROPERTY_MATCH:
            if session.matched_properties:
                return format_property_list(session.matched_properties, session.language)
            return self._t("no_matches", session)
        if state == ConversationState.COLLECT_INFO:
            return self._render(prompt_keys(session) or ["help_collect_info"], session)
        if state == ConversationState.COMPLETED:
            return self._completed_menu(session)
        if state == ConversationState.WELCOME:
            return join(self._t("welcome", session), self._t("help_welcome", session))
        state_def = self._workflow.states.get(getattr(state, "value", str(state)))
        if state_def is None or not state_def.prompt_key:
            return self._t("language_menu", session)
        return self._t(state_def.prompt_key, session)

    def _completed_menu(self, session: Session) -> str:
        if session.document_selection_phase:
            return self._t("documents_menu", session)
        if session.viewing_appointment_details:
            return self._t("details_menu", session)
        return self._t("completed_menu", session)

    # ── Internal: global interrupts ──────────────────────────

    def _interrupt(self, session: Session, command: Command) -> str:
        if command == Command.RESTART:
            session.restart()
            self._transition(session, "restart")
            session.language_menu_shown = True
            log.info("Conversation restarted")
            return join(self._t("welcome", session), self._t("language_menu", session))

        if command == Command.CHANGE_LANGUAGE:
            session.restart()
            session.language = Language.ENGLISH
            self._transition(session, "change_language")
            return self._t("language_menu", session)

        if command == Command.HELP:
            return self._t(self._help_key(session), session)

        return self._close(session)

    def _help_key(self, session: Session) -> str:
        if session.state == ConversationState.COMPLETED:
            if session.document_selection_phase:
                return "help_documents"
            if session.viewing_appointment_details:
                return "help_details"
        state_def = self._workflow.states.get(getattr(session.state, "value", ""))
        if state_def and state_def.help_key:
            return state_def.help_key
        if isinstance(session.state, ConversationState):
            return help_key(session.state)
        return "help_language_selection"

    def _close(self, session: Session) -> str:
        """Graceful close: goodbye, and back to welcome unless a booking is on show."""
        goodbye = self._t("goodbye", session)
        if session.state == ConversationState.COMPLETED:
            session.document_selection_phase = False
            session.viewing_appointment_details = False
        else:
            session.restart()
        log.info("Conversation closed by user")
        return goodbye

    # ── Internal: state handlers ─────────────────────────────

    async def _on_language_selection(self, session: Session, message: NormalizedInput) -> Reply:
        choice = match_choice(message.text, LANGUAGE_OPTIONS)
        if choice is None:
            return Reply(join(self._t("invalid_choice", session), self._t("language_menu", session)))
        session.language = LANGUAGE_BY_CHOICE[choice]
        return Reply(self._t("language_set", session), intent="language_selected")

    async def _on_welcome(self, session: Session, message: NormalizedInput) -> Reply:
        # A bare "1"/"2" only picks a language right after the menu offered it
        if session.language_menu_shown:
            session.language_menu_shown = False
            choice = match_choice(message.text, LANGUAGE_OPTIONS)
            if choice is not None:
                session.language = LANGUAGE_BY_CHOICE[choice]
        return Reply(self._t("interest_menu", session), intent="acknowledged")

    async def _extract_interest(self, message: NormalizedInput) -> Optional[int]:
        if self._extractor is None:
            return None
        try:
            value = await bounded(
                self._extractor.extract("category", message.raw), "extractor", self._timeout,
            )
        except CollaboratorFailure:
            return None
        return CHOICE_BY_EXTRACTED.get(value)

    async def _on_interest_selection(self, session: Session, message: NormalizedInput) -> Reply:
        choice = match_choice(message.text, INTEREST_OPTIONS)
        if choice is None:
            choice = await self._extract_interest(message)
        if choice is None:
            return Reply(join(self._t("invalid_choice", session), self._t("interest_menu", session)))

        category = CATEGORY_BY_CHOICE[choice]
        criteria = SearchCriteria(category=category, limit=self._config.match_limit)
        try:
            matches = await bounded(self._catalog.find_matches(criteria), "catalog", self._timeout)
        except CollaboratorFailure as exc:
            return Reply(self._debug_suffix(self._t("catalog_unavailable", session), exc))

        session.preferences.category = category
        session.matched_properties = matches
        session.selected_property = None
        log.info("Catalog returned %d matches for category=%s", len(matches), category or "all")
        if not matches:
            return Reply(self._t("no_matches", session), intent="interest_selected")
        return Reply(format_property_list(matches, session.language), intent="interest_selected")

    async def _on_property_match(self, session: Session, message: NormalizedInput) -> Reply:
        count = len(session.matched_properties)
        if count == 0:
            return Reply(self._t("no_matches", session))

        index = parse_index(message.text)
        if index is None:
            return Reply(join(
                self._t("invalid_choice", session),
                format_property_list(session.matched_properties, session.language),
            ))
        try:
            prop = session.select_property(index)
        except IndexError:
            return Reply(self._t("invalid_property_index", session, count=count))

        effects: list[Effect] = []
        if self._media_delivery:
            for i, url in enumerate(prop.image_urls):
                caption = f"🏢 {prop.title}" if i == 0 else ""
                effects.append(SendMediaEffect(to=session.user_id, media_url=url, caption=caption))
        card = format_property_card(prop, session.language)
        return Reply(join(card, self._t("schedule_menu", session)), "property_selected", effects)

    async def _on_schedule_visit(self, session: Session, message: NormalizedInput) -> Reply:
        choice = match_choice(message.text, SCHEDULE_OPTIONS)
        if choice == 1:
            session.user_info = UserInfo()
            return Reply(self._render(["ask_name"], session), intent="schedule")
        if choice == 2:
            session.selected_property = None
            return Reply(
                format_property_list(session.matched_properties, session.language),
                intent="back",
            )
        return Reply(join(self._t("invalid_choice", session), self._t("schedule_menu", session)))

    async def _on_collect_info(self, session: Session, message: NormalizedInput) -> Reply:
        outcome = fill_next_slot(session, message, self._config.name_min_length)
        if not outcome.complete:
            return Reply(self._render(outcome.message_keys, session))

        try:
            confirmation = await self._finalizer.finalize(session)
        except PreconditionFailure as exc:
            log.warning("%s", exc)
            if "appointment_id" in exc.missing:
                return Reply(self._t("booking_exists", session, appointment_id=session.appointment_id))
            follow_up = prompt_keys(session) or ["help_collect_info"]
            return Reply(self._render(["booking_incomplete", *follow_up], session))
        except CollaboratorFailure as exc:
            return Reply(self._debug_suffix(self._t("booking_failed", session), exc))

        info = session.user_info
        text = join(
            self._t(
                "booking_confirmed",
                session,
                appointment_id=confirmation.appointment_id,
                property=session.selected_property.title,
                name=info.name,
                phone=info.phone,
                time=info.preferred_time_raw,
                requirements=info.special_requirements or "-",
            ),
            self._t("completed_menu", session),
        )
        return Reply(text, intent="slots_complete", effects=confirmation.effects)

    async def _on_completed(self, session: Session, message: NormalizedInput) -> Reply:
        if session.document_selection_phase:
            return self._on_document_choice(session, message)

        if session.viewing_appointment_details:
            choice = match_choice(message.text, DETAILS_OPTIONS)
            action = {1: "new_search", 2: "documents", 3: "end"}.get(choice)
        else:
            choice = match_choice(message.text, COMPLETED_OPTIONS)
            action = {1: "new_search", 2: "details", 3: "documents", 4: "similar", 5: "end"}.get(choice)

        if action == "new_search":
            session.restart()
            session.language_menu_shown = True
            return Reply(
                join(self._t("welcome", session), self._t("language_menu", session)),
                intent="new_search",
            )
        if action == "details":
            session.viewing_appointment_details = True
            return Reply(join(await self._appointment_details(session), self._t("details_menu", session)))
        if action == "documents":
            session.viewing_appointment_details = False
            session.document_selection_phase = True
            return Reply(self._t("documents_menu", session))
        if action == "similar":
            return Reply(join(await self._similar_properties(session), self._t("completed_menu", session)))
        if action == "end":
            return Reply(self._close(session))
        return Reply(join(self._t("invalid_choice", session), self._completed_menu(session)))

    async def _appointment_details(self, session: Session) -> str:
        info = session.user_info
        prop = session.selected_property
        params = {
            "appointment_id": session.appointment_id or "-",
            "property": prop.title if prop else "-",
            "location": prop.location if prop else "-",
            "name": info.name or "-",
            "phone": info.phone or "-",
            "time": info.preferred_time_raw or "-",
            "price": format_inr(prop.price) if prop else "-",
            "status": "scheduled",
            "agent_contact": self._agent_contact(prop),
        }
        if session.appointment_id:
            try:
                booking = await bounded(
                    self._booking_service.get_booking(session.appointment_id),
                    "booking",
                    self._timeout,
                )
            except CollaboratorFailure as exc:
                log.warning("Falling back to session data for appointment details: %s", exc)
            else:
                params.update(
                    name=booking.name,
                    phone=booking.phone,
                    time=booking.time_text,
                    status=booking.status,
                )
        return self._t("appointment_details", session, **params)

    def _agent_contact(self, prop: Optional[PropertySummary]) -> str:
        name = (prop.agent_name if prop else None) or self._config.agent_name
        if prop and prop.agent_phone:
            return f"{name} ({prop.agent_phone})"
        return name

    async def _similar_properties(self, session: Session) -> str:
        """Other available listings in the booked property's category."""
        prop = session.selected_property
        if prop is None:
            return self._t("no_similar", session)
        limit = self._config.match_limit
        criteria = SearchCriteria(category=prop.category or None, limit=limit + 1)
        try:
            found = await bounded(self._catalog.find_matches(criteria), "catalog", self._timeout)
        except CollaboratorFailure as exc:
            return self._debug_suffix(self._t("catalog_unavailable", session), exc)

        similar = [p for p in found if p.id != prop.id][:limit]
        log.info("Found %d similar listings for %s", len(similar), prop.id)
        if not similar:
            return self._t("no_similar", session)
        return join(
            self._t("similar_header", session, property=prop.title),
            format_property_list(similar, session.language, footer=False),
        )

    def _on_document_choice(self, session: Session, message: NormalizedInput) -> Reply:
        choice = match_choice(message.text, DOCUMENT_OPTIONS)
        if choice is None:
            return Reply(join(self._t("invalid_choice", session), self._t("documents_menu", session)))
        if choice == 4:
            session.document_selection_phase = False
            return Reply(self._t("completed_menu", session))

        kind = DOCUMENT_BY_CHOICE[choice]
        prop = session.selected_property
        title = prop.title if prop else ""
        document = self._t(f"document_{kind}", session)
        url = prop.documents.get(kind) if prop else None

        if url and self._media_delivery:
            caption = self._t("document_caption", session, document=document, property=title)
            return Reply(None, effects=[SendMediaEffect(to=session.user_id, media_url=url, caption=caption)])

        info = session.user_info
        alert = t(
            "agent_document_request",
            Language.ENGLISH,
            document=t(f"document_{kind}", Language.ENGLISH),
            property=title or "-",
            name=info.name or "-",
            phone=info.phone or session.user_id,
        )
        text = join(
            self._t("document_requested", session, document=document, property=title),
            self._t("documents_menu", session),
        )
        return Reply(text, effects=[NotifyEffect(channel="agent", text=alert)])
