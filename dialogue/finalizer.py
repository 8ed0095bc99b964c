"""Turns a fully collected session into a booking.

Preconditions are checked first and reported as PreconditionFailure; the
booking service call is time-bounded and surfaces as CollaboratorFailure.
Only after the booking exists are the agent alert and CRM lead emitted, as
effects the caller dispatches later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dialogue.effects import Effect, LogLeadEffect, NotifyEffect
from dialogue.errors import PreconditionFailure, bounded
from dialogue.i18n import t
from dialogue.models.booking import BookingRequest, LeadRecord
from dialogue.models.session import PHONE_PATTERN, Language, Session, redact_pii
from dialogue.providers.base import BookingService

log = logging.getLogger("dialogue.finalizer")


@dataclass
class Confirmation:
    appointment_id: str
    effects: list[Effect] = field(default_factory=list)


def missing_preconditions(session: Session) -> list[str]:
    info = session.user_info
    missing: list[str] = []
    if session.selected_property is None:
        missing.append("selected_property")
    if not (info.name and info.name.strip()):
        missing.append("name")
    if not (info.phone and PHONE_PATTERN.match(info.phone)):
        missing.append("phone")
    if not (info.preferred_time_raw and info.preferred_time_raw.strip()):
        missing.append("preferred_time_raw")
    if session.appointment_id:
        missing.append("appointment_id")
    return missing


class AppointmentFinalizer:
    def __init__(self, booking_service: BookingService, timeout: float = 10.0) -> None:
        self._booking_service = booking_service
        self._timeout = timeout

    async def finalize(self, session: Session) -> Confirmation:
        """Create the booking and record its id on ``session``.

        Raises PreconditionFailure or CollaboratorFailure; on either the
        session is left untouched.
        """
        missing = missing_preconditions(session)
        if missing:
            raise PreconditionFailure(missing)

        prop = session.selected_property
        info = session.user_info
        request = BookingRequest(
            property_id=prop.id,
            user_id=session.user_id,
            name=info.name,
            phone=info.phone,
            time_text=info.preferred_time_raw,
            notes=info.special_requirements or "",
        )
        booking_id = await bounded(
            self._booking_service.create_booking(request), "booking", self._timeout,
        )

        session.appointment_id = booking_id
        log.info(
            "Appointment %s booked: property=%s phone=%s time=%r",
            booking_id,
            prop.id,
            redact_pii(info.phone),
            info.preferred_time_raw,
        )
        return Confirmation(appointment_id=booking_id, effects=self._effects(session))

    @staticmethod
    def _effects(session: Session) -> list[Effect]:
        prop = session.selected_property
        info = session.user_info
        language_name = "Marathi" if session.language == Language.MARATHI else "English"
        requirements = info.special_requirements or ""
        alert = t(
            "agent_new_booking",
            Language.ENGLISH,
            appointment_id=session.appointment_id,
            property=prop.title,
            name=info.name,
            phone=info.phone,
            time=info.preferred_time_raw,
            requirements=requirements or "-",
            language=language_name,
        )
        lead = LeadRecord(
            name=info.name,
            phone=info.phone,
            visit_time=info.preferred_time_raw,
            purpose=requirements,
            language=language_name,
            property_title=prop.title,
        )
        return [NotifyEffect(channel="agent", text=alert), LogLeadEffect(lead=lead)]
