"""Information collection: name -> phone -> preferred time -> requirements.

One slot is filled per message.  A message that fails validation writes
nothing and re-prompts for the same slot; a valid one is stored and the
prompt for the next empty slot comes back in the same turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from dialogue.errors import ValidationFailure
from dialogue.models.session import Session
from dialogue.normalize import NormalizedInput
from dialogue.validators import (
    OTHER_REQUIREMENT,
    REQUIREMENT_CHOICES,
    parse_requirement_choice,
    validate_freeform_requirement,
    validate_name,
    validate_phone,
    validate_preferred_time,
)

log = logging.getLogger("dialogue.slot_filling")

SLOT_ORDER = ("name", "phone", "preferred_time_raw", "special_requirements")

SLOT_PROMPTS = {
    "name": "ask_name",
    "phone": "ask_phone",
    "preferred_time_raw": "ask_time",
    "special_requirements": "ask_requirements",
}


@dataclass
class SlotOutcome:
    """What to say after one collect_info message.

    ``complete`` means every slot is filled and the booking should be
    attempted; otherwise ``message_keys`` are joined into the reply.
    """

    complete: bool = False
    message_keys: list[str] = field(default_factory=list)


def prompt_keys(session: Session) -> list[str]:
    """Message keys asking for the next empty slot."""
    info = session.user_info
    if info.awaiting_freeform_requirement:
        return ["ask_requirement_details"]
    slot: Optional[str] = info.next_missing_slot()
    return [SLOT_PROMPTS[slot]] if slot else []


def fill_next_slot(session: Session, message: NormalizedInput, name_min_length: int = 2) -> SlotOutcome:
    info = session.user_info
    slot = info.next_missing_slot()
    if slot is None:
        # Everything collected earlier; a previous booking attempt failed.
        return SlotOutcome(complete=True)

    try:
        if slot == "name":
            info.name = validate_name(message.raw, name_min_length)
        elif slot == "phone":
            info.phone = validate_phone(message.text)
        elif slot == "preferred_time_raw":
            info.preferred_time_raw = validate_preferred_time(message.raw, session.language)
        elif info.awaiting_freeform_requirement:
            info.special_requirements = validate_freeform_requirement(message.raw)
            info.awaiting_freeform_requirement = False
        else:
            choice = parse_requirement_choice(message.text)
            if choice == OTHER_REQUIREMENT:
                info.awaiting_freeform_requirement = True
                return SlotOutcome(message_keys=["ask_requirement_details"])
            info.special_requirements = REQUIREMENT_CHOICES[choice]
    except ValidationFailure as exc:
        log.info("Slot %s rejected", exc.slot)
        if exc.message_key == "ask_requirements":
            return SlotOutcome(message_keys=["invalid_choice", "ask_requirements"])
        return SlotOutcome(message_keys=[exc.message_key])

    log.debug("Slot %s filled", slot)
    if info.next_missing_slot() is None:
        return SlotOutcome(complete=True)
    return SlotOutcome(message_keys=prompt_keys(session))
