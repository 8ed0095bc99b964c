"""Pydantic model tracking one user's conversation through the viewing flow."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from dialogue.models.property import PropertySummary

log = logging.getLogger("dialogue.models.session")

PHONE_PATTERN = re.compile(r"^\d{10}$")


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def redact_pii(value: str) -> str:
    """Mask PII for logging; show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


class ConversationState(str, Enum):
    LANGUAGE_SELECTION = "language_selection"
    WELCOME = "welcome"
    INTEREST_SELECTION = "interest_selection"
    PROPERTY_MATCH = "property_match"
    SCHEDULE_VISIT = "schedule_visit"
    COLLECT_INFO = "collect_info"
    COMPLETED = "completed"


class Language(str, Enum):
    ENGLISH = "english"
    MARATHI = "marathi"


class UserInfo(BaseModel):
    """Slots gathered during collect_info, filled strictly in order."""

    name: Optional[str] = None
    phone: Optional[str] = None
    preferred_time_raw: Optional[str] = None
    special_requirements: Optional[str] = None
    awaiting_freeform_requirement: bool = False

    @field_validator("phone")
    @classmethod
    def _phone_is_ten_digits(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not PHONE_PATTERN.match(value):
            raise ValueError("phone must be exactly 10 ASCII digits")
        return value

    def next_missing_slot(self) -> Optional[str]:
        for slot in ("name", "phone", "preferred_time_raw", "special_requirements"):
            if not getattr(self, slot):
                return slot
        return None


class Preferences(BaseModel):
    """Search criteria gathered before the catalog query."""

    category: Optional[str] = None


class Session(BaseModel):
    """Persisted conversational state for one user (unique key: user_id)."""

    user_id: str
    state: ConversationState = ConversationState.LANGUAGE_SELECTION
    language: Language = Language.ENGLISH

    preferences: Preferences = Field(default_factory=Preferences)
    matched_properties: list[PropertySummary] = []
    selected_property: Optional[PropertySummary] = None
    user_info: UserInfo = Field(default_factory=UserInfo)

    appointment_id: Optional[str] = None
    previous_appointment_ids: list[str] = []

    created_at: datetime = Field(default_factory=utcnow)
    last_message_timestamp: datetime = Field(default_factory=utcnow)
    last_activity_timestamp: datetime = Field(default_factory=utcnow)
    is_inactive: bool = False

    # Sub-modes of the completed state
    document_selection_phase: bool = False
    viewing_appointment_details: bool = False
    # Set when the last reply offered the language menu from welcome
    language_menu_shown: bool = False

    @field_validator("state", mode="before")
    @classmethod
    def _recover_unknown_state(cls, value: Any) -> Any:
        if isinstance(value, ConversationState):
            return value
        try:
            return ConversationState(value)
        except ValueError:
            log.warning("Unknown stored state %r; recovering to language_selection", value)
            return ConversationState.LANGUAGE_SELECTION

    def restart(self) -> None:
        """Clear the search and booking flow, keeping language and booking history."""
        self.preferences = Preferences()
        self.matched_properties = []
        self.selected_property = None
        self.user_info = UserInfo()
        self.document_selection_phase = False
        self.viewing_appointment_details = False
        self.language_menu_shown = False
        self.is_inactive = False
        if self.appointment_id:
            self.previous_appointment_ids.append(self.appointment_id)
            self.appointment_id = None
        self.state = ConversationState.WELCOME

    def select_property(self, index: int) -> PropertySummary:
        """Select the 1-based ``index`` from matched_properties."""
        if index < 1 or index > len(self.matched_properties):
            raise IndexError(index)
        self.selected_property = self.matched_properties[index - 1]
        return self.selected_property
