"""Data models for the dialogue layer."""

from .booking import Booking, BookingRequest, LeadRecord
from .property import PropertySummary, SearchCriteria
from .session import ConversationState, Language, Preferences, Session, UserInfo

__all__ = [
    "Booking",
    "BookingRequest",
    "ConversationState",
    "Language",
    "LeadRecord",
    "Preferences",
    "PropertySummary",
    "SearchCriteria",
    "Session",
    "UserInfo",
]
