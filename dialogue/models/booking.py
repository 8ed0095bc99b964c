"""Pydantic models for booking requests, booking records and CRM leads."""

from datetime import datetime

from pydantic import BaseModel


class BookingRequest(BaseModel):
    """Data collected from the user to book a site visit."""

    property_id: str
    user_id: str = ""
    name: str
    phone: str  # 10 digits
    time_text: str  # as typed by the user
    notes: str = ""
    source: str = "whatsapp_bot"


class Booking(BaseModel):
    """A booking record as held by the booking service."""

    id: str
    property_id: str
    name: str
    phone: str
    time_text: str
    notes: str = ""
    status: str = "scheduled"  # scheduled, confirmed, cancelled, completed
    created_at: datetime


class LeadRecord(BaseModel):
    """One row for the CRM lead tracker."""

    name: str
    phone: str
    visit_time: str
    purpose: str = ""
    language: str = "English"
    source: str = "WhatsApp Bot"
    status: str = "Scheduled"
    property_title: str = ""

    def to_row(self, timestamp: str) -> list[str]:
        """Columns: Name, Contact, Visit Date & Time, Purpose, Language, Source, Status, Timestamp."""
        return [
            self.name,
            self.phone,
            self.visit_time,
            self.purpose,
            self.language,
            self.source,
            self.status,
            timestamp,
        ]
