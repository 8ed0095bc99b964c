"""Shared fakes and fixtures for the dialogue tests."""

import os
import sys
from datetime import datetime, timezone

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dialogue.config import Settings
from dialogue.effects import EffectDispatcher
from dialogue.engine import DialogueEngine
from dialogue.models.booking import Booking, BookingRequest, LeadRecord
from dialogue.models.property import PropertySummary, SearchCriteria
from dialogue.models.session import Session
from dialogue.providers.base import (
    BookingService,
    Catalog,
    Extractor,
    LeadLog,
    Messenger,
    NotificationSink,
)
from dialogue.providers.booking import InMemoryBookingService
from dialogue.providers.catalog import StaticCatalog
from dialogue.service import ConversationService
from dialogue.store import InMemorySessionRepository, SessionStore

NOW = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)


# ── Fake collaborators ─────────────────────────────────────────────

class FakeCatalog(Catalog):
    def __init__(self, properties=None, error=None):
        self.properties = properties or []
        self.error = error
        self.calls: list[SearchCriteria] = []

    async def find_matches(self, criteria):
        self.calls.append(criteria)
        if self.error:
            raise self.error
        return list(self.properties[: criteria.limit])


class FlakyBookingService(BookingService):
    """Fails the first ``failures`` create calls, then books in memory."""

    def __init__(self, failures=1):
        self.failures = failures
        self.inner = InMemoryBookingService(now=lambda: NOW)
        self.requests: list[BookingRequest] = []

    async def create_booking(self, request):
        self.requests.append(request)
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("booking backend down")
        return await self.inner.create_booking(request)

    async def get_booking(self, booking_id) -> Booking:
        return await self.inner.get_booking(booking_id)


class RecordingMessenger(Messenger, NotificationSink):
    def __init__(self, fail=False):
        self.fail = fail
        self.texts: list[tuple[str, str]] = []
        self.media: list[tuple[str, str, str]] = []
        self.notifications: list[tuple[str, str]] = []

    async def send_text(self, to, text):
        if self.fail:
            raise RuntimeError("twilio down")
        self.texts.append((to, text))

    async def send_media(self, to, media_url, caption=""):
        if self.fail:
            raise RuntimeError("twilio down")
        self.media.append((to, media_url, caption))

    async def notify(self, channel, text):
        if self.fail:
            raise RuntimeError("twilio down")
        self.notifications.append((channel, text))


class RecordingLeadLog(LeadLog):
    def __init__(self):
        self.leads: list[LeadRecord] = []

    async def append(self, lead):
        self.leads.append(lead)


class FakeExtractor(Extractor):
    def __init__(self, answer="UNCLEAR"):
        self.answer = answer
        self.calls: list[tuple[str, str]] = []

    async def extract(self, kind, text):
        self.calls.append((kind, text))
        return self.answer


def make_property(pid="P1", title="Test Office", **kwargs) -> PropertySummary:
    data = {
        "id": pid,
        "title": title,
        "location": "College Road, Nashik",
        "price": 5000000,
        "area": "800 sq.ft",
        "key_amenities": ["Lift", "Parking"],
        "category": "office",
        "offer": "sale",
    }
    data.update(kwargs)
    return PropertySummary(**data)


def make_session(user_id="+919876543210", **kwargs) -> Session:
    kwargs.setdefault("created_at", NOW)
    kwargs.setdefault("last_message_timestamp", NOW)
    kwargs.setdefault("last_activity_timestamp", NOW)
    return Session(user_id=user_id, **kwargs)


# ── Fixtures ───────────────────────────────────────────────────────

@pytest.fixture
def config():
    return Settings(_env_file=None, llm_provider="none", debug=False, session_store_path="")


@pytest.fixture
def catalog():
    return StaticCatalog()


@pytest.fixture
def booking_service():
    return InMemoryBookingService(now=lambda: NOW)


@pytest.fixture
def engine(catalog, booking_service, config):
    return DialogueEngine(catalog=catalog, booking_service=booking_service, config=config)


@pytest.fixture
def messenger():
    return RecordingMessenger()


@pytest.fixture
def lead_log():
    return RecordingLeadLog()


@pytest.fixture
def store():
    return SessionStore(InMemorySessionRepository(), now=lambda: NOW)


@pytest.fixture
def service(engine, store, messenger, lead_log):
    dispatcher = EffectDispatcher(notifier=messenger, messenger=messenger, lead_log=lead_log, timeout=1.0)
    return ConversationService(engine, store, dispatcher, now=lambda: NOW)
