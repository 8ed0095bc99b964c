"""Tests for collaborator backends: catalog, bookings, Twilio, LLM and Sheets.

HTTP backends run against httpx.MockTransport and the Twilio and Sheets
clients are replaced by fakes; nothing leaves the process.
"""

import json
import os
import re
import sys
from types import SimpleNamespace

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from dialogue.errors import CollaboratorFailure
from dialogue.models.booking import BookingRequest, LeadRecord
from dialogue.models.property import SearchCriteria
from dialogue.providers.booking import HttpBookingService, InMemoryBookingService, generate_reference
from dialogue.providers.catalog import HttpCatalog, StaticCatalog
from dialogue.providers.extractor import UNCLEAR, LLMExtractor
from dialogue.providers.sheets import GoogleSheetsLeadLog
from dialogue.providers.twilio import TwilioMessenger, whatsapp_address

from conftest import NOW


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def listing(pid, category="office", availability="available", **kwargs):
    data = {
        "id": pid,
        "title": f"Listing {pid}",
        "category": category,
        "for_sale": True,
        "location": "Nashik Road",
        "price": 4200000,
        "availability": availability,
    }
    data.update(kwargs)
    return data


# ── Catalog ────────────────────────────────────────────────────────

class TestStaticCatalog:
    async def test_filters_by_category_and_availability(self):
        matches = await StaticCatalog().find_matches(SearchCriteria(category="office"))
        assert [m.id for m in matches] == ["MG-OFF-001", "MG-OFF-002"]

    async def test_promoted_first(self):
        matches = await StaticCatalog().find_matches(SearchCriteria(category=None, limit=10))
        promoted = {"MG-OFF-001", "MG-SHP-001"}
        assert {m.id for m in matches[:2]} == promoted
        assert "MG-WH-002" not in {m.id for m in matches}

    async def test_limit(self):
        matches = await StaticCatalog().find_matches(SearchCriteria(limit=2))
        assert len(matches) == 2

    async def test_summary_fields(self):
        (shop, *_) = await StaticCatalog().find_matches(SearchCriteria(category="shop"))
        assert shop.location.endswith(", Nashik")
        assert shop.area.endswith("sq.ft")
        assert shop.image_urls


class TestHttpCatalog:
    async def test_query_and_parse(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"results": [
                {"id": "A", "metadata": listing("A", is_promoted=True)},
                {"id": "B", "metadata": listing("B", availability="sold")},
                {"id": "C", "metadata": listing("C", category="shop")},
                {"id": "D", "metadata": {"title": "broken"}},
            ]})

        catalog = HttpCatalog("http://catalog.local/", client=mock_client(handler))
        matches = await catalog.find_matches(SearchCriteria(category="office", limit=3))

        assert seen["url"] == "http://catalog.local/query"
        assert seen["body"]["top_k"] == 3
        assert seen["body"]["filters"] == {"availability": "available", "category": "office"}
        assert [m.id for m in matches] == ["A"]

    async def test_server_error(self):
        catalog = HttpCatalog(
            "http://catalog.local", client=mock_client(lambda r: httpx.Response(503)),
        )
        with pytest.raises(CollaboratorFailure):
            await catalog.find_matches(SearchCriteria())

    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        catalog = HttpCatalog("http://catalog.local", client=mock_client(handler))
        with pytest.raises(CollaboratorFailure):
            await catalog.find_matches(SearchCriteria())


# ── Bookings ───────────────────────────────────────────────────────

REQUEST = BookingRequest(property_id="MG-OFF-001", name="Rahul", phone="9876543210", time_text="Monday")


class TestBookings:
    def test_reference_format(self):
        assert re.fullmatch(r"APT-20260302-[A-Z0-9]{6}", generate_reference(NOW))

    async def test_in_memory(self):
        service = InMemoryBookingService(now=lambda: NOW)
        booking_id = await service.create_booking(REQUEST)
        booking = await service.get_booking(booking_id)
        assert booking.status == "scheduled"
        assert booking.time_text == "Monday"
        with pytest.raises(KeyError):
            await service.get_booking("APT-NOPE")

    async def test_http_create_and_get(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                body = json.loads(request.content)
                assert body["source"] == "whatsapp_bot"
                return httpx.Response(201, json={"id": "APT-20260302-REMOTE"})
            if request.url.path == "/bookings/APT-20260302-REMOTE":
                return httpx.Response(200, json={
                    "id": "APT-20260302-REMOTE",
                    "property_id": "MG-OFF-001",
                    "name": "Rahul",
                    "phone": "9876543210",
                    "time_text": "Monday",
                    "status": "confirmed",
                    "created_at": NOW.isoformat(),
                })
            return httpx.Response(404)

        service = HttpBookingService("http://bookings.local", client=mock_client(handler))
        booking_id = await service.create_booking(REQUEST)
        assert booking_id == "APT-20260302-REMOTE"
        assert (await service.get_booking(booking_id)).status == "confirmed"
        with pytest.raises(KeyError):
            await service.get_booking("APT-NOPE")

    async def test_http_create_failure(self):
        service = HttpBookingService(
            "http://bookings.local", client=mock_client(lambda r: httpx.Response(500)),
        )
        with pytest.raises(CollaboratorFailure):
            await service.create_booking(REQUEST)


# ── Twilio ─────────────────────────────────────────────────────────

class FakeTwilioClient:
    """Mimics twilio.rest.Client's messages.create() call."""

    def __init__(self, error=None):
        self.created = []
        self.error = error
        self.messages = self

    def create(self, **kwargs):
        if self.error:
            raise self.error
        self.created.append(kwargs)
        return SimpleNamespace(sid=f"SM{len(self.created):03d}")


class TestTwilioMessenger:
    @pytest.fixture
    def client(self):
        return FakeTwilioClient()

    @pytest.fixture
    def messenger(self, client):
        return TwilioMessenger(
            "AC123", "token", "+14155238886",
            agent_number="+919800000000",
            client=client,
        )

    def test_whatsapp_address(self):
        assert whatsapp_address("+919876543210") == "whatsapp:+919876543210"
        assert whatsapp_address("whatsapp:+919876543210") == "whatsapp:+919876543210"

    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            TwilioMessenger("", "token", "+14155238886")

    def test_builds_rest_client(self):
        messenger = TwilioMessenger("AC123", "token", "+14155238886")
        assert isinstance(messenger._client, Client)
        assert messenger._client.username == "AC123"

    async def test_send_text(self, messenger, client):
        await messenger.send_text("+919876543210", "Hello")
        assert client.created == [{
            "from_": "whatsapp:+14155238886",
            "to": "whatsapp:+919876543210",
            "body": "Hello",
        }]

    async def test_send_media(self, messenger, client):
        await messenger.send_media("+919876543210", "https://example.com/b.pdf", "Brochure")
        (call,) = client.created
        assert call["media_url"] == ["https://example.com/b.pdf"]
        assert call["body"] == "Brochure"

    async def test_agent_notification(self, messenger, client):
        await messenger.notify("agent", "New booking")
        (call,) = client.created
        assert call["to"] == "whatsapp:+919800000000"

    async def test_unknown_channel_ignored(self, messenger, client):
        await messenger.notify("email", "New booking")
        assert client.created == []

    async def test_error_becomes_collaborator_failure(self):
        error = TwilioRestException(401, "/Accounts/AC123/Messages.json", msg="Authenticate")
        messenger = TwilioMessenger(
            "AC123", "token", "+14155238886", client=FakeTwilioClient(error=error),
        )
        with pytest.raises(CollaboratorFailure) as excinfo:
            await messenger.send_text("+919876543210", "Hello")
        assert excinfo.value.__cause__ is error


# ── LLM extractor ──────────────────────────────────────────────────

class TestLLMExtractor:
    async def test_claude(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"content": [{"type": "text", "text": "Warehouse."}]})

        extractor = LLMExtractor("claude", api_key="sk-test", model="m", client=mock_client(handler))
        assert await extractor.extract("category", "godown chahije") == "warehouse"
        assert seen["headers"]["x-api-key"] == "sk-test"
        assert "godown chahije" in seen["body"]["messages"][0]["content"]

    async def test_ollama_unclear(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/generate"
            return httpx.Response(200, json={"response": "I think maybe a house"})

        extractor = LLMExtractor("ollama", model="m", client=mock_client(handler))
        assert await extractor.extract("category", "something") == UNCLEAR

    async def test_http_error(self):
        extractor = LLMExtractor(
            "ollama", model="m", client=mock_client(lambda r: httpx.Response(500)),
        )
        with pytest.raises(CollaboratorFailure):
            await extractor.extract("category", "office")

    def test_claude_requires_key(self):
        with pytest.raises(ValueError):
            LLMExtractor("claude")


# ── Google Sheets ──────────────────────────────────────────────────

class FakeSheetsService:
    """Mimics the googleapiclient call chain spreadsheets().values().append().execute()."""

    def __init__(self):
        self.appended = []

    def spreadsheets(self):
        return self

    def values(self):
        return self

    def append(self, **kwargs):
        self.appended.append(kwargs)
        return self

    def execute(self):
        return {"updates": {"updatedCells": 8}}


class TestGoogleSheetsLeadLog:
    async def test_appends_row(self):
        service = FakeSheetsService()
        lead_log = GoogleSheetsLeadLog("sheet-1", service=service, now=lambda: NOW)
        await lead_log.append(LeadRecord(
            name="Rahul", phone="9876543210", visit_time="Monday", purpose="Financing",
        ))

        (call,) = service.appended
        assert call["spreadsheetId"] == "sheet-1"
        assert call["range"] == "CRM Lead Tracker!A:H"
        assert call["valueInputOption"] == "USER_ENTERED"
        assert call["body"]["values"] == [[
            "Rahul", "9876543210", "Monday", "Financing",
            "English", "WhatsApp Bot", "Scheduled", "02 Mar 2026, 10:00 AM",
        ]]

    def test_requires_sheet_id(self):
        with pytest.raises(ValueError):
            GoogleSheetsLeadLog("", service=FakeSheetsService())
