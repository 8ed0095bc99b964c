"""Abstract base classes for the engine's external collaborators.

The engine only talks to these interfaces; concrete backends (static JSON,
remote HTTP services, Twilio, Google Sheets, an LLM) live in sibling
modules and are wired up in ``dialogue.app``.
"""

from abc import ABC, abstractmethod

from dialogue.models.booking import Booking, BookingRequest, LeadRecord
from dialogue.models.property import PropertySummary, SearchCriteria


class Catalog(ABC):
    """Property search backend."""

    @abstractmethod
    async def find_matches(self, criteria: SearchCriteria) -> list[PropertySummary]:
        """Return available properties matching ``criteria``.

        Args:
            criteria: Category filter and result limit.

        Returns:
            At most ``criteria.limit`` summaries, best match first.  An empty
            list means nothing matched; errors are raised, not returned.
        """


class BookingService(ABC):
    """Booking record store."""

    @abstractmethod
    async def create_booking(self, request: BookingRequest) -> str:
        """Persist a site-visit booking.

        Returns:
            The booking reference (``APT-YYYYMMDD-XXXXXX``).
        """

    @abstractmethod
    async def get_booking(self, booking_id: str) -> Booking:
        """Fetch a booking by reference. Raises KeyError when unknown."""


class NotificationSink(ABC):
    """Operator-facing alerts (the sales agent)."""

    @abstractmethod
    async def notify(self, channel: str, text: str) -> None:
        """Deliver ``text`` to ``channel`` (e.g. ``"agent"``)."""


class Messenger(ABC):
    """Outbound user messaging outside the request/response cycle."""

    @abstractmethod
    async def send_text(self, to: str, text: str) -> None:
        """Send a text message to user ``to``."""

    @abstractmethod
    async def send_media(self, to: str, media_url: str, caption: str = "") -> None:
        """Send a document or image by URL to user ``to``."""


class LeadLog(ABC):
    """CRM lead tracker."""

    @abstractmethod
    async def append(self, lead: LeadRecord) -> None:
        """Append one lead row."""


class Extractor(ABC):
    """Free-text interpreter for inputs the menus don't recognise."""

    @abstractmethod
    async def extract(self, kind: str, text: str) -> str:
        """Classify ``text`` for slot ``kind`` (e.g. ``"category"``).

        Returns:
            The extracted value, or ``"UNCLEAR"`` when unsure.
        """
