"""Booking record stores.

InMemoryBookingService keeps bookings in process (the default);
HttpBookingService talks to a remote bookings API.
"""

from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime
from typing import Callable

import httpx

from dialogue.errors import CollaboratorFailure
from dialogue.models.booking import Booking, BookingRequest
from dialogue.models.session import utcnow
from dialogue.providers.base import BookingService

log = logging.getLogger("dialogue.providers.booking")

_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def generate_reference(now: datetime | None = None) -> str:
    """Booking reference in the form ``APT-YYYYMMDD-XXXXXX``."""
    now = now or utcnow()
    suffix = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(6))
    return f"APT-{now:%Y%m%d}-{suffix}"


class InMemoryBookingService(BookingService):
    def __init__(self, now: Callable[[], datetime] = utcnow) -> None:
        self._now = now
        self._bookings: dict[str, Booking] = {}

    async def create_booking(self, request: BookingRequest) -> str:
        now = self._now()
        booking_id = generate_reference(now)
        while booking_id in self._bookings:
            booking_id = generate_reference(now)
        self._bookings[booking_id] = Booking(
            id=booking_id,
            property_id=request.property_id,
            name=request.name,
            phone=request.phone,
            time_text=request.time_text,
            notes=request.notes,
            created_at=now,
        )
        log.info("Booking %s created for property %s", booking_id, request.property_id)
        return booking_id

    async def get_booking(self, booking_id: str) -> Booking:
        try:
            return self._bookings[booking_id]
        except KeyError:
            raise KeyError(f"Booking {booking_id} not found") from None


class HttpBookingService(BookingService):
    """Remote bookings API: ``POST /bookings`` and ``GET /bookings/{id}``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self._base_url}{path}"
        if self._client is not None:
            return await self._client.request(method, url, **kwargs)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.request(method, url, **kwargs)

    async def create_booking(self, request: BookingRequest) -> str:
        try:
            resp = await self._request("POST", "/bookings", json=request.model_dump())
            resp.raise_for_status()
            booking_id = resp.json()["id"]
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            log.warning("Booking service create failed: %s", exc)
            raise CollaboratorFailure("booking", exc) from exc
        log.info("Booking %s created remotely", booking_id)
        return booking_id

    async def get_booking(self, booking_id: str) -> Booking:
        try:
            resp = await self._request("GET", f"/bookings/{booking_id}")
        except httpx.HTTPError as exc:
            raise CollaboratorFailure("booking", exc) from exc
        if resp.status_code == 404:
            raise KeyError(f"Booking {booking_id} not found")
        try:
            resp.raise_for_status()
            return Booking.model_validate(resp.json())
        except (httpx.HTTPError, ValueError) as exc:
            raise CollaboratorFailure("booking", exc) from exc
