"""Property catalog backends.

StaticCatalog serves the bundled JSON listings file; HttpCatalog queries the
remote search service that ``python -m listings.ingest`` populates.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
from pydantic import ValidationError

from dialogue.errors import CollaboratorFailure
from dialogue.models.property import PropertySummary, SearchCriteria
from dialogue.providers.base import Catalog
from listings.schema import CommercialListing, load_listings

log = logging.getLogger("dialogue.providers.catalog")


class StaticCatalog(Catalog):
    """Catalog backed by a local listings JSON file."""

    def __init__(self, data_path: str | Path | None = None) -> None:
        self._listings = load_listings(data_path)
        log.info("Static catalog loaded with %d listings", len(self._listings))

    async def find_matches(self, criteria: SearchCriteria) -> list[PropertySummary]:
        hits = [
            listing
            for listing in self._listings
            if listing.is_available
            and (criteria.category is None or listing.category == criteria.category)
        ]
        # Promoted listings first, otherwise file order
        hits.sort(key=lambda listing: not listing.is_promoted)
        return [listing.to_summary() for listing in hits[: criteria.limit]]


class HttpCatalog(Catalog):
    """Catalog backed by the remote search service (``POST /query``)."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def _payload(self, criteria: SearchCriteria) -> dict:
        filters: dict[str, str] = {"availability": "available"}
        if criteria.category:
            filters["category"] = criteria.category
        query = f"commercial {criteria.category or 'property'}"
        return {"query": query, "top_k": criteria.limit, "filters": filters}

    async def _post(self, payload: dict) -> dict:
        if self._client is not None:
            resp = await self._client.post(f"{self._base_url}/query", json=payload)
            resp.raise_for_status()
            return resp.json()
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.post(f"{self._base_url}/query", json=payload)
            resp.raise_for_status()
            return resp.json()

    async def find_matches(self, criteria: SearchCriteria) -> list[PropertySummary]:
        try:
            data = await self._post(self._payload(criteria))
        except httpx.HTTPStatusError as exc:
            log.warning("Catalog search returned status %s", exc.response.status_code)
            raise CollaboratorFailure("catalog", exc) from exc
        except httpx.HTTPError as exc:
            log.warning("Catalog search unavailable: %s", exc)
            raise CollaboratorFailure("catalog", exc) from exc

        summaries: list[PropertySummary] = []
        for result in data.get("results", []):
            try:
                listing = CommercialListing(**result.get("metadata", {}))
            except ValidationError as exc:
                log.warning("Skipping malformed catalog result %s: %s", result.get("id"), exc)
                continue
            if not listing.is_available:
                continue
            if criteria.category and listing.category != criteria.category:
                continue
            summaries.append(listing.to_summary())
        return summaries[: criteria.limit]
