"""Load commercial listings into the remote catalog service.

Usage:
    # Ingest sample data (default)
    python -m listings.ingest

    # Ingest another export
    python -m listings.ingest --data path/to/properties.json

    # Use a different catalog service URL
    CATALOG_URL=http://localhost:8100 python -m listings.ingest
"""

import argparse
import asyncio
from pathlib import Path

import httpx

from dialogue.config import settings
from listings.schema import DEFAULT_DATA_PATH, CommercialListing, load_listings

BATCH_SIZE = 50


def _record(listing: CommercialListing) -> dict:
    return {
        "id": listing.id,
        "text": listing.to_searchable_text(),
        "metadata": listing.model_dump(),
    }


async def ingest_listings(
    data_path: str | Path | None = None,
    catalog_url: str = "",
    client: httpx.AsyncClient | None = None,
) -> int:
    """Load listings from a JSON file and push them to the catalog service."""
    catalog_url = (catalog_url or settings.catalog_url or "http://localhost:8000").rstrip("/")
    listings = load_listings(data_path)
    print(f"Loaded {len(listings)} listings from {data_path or DEFAULT_DATA_PATH}")

    if client is None:
        async with httpx.AsyncClient(base_url=catalog_url, timeout=60) as own_client:
            await _ingest(own_client, listings)
    else:
        await _ingest(client, listings)

    print(f"Done: {len(listings)} listings ingested into {catalog_url}")
    return len(listings)


async def _ingest(client: httpx.AsyncClient, listings: list[CommercialListing]) -> None:
    if len(listings) > BATCH_SIZE:
        await _ingest_batched(client, listings)
    else:
        await _ingest_single(client, listings)


async def _ingest_single(client: httpx.AsyncClient, listings: list[CommercialListing]) -> None:
    """Ingest listings one at a time (for small datasets)."""
    for listing in listings:
        resp = await client.post("/ingest", json=_record(listing))
        resp.raise_for_status()
        print(f"  Ingested: {listing.title}")


async def _ingest_batched(client: httpx.AsyncClient, listings: list[CommercialListing]) -> None:
    """Ingest listings in batches for efficiency."""
    for i in range(0, len(listings), BATCH_SIZE):
        batch = listings[i:i + BATCH_SIZE]
        resp = await client.post(
            "/ingest/batch",
            json={"records": [_record(listing) for listing in batch]},
        )
        resp.raise_for_status()
        data = resp.json()
        print(f"  Batch {i // BATCH_SIZE + 1}: {data['indexed']} indexed, {data['errors']} errors")


def main():
    parser = argparse.ArgumentParser(
        description="Ingest commercial listings into the catalog service",
        prog="python -m listings.ingest",
    )
    parser.add_argument(
        "--data",
        help="Path to listings JSON file (default: sample_data/properties.json)",
    )
    parser.add_argument("--url", default="", help="Catalog service base URL")
    args = parser.parse_args()
    asyncio.run(ingest_listings(args.data, args.url))


if __name__ == "__main__":
    main()
