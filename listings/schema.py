"""Pydantic model for commercial property listings with search-friendly text."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from dialogue.models.property import PropertySummary


class CommercialListing(BaseModel):
    id: str
    title: str
    category: str  # "office", "shop", "warehouse", "other"
    for_sale: bool = False
    for_lease: bool = False
    location: str
    city: str = "Nashik"
    price: int  # INR
    carpet_area_sqft: Optional[int] = None
    built_up_area_sqft: Optional[int] = None
    parking_spaces: int = 0
    amenities: list[str] = []
    description: str = ""
    availability: str = "available"  # "available", "sold", "rented", "pending"
    is_promoted: bool = False
    agent_name: str = ""
    agent_phone: str = ""
    documents: dict[str, str] = {}  # "brochure" / "floor_plan" / "price_list" -> URL
    image_urls: list[str] = []

    @property
    def offer(self) -> str:
        if self.for_sale and self.for_lease:
            return "sale_or_lease"
        if self.for_sale:
            return "sale"
        if self.for_lease:
            return "lease"
        return ""

    @property
    def is_available(self) -> bool:
        return self.availability == "available"

    def to_searchable_text(self) -> str:
        """Generate text for the remote catalog's search index."""
        parts = [
            f"Commercial {self.category} {self.title}",
            f"at {self.location}, {self.city}",
            f"Rs {self.price}",
        ]
        if self.carpet_area_sqft:
            parts.append(f"{self.carpet_area_sqft} sq.ft carpet area")
        if self.offer:
            parts.append(f"For {self.offer.replace('_or_', ' or ')}")
        if self.description:
            parts.append(self.description)
        if self.amenities:
            parts.append(f"Amenities: {', '.join(self.amenities)}")
        if self.parking_spaces:
            parts.append(f"{self.parking_spaces} parking spaces")
        return ". ".join(parts)

    def to_summary(self) -> PropertySummary:
        return PropertySummary(
            id=self.id,
            title=self.title,
            location=f"{self.location}, {self.city}" if self.city else self.location,
            price=self.price,
            area=f"{self.carpet_area_sqft} sq.ft" if self.carpet_area_sqft else "",
            key_amenities=list(self.amenities),
            category=self.category,
            offer=self.offer,
            description=self.description,
            agent_name=self.agent_name or None,
            agent_phone=self.agent_phone or None,
            documents=dict(self.documents),
            image_urls=list(self.image_urls),
        )


DEFAULT_DATA_PATH = Path(__file__).parent / "sample_data" / "properties.json"


def load_listings(data_path: str | Path | None = None) -> list[CommercialListing]:
    """Read and validate a listings JSON file (a list of objects)."""
    path = Path(data_path) if data_path else DEFAULT_DATA_PATH
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return [CommercialListing(**item) for item in raw]
