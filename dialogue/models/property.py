"""Pydantic model for the property summaries a conversation carries around."""

from typing import Optional

from pydantic import BaseModel


class PropertySummary(BaseModel):
    """One catalog hit, as shown to the user and stored on the session."""

    id: str
    title: str
    location: str
    price: int  # rupees
    area: str = ""  # display string, e.g. "1200 sq.ft"
    key_amenities: list[str] = []
    category: str = ""  # office, shop, warehouse
    offer: str = ""  # sale, lease, sale_or_lease
    description: str = ""
    agent_name: Optional[str] = None
    agent_phone: Optional[str] = None
    documents: dict[str, str] = {}  # document kind -> URL
    image_urls: list[str] = []


class SearchCriteria(BaseModel):
    """What the user asked for; passed to the catalog."""

    category: Optional[str] = None  # None = all categories
    limit: int = 5
