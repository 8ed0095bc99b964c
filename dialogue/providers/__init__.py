"""Collaborator interfaces and their concrete backends."""

from .base import BookingService, Catalog, Extractor, LeadLog, Messenger, NotificationSink

__all__ = [
    "BookingService",
    "Catalog",
    "Extractor",
    "LeadLog",
    "Messenger",
    "NotificationSink",
]
