"""High-level service API."""

from .service import PeopleSearchResponse, PeopleSearchService, SyncReport

__all__ = ["PeopleSearchResponse", "PeopleSearchService", "SyncReport"]
