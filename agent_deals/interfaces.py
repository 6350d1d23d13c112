"""
Protocol interfaces for the AgentDeals catalog.

This module defines the boundaries the query components and the pricing
monitor depend on, so tests and transports can inject their own sources.
"""

from typing import List, Protocol

from .models.change import DealChange
from .models.offer import Offer


class ICatalogSource(Protocol):
    """Protocol for read-only access to the loaded catalog."""

    def load_offers(self) -> List[Offer]:
        """Return every offer in catalog order."""
        ...

    def load_deal_changes(self) -> List[DealChange]:
        """Return every recorded deal change."""
        ...

    def reset_cache(self) -> None:
        """Forget cached data so the next load re-reads the source."""
        ...


class IPageFetcher(Protocol):
    """Protocol for fetching vendor pricing pages."""

    def fetch(self, url: str) -> str:
        """Return the page body or raise PageFetchError."""
        ...
