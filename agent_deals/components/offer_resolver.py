"""Vendor lookup with related vendors and fuzzy suggestions."""

import logging
from typing import List

from ..interfaces import ICatalogSource
from ..models.offer import Offer
from ..models.query import OfferDetails, OfferLookupResult, OfferNotFound

logger = logging.getLogger(__name__)

MAX_RELATED_VENDORS = 5
MAX_SUGGESTIONS = 5


class OfferResolver:
    """Resolves a vendor name to its offer, or to close vendor names."""

    def __init__(self, store: ICatalogSource):
        self.store = store

    def get_offer_details(self, vendor_name: str) -> OfferLookupResult:
        """
        Look up a vendor by exact, case-insensitive name.

        Returns:
            OfferDetails on a match, otherwise OfferNotFound carrying up to
            five suggested vendor names. Never raises for a miss.
        """
        offers = self.store.load_offers()
        wanted = vendor_name.lower()

        for offer in offers:
            if offer.vendor.lower() == wanted:
                return OfferDetails(
                    offer=offer, related_vendors=self._related_vendors(offer, offers)
                )

        suggestions = self._suggest(wanted, offers)
        logger.info(
            f"Vendor lookup miss for {vendor_name!r} ({len(suggestions)} suggestions)"
        )
        return OfferNotFound(
            error=f'Vendor "{vendor_name}" not found.', suggestions=suggestions
        )

    @staticmethod
    def _related_vendors(match: Offer, offers: List[Offer]) -> List[str]:
        related = [
            o.vendor
            for o in offers
            if o.category == match.category and o.vendor != match.vendor
        ]
        return related[:MAX_RELATED_VENDORS]

    @staticmethod
    def _suggest(wanted: str, offers: List[Offer]) -> List[str]:
        # An empty name is a substring of every vendor; suggest nothing for it
        if not wanted:
            return []

        suggestions = []
        for offer in offers:
            candidate = offer.vendor.lower()
            if wanted in candidate or candidate in wanted:
                suggestions.append(offer.vendor)
                if len(suggestions) == MAX_SUGGESTIONS:
                    break
        return suggestions
