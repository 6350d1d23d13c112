"""
Query result models returned by the catalog components.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .change import DealChange
from .offer import Offer


@dataclass
class Category:
    """Offer count for one category."""

    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "count": self.count}


@dataclass
class SearchPage:
    """A slice of search results together with the unsliced total."""

    results: List[Offer]
    total: int
    limit: int
    offset: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [offer.to_dict() for offer in self.results],
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
        }


@dataclass
class OfferDetails:
    """A matched offer enriched with vendors from the same category."""

    offer: Offer
    related_vendors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = self.offer.to_dict()
        data["relatedVendors"] = list(self.related_vendors)
        return data


@dataclass
class OfferNotFound:
    """Lookup miss with close vendor names."""

    error: str
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "suggestions": list(self.suggestions)}


OfferLookupResult = Union[OfferDetails, OfferNotFound]


@dataclass
class ChangeFeedResult:
    """Filtered change events, newest first."""

    changes: List[DealChange]
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "changes": [change.to_dict() for change in self.changes],
            "total": self.total,
        }


@dataclass
class StaleEntry:
    """An offer whose verification date is older than the threshold."""

    vendor: str
    category: str
    days_since: Optional[int]  # None means never verified

    @property
    def never_verified(self) -> bool:
        return self.days_since is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendor": self.vendor,
            "category": self.category,
            "daysSince": self.days_since,
        }
