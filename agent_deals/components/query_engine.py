"""Query engine for category aggregation, offer search and pagination."""

import logging
from typing import Callable, Dict, List, Optional

from ..interfaces import ICatalogSource
from ..models.offer import Offer
from ..models.query import Category, SearchPage

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
SORT_OPTIONS = ("vendor", "category", "newest")


def locale_key(value: str):
    """Sort key approximating a locale-aware, case-insensitive comparison."""
    return (value.casefold(), value)


def _sort_offers(offers: List[Offer], sort: Optional[str]) -> List[Offer]:
    if sort == "vendor":
        return sorted(offers, key=lambda o: locale_key(o.vendor))
    if sort == "category":
        return sorted(
            offers, key=lambda o: (locale_key(o.category), locale_key(o.vendor))
        )
    if sort == "newest":
        # reverse=True keeps equal dates in their filtered order
        return sorted(offers, key=lambda o: o.verified_date, reverse=True)
    return offers


def paginate(
    results: List[Offer], limit: Optional[int] = None, offset: Optional[int] = None
) -> SearchPage:
    """
    Slice a full result list.

    Without limit or offset the whole list is returned. When only one of them
    is given the other defaults (offset 0, limit 20). The reported total is
    always the length of the unsliced list.
    """
    total = len(results)
    use_pagination = limit is not None or offset is not None
    effective_offset = offset if offset is not None else 0
    if limit is not None:
        effective_limit = limit
    else:
        effective_limit = DEFAULT_PAGE_SIZE if use_pagination else total

    if effective_limit < 0 or effective_offset < 0:
        raise ValueError("limit and offset must be non-negative")

    page = results[effective_offset : effective_offset + effective_limit]
    return SearchPage(
        results=page, total=total, limit=effective_limit, offset=effective_offset
    )


class QueryEngine:
    """Answers category and search queries over the cached catalog."""

    def __init__(self, store: ICatalogSource):
        self.store = store

    def get_categories(self) -> List[Category]:
        """Count offers per category, sorted by category name."""
        counts: Dict[str, int] = {}
        for offer in self.store.load_offers():
            counts[offer.category] = counts.get(offer.category, 0) + 1

        return [
            Category(name=name, count=count)
            for name, count in sorted(counts.items(), key=lambda item: locale_key(item[0]))
        ]

    def search_offers(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        eligibility_type: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> List[Offer]:
        """
        Filter offers by category, eligibility type and keywords, then sort.

        Every whitespace-separated query term must appear in an offer's
        searchable text. Offers without eligibility never pass an
        eligibility filter. Unknown sort values keep catalog order.
        """
        predicates: List[Callable[[Offer], bool]] = []

        if category:
            wanted_category = category.lower()
            predicates.append(lambda o: o.category.lower() == wanted_category)

        if eligibility_type:
            wanted_type = eligibility_type.lower()
            predicates.append(
                lambda o: o.eligibility is not None
                and o.eligibility.type.value.lower() == wanted_type
            )

        terms = query.lower().split() if query else []
        if terms:
            predicates.append(
                lambda o: all(term in o.searchable_text() for term in terms)
            )

        results = [
            offer
            for offer in self.store.load_offers()
            if all(predicate(offer) for predicate in predicates)
        ]

        logger.debug(
            f"search_offers query={query!r} category={category!r} "
            f"eligibility_type={eligibility_type!r} sort={sort!r}: {len(results)} matches"
        )

        return _sort_offers(results, sort)
