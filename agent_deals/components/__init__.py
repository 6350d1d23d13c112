"""
Core components for the AgentDeals catalog.

This module contains the catalog store, the query components built on it,
and the pricing page monitoring pipeline.
"""

from .catalog_store import CatalogStore
from .change_feed import ChangeFeed
from .content_normalizer import ContentNormalizer, extract_visible_text, hash_content
from .drift_hasher import DriftHasher, PageFetcher, SnapshotRepository
from .offer_resolver import OfferResolver
from .query_engine import QueryEngine, paginate
from .staleness_checker import find_stale_entries

__all__ = [
    "CatalogStore",
    "QueryEngine",
    "paginate",
    "OfferResolver",
    "ChangeFeed",
    "ContentNormalizer",
    "extract_visible_text",
    "hash_content",
    "DriftHasher",
    "PageFetcher",
    "SnapshotRepository",
    "find_stale_entries",
]
