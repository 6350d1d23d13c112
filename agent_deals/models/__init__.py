"""
Data models for the AgentDeals catalog.

This module contains the data classes used throughout the application for
representing offers, change events, query results and monitor state.
"""

from .change import ChangeType, DealChange
from .config import Configuration, DataConfig, MonitorConfig
from .offer import Eligibility, EligibilityType, Offer
from .query import (
    Category,
    ChangeFeedResult,
    OfferDetails,
    OfferLookupResult,
    OfferNotFound,
    SearchPage,
    StaleEntry,
)
from .snapshot import DriftOutcome, DriftReport, SnapshotEntry, VendorCheck

__all__ = [
    "Offer",
    "Eligibility",
    "EligibilityType",
    "DealChange",
    "ChangeType",
    "Category",
    "SearchPage",
    "OfferDetails",
    "OfferNotFound",
    "OfferLookupResult",
    "ChangeFeedResult",
    "StaleEntry",
    "SnapshotEntry",
    "VendorCheck",
    "DriftReport",
    "DriftOutcome",
    "Configuration",
    "DataConfig",
    "MonitorConfig",
]
