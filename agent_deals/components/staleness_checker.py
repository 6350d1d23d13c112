"""Staleness checks for catalog verification dates."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from dateutil import parser as date_parser

from ..models.offer import Offer
from ..models.query import StaleEntry

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_DAYS = 30


def _days_since(verified_date: str, now: datetime) -> int:
    verified = date_parser.isoparse(verified_date)
    if verified.tzinfo is None:
        verified = verified.replace(tzinfo=timezone.utc)
    return (now - verified).days


def find_stale_entries(
    offers: List[Offer],
    threshold_days: int = DEFAULT_THRESHOLD_DAYS,
    now: Optional[datetime] = None,
) -> List[StaleEntry]:
    """
    Find offers whose verification date is older than the threshold.

    Offers without a verification date count as never verified and sort
    ahead of everything else. The rest sort by age, oldest first.

    Args:
        offers: Catalog offers to inspect
        threshold_days: Entries more than this many whole days old are stale
        now: Reference time, defaults to the current UTC time

    Returns:
        Stale entries, most stale first
    """
    if threshold_days < 0:
        raise ValueError("Threshold must be a non-negative integer")

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    stale = []
    for offer in offers:
        if not offer.verified_date:
            stale.append(StaleEntry(offer.vendor, offer.category, None))
            continue

        days = _days_since(offer.verified_date, now)
        if days > threshold_days:
            stale.append(StaleEntry(offer.vendor, offer.category, days))

    stale.sort(
        key=lambda e: float("inf") if e.days_since is None else e.days_since,
        reverse=True,
    )

    logger.debug(f"{len(stale)} of {len(offers)} entries older than {threshold_days} days")
    return stale
