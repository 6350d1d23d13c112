"""Change feed query over recorded pricing and free tier changes."""

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from ..interfaces import ICatalogSource
from ..models.query import ChangeFeedResult

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30


class ChangeFeed:
    """Filters deal change events by date, type and vendor."""

    def __init__(
        self,
        store: ICatalogSource,
        window_days: int = DEFAULT_WINDOW_DAYS,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize the change feed.

        Args:
            store: Catalog store providing the change events
            window_days: Look-back used when no `since` date is given
            today: Clock returning the current date
        """
        self.store = store
        self.window_days = window_days
        self.today = today

    def default_since(self) -> str:
        """ISO date `window_days` before today."""
        return (self.today() - timedelta(days=self.window_days)).isoformat()

    def get_deal_changes(
        self,
        since: Optional[str] = None,
        change_type: Optional[str] = None,
        vendor: Optional[str] = None,
    ) -> ChangeFeedResult:
        """
        Return changes on or after `since`, newest first.

        `change_type` must match exactly (ignoring case); `vendor` matches
        any vendor name containing it.
        """
        floor = since or self.default_since()
        wanted_type = change_type.lower() if change_type else None
        wanted_vendor = vendor.lower() if vendor else None

        changes = [
            change
            for change in self.store.load_deal_changes()
            if change.date >= floor
            and (wanted_type is None or change.change_type.value.lower() == wanted_type)
            and (wanted_vendor is None or wanted_vendor in change.vendor.lower())
        ]
        changes.sort(key=lambda c: c.date, reverse=True)

        logger.debug(
            f"get_deal_changes since={floor} change_type={change_type!r} "
            f"vendor={vendor!r}: {len(changes)} changes"
        )
        return ChangeFeedResult(changes=changes, total=len(changes))
