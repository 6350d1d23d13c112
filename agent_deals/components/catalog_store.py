"""
Catalog store for the AgentDeals offer catalog.

Loads the offer and change-log documents once, validates them against the
record shapes and keeps them in memory. Any load fault degrades to an empty
collection so query components never deal with I/O failures.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar, Union

from ..models.change import DealChange
from ..models.offer import Offer
from ..utils.error_handling import (
    CatalogLoadError,
    ErrorCategory,
    ErrorSeverity,
    get_error_tracker,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _read_document(source: Path) -> Any:
    if not source.exists():
        raise CatalogLoadError(str(source), "file not found")

    try:
        raw = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogLoadError(str(source), f"unreadable: {e}")

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise CatalogLoadError(str(source), f"invalid JSON: {e}")


def _parse_records(
    source: Path, key: str, factory: Callable[[Any], T]
) -> List[T]:
    document = _read_document(source)
    if not isinstance(document, dict):
        raise CatalogLoadError(str(source), "top-level value must be an object")

    records = document.get(key)
    if records is None:
        raise CatalogLoadError(str(source), f"missing '{key}' collection")
    if not isinstance(records, list):
        raise CatalogLoadError(str(source), f"'{key}' must be a list")

    parsed = []
    for index, record in enumerate(records):
        try:
            parsed.append(factory(record))
        except ValueError as e:
            raise CatalogLoadError(str(source), f"{key}[{index}]: {e}")
    return parsed


def parse_offers(source: Union[str, Path]) -> List[Offer]:
    """
    Read and validate an offers document.

    Raises:
        CatalogLoadError: If the document is missing, unreadable or malformed.
    """
    source = Path(source)
    offers = _parse_records(source, "offers", Offer.from_dict)

    seen = {}
    for offer in offers:
        key = offer.vendor.lower()
        if key in seen:
            raise CatalogLoadError(
                str(source), f"duplicate vendor '{offer.vendor}' (also '{seen[key]}')"
            )
        seen[key] = offer.vendor

    return offers


def parse_deal_changes(source: Union[str, Path]) -> List[DealChange]:
    """
    Read and validate a deal changes document.

    Raises:
        CatalogLoadError: If the document is missing, unreadable or malformed.
    """
    return _parse_records(Path(source), "changes", DealChange.from_dict)


class CatalogStore:
    """Load-once, read-only cache of offers and deal changes."""

    def __init__(
        self,
        offers_path: Union[str, Path] = "data/index.json",
        changes_path: Union[str, Path] = "data/deal_changes.json",
    ):
        """
        Initialize the store. Nothing is read until the first load call.

        Args:
            offers_path: JSON document holding {"offers": [...]}
            changes_path: JSON document holding {"changes": [...]}
        """
        self.offers_path = Path(offers_path)
        self.changes_path = Path(changes_path)
        self._offers: Optional[List[Offer]] = None
        self._changes: Optional[List[DealChange]] = None

    def load_offers(self) -> List[Offer]:
        """Return the cached offers, reading them on first use."""
        if self._offers is None:
            self._offers = self._load(self.offers_path, parse_offers, "offers")
        return self._offers

    def load_deal_changes(self) -> List[DealChange]:
        """Return the cached deal changes, reading them on first use."""
        if self._changes is None:
            self._changes = self._load(self.changes_path, parse_deal_changes, "changes")
        return self._changes

    def reset_cache(self) -> None:
        """Drop both caches so the next load re-reads the sources."""
        self._offers = None
        self._changes = None
        logger.debug("Catalog cache reset")

    def _load(
        self, source: Path, parser: Callable[[Path], List[T]], label: str
    ) -> List[T]:
        try:
            records = parser(source)
        except CatalogLoadError as e:
            logger.warning(f"Could not load {label} from {e.source}: {e.reason}")
            get_error_tracker().record_error(
                component="catalog.store",
                category=ErrorCategory.DATA_LOAD,
                severity=ErrorSeverity.HIGH,
                message=f"Falling back to empty {label} collection",
                exception=e,
                context={"source": e.source, "reason": e.reason},
            )
            return []

        logger.info(f"Loaded {len(records)} {label} from {source}")
        return records
