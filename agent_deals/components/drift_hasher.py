"""
Pricing page drift detection for the AgentDeals catalog.

This module fetches each vendor's pricing page, fingerprints its visible
text and compares the fingerprint with the snapshot stored by the previous
run. Fetch failures are isolated per vendor and never erase history.
"""

import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import requests

from ..interfaces import IPageFetcher
from ..models.config import DEFAULT_USER_AGENT
from ..models.offer import Offer
from ..models.snapshot import DriftOutcome, DriftReport, SnapshotEntry, VendorCheck
from ..utils.error_handling import (
    ErrorCategory,
    ErrorSeverity,
    PageFetchError,
    get_error_tracker,
)
from .content_normalizer import ContentNormalizer, hash_content

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = 15.0


def utc_timestamp() -> str:
    """Current UTC time as an ISO 8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class PageFetcher:
    """Fetches vendor pricing pages over HTTP."""

    def __init__(
        self,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """
        Initialize page fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: Identifying User-Agent header
        """
        self.timeout = timeout
        self.user_agent = user_agent

        # One session per worker thread, all closed together
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """HTTP session owned by the calling thread."""
        session = getattr(self._local, "session", None)
        if session is None:
            # No retry adapter: a failed page is recorded once per run
            session = requests.Session()
            session.headers.update(
                {"User-Agent": self.user_agent, "Accept": "text/html"}
            )
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def fetch(self, url: str) -> str:
        """
        Fetch a page and return its body.

        Raises:
            PageFetchError: On timeout, connection failure or non-2xx status.
        """
        try:
            logger.debug(f"Fetching pricing page: {url}")
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
            return response.text

        except requests.exceptions.Timeout:
            raise PageFetchError(url, "timeout")

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "error"
            raise PageFetchError(url, f"HTTP {status}")

        except requests.exceptions.RequestException as e:
            raise PageFetchError(url, str(e) or type(e).__name__)

    def close(self):
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
            self._local = threading.local()
        for session in sessions:
            session.close()


class SnapshotRepository:
    """Reads and writes the vendor -> fingerprint snapshot document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[Dict[str, SnapshotEntry]]:
        """
        Load the previous snapshot.

        Returns:
            The snapshot, or None when there is no usable previous run.
        """
        if not self.path.exists():
            return None

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("snapshot must be an object")
            return {
                vendor: SnapshotEntry.from_dict(entry) for vendor, entry in raw.items()
            }
        except (OSError, ValueError) as e:
            logger.warning(
                f"Could not parse snapshot {self.path} ({e}), treating as baseline run"
            )
            return None

    def save(self, report: DriftReport) -> None:
        """Rewrite the snapshot document from a run report."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(report.snapshot_dict(), indent=2) + "\n", encoding="utf-8"
        )
        logger.info(f"Saved {len(report.snapshot)} fingerprints to {self.path}")


class DriftHasher:
    """Classifies each vendor page as baseline, unchanged, changed or errored."""

    def __init__(
        self,
        fetcher: IPageFetcher,
        normalizer: Optional[ContentNormalizer] = None,
        max_workers: int = 1,
        clock: Callable[[], str] = utc_timestamp,
    ):
        """
        Initialize drift hasher.

        Args:
            fetcher: Page source raising PageFetchError on failure
            normalizer: Visible text extractor
            max_workers: Concurrent fetches; 1 fetches sequentially
            clock: Returns the checkedAt timestamp
        """
        self.fetcher = fetcher
        self.normalizer = normalizer or ContentNormalizer()
        self.max_workers = max_workers
        self.clock = clock

    def check(
        self,
        offers: List[Offer],
        previous: Optional[Dict[str, SnapshotEntry]] = None,
    ) -> DriftReport:
        """
        Check every offer's pricing page against the previous snapshot.

        Args:
            offers: Catalog offers; those without a URL are skipped
            previous: Snapshot from the last run, or None for a baseline run

        Returns:
            DriftReport with the new snapshot and per-vendor outcomes
        """
        is_baseline = previous is None
        previous = previous or {}

        skipped = [offer.vendor for offer in offers if not offer.url]
        if skipped:
            logger.warning(
                f"{len(skipped)} entries missing url field: {', '.join(skipped)}"
            )
        targets = [offer for offer in offers if offer.url]

        logger.info(f"Checking {len(targets)} vendor pricing pages")

        if self.max_workers > 1 and len(targets) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map() yields in submission order, keeping catalog order
                fingerprints = list(executor.map(self._fingerprint, targets))
        else:
            fingerprints = [self._fingerprint(offer) for offer in targets]

        report = DriftReport(snapshot={}, is_baseline=is_baseline, skipped=skipped)
        for offer, (digest, error) in zip(targets, fingerprints):
            check = self._classify(offer, digest, error, previous, is_baseline)
            report.checks.append(check)
            report.snapshot[offer.vendor] = check.entry

        logger.info(
            f"Pricing check finished: {len(report.changed)} changed, "
            f"{len(report.errors)} errors, {report.unchanged_count} unchanged"
        )
        return report

    def _fingerprint(self, offer: Offer) -> Tuple[Optional[str], Optional[str]]:
        """Fetch and hash one page, returning (digest, None) or (None, reason)."""
        try:
            body = self.fetcher.fetch(offer.url)
            return hash_content(self.normalizer.extract_visible_text(body)), None

        except PageFetchError as e:
            logger.warning(f"Could not fetch {offer.vendor} ({offer.url}): {e.reason}")
            self._record_failure(offer, e.reason, e, ErrorCategory.NETWORK)
            return None, e.reason

        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.error(
                f"Unexpected error checking {offer.vendor} ({offer.url}): {reason}",
                exc_info=True,
            )
            self._record_failure(offer, reason, e, ErrorCategory.SYSTEM)
            return None, reason

    def _record_failure(
        self,
        offer: Offer,
        reason: str,
        exception: Exception,
        category: ErrorCategory,
    ) -> None:
        get_error_tracker().record_error(
            component="pricing.monitor",
            category=category,
            severity=ErrorSeverity.LOW,
            message=f"Pricing check failed for {offer.vendor}",
            exception=exception,
            context={"url": offer.url, "reason": reason},
        )

    def _classify(
        self,
        offer: Offer,
        digest: Optional[str],
        error: Optional[str],
        previous: Dict[str, SnapshotEntry],
        is_baseline: bool,
    ) -> VendorCheck:
        prior = previous.get(offer.vendor)

        if error is not None:
            # Keep the last known fingerprint so a flaky fetch never reads as a change
            entry = prior or SnapshotEntry(url=offer.url, hash=None, error=error)
            return VendorCheck(
                vendor=offer.vendor,
                url=offer.url,
                outcome=DriftOutcome.ERROR,
                entry=entry,
                error=error,
            )

        entry = SnapshotEntry(url=offer.url, hash=digest, checked_at=self.clock())

        if is_baseline or prior is None or prior.hash is None:
            outcome = DriftOutcome.BASELINE
        elif prior.hash != digest:
            outcome = DriftOutcome.CHANGED
            logger.info(f"Pricing page changed: {offer.vendor} ({offer.url})")
        else:
            outcome = DriftOutcome.UNCHANGED

        return VendorCheck(
            vendor=offer.vendor, url=offer.url, outcome=outcome, entry=entry
        )
