"""
Pricing page snapshot and drift report models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class DriftOutcome(Enum):
    """Classification of one vendor in a pricing check run."""

    BASELINE = "baseline"
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    ERROR = "error"


@dataclass
class SnapshotEntry:
    """Stored fingerprint of one vendor's pricing page."""

    url: str
    hash: Optional[str]
    checked_at: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnapshotEntry":
        if not isinstance(data, dict):
            raise ValueError("Snapshot entry must be an object")
        return cls(
            url=data.get("url", ""),
            hash=data.get("hash"),
            checked_at=data.get("checkedAt"),
            error=data.get("error"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"url": self.url, "hash": self.hash}
        if self.checked_at is not None:
            data["checkedAt"] = self.checked_at
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class VendorCheck:
    """Result of checking a single vendor page."""

    vendor: str
    url: str
    outcome: DriftOutcome
    entry: SnapshotEntry
    error: Optional[str] = None


@dataclass
class DriftReport:
    """Everything a pricing check run produced."""

    snapshot: Dict[str, SnapshotEntry]
    checks: List[VendorCheck] = field(default_factory=list)
    is_baseline: bool = False
    skipped: List[str] = field(default_factory=list)

    @property
    def changed(self) -> List[VendorCheck]:
        return [c for c in self.checks if c.outcome == DriftOutcome.CHANGED]

    @property
    def errors(self) -> List[VendorCheck]:
        return [c for c in self.checks if c.outcome == DriftOutcome.ERROR]

    @property
    def unchanged_count(self) -> int:
        return len([c for c in self.checks if c.outcome == DriftOutcome.UNCHANGED])

    @property
    def has_changes(self) -> bool:
        return bool(self.changed)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def exit_code(self) -> int:
        """1 when any page changed, otherwise 0. Errors are reported separately."""
        return 1 if self.has_changes else 0

    def snapshot_dict(self) -> Dict[str, Dict[str, Any]]:
        return {vendor: entry.to_dict() for vendor, entry in self.snapshot.items()}
