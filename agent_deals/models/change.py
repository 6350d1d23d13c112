"""
Deal change event models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from .offer import _require_str, _require_str_list, is_iso_date


class ChangeType(Enum):
    """Kinds of pricing or free tier change."""

    FREE_TIER_REMOVED = "free_tier_removed"
    LIMITS_REDUCED = "limits_reduced"
    LIMITS_INCREASED = "limits_increased"
    NEW_FREE_TIER = "new_free_tier"
    PRICING_RESTRUCTURED = "pricing_restructured"


@dataclass
class DealChange:
    """One observed pricing or tier event for a vendor."""

    vendor: str
    change_type: ChangeType
    date: str
    summary: str
    previous_state: str
    current_state: str
    impact: str
    source_url: str
    category: str
    alternatives: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DealChange":
        """
        Build a change event from its JSON shape and validate it.

        Raises:
            ValueError: If a field is missing or has the wrong shape.
        """
        if not isinstance(data, dict):
            raise ValueError("Deal change must be an object")

        raw_type = data.get("change_type")
        try:
            change_type = ChangeType(raw_type)
        except ValueError:
            raise ValueError(f"Unknown change type: {raw_type}")

        change = cls(
            vendor=_require_str(data, "vendor"),
            change_type=change_type,
            date=_require_str(data, "date"),
            summary=_require_str(data, "summary"),
            previous_state=_require_str(data, "previous_state"),
            current_state=_require_str(data, "current_state"),
            impact=_require_str(data, "impact"),
            source_url=_require_str(data, "source_url"),
            category=_require_str(data, "category"),
            alternatives=_require_str_list(data, "alternatives"),
        )
        change.validate()
        return change

    def validate(self) -> bool:
        """Validate the change event."""
        if not self.vendor or not self.vendor.strip():
            raise ValueError("Deal change vendor cannot be empty")

        if not is_iso_date(self.date):
            raise ValueError(
                f"Deal change date must be YYYY-MM-DD ({self.vendor}: {self.date})"
            )

        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendor": self.vendor,
            "change_type": self.change_type.value,
            "date": self.date,
            "summary": self.summary,
            "previous_state": self.previous_state,
            "current_state": self.current_state,
            "impact": self.impact,
            "source_url": self.source_url,
            "category": self.category,
            "alternatives": list(self.alternatives),
        }
