"""
Offer data models for the AgentDeals catalog.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class EligibilityType(Enum):
    """Who can claim an offer."""

    PUBLIC = "public"
    ACCELERATOR = "accelerator"
    OSS = "oss"
    STUDENT = "student"
    FINTECH = "fintech"
    GEOGRAPHIC = "geographic"
    ENTERPRISE = "enterprise"


def is_iso_date(value: Any) -> bool:
    """Check that a value is a zero-padded YYYY-MM-DD string naming a real day."""
    if not isinstance(value, str) or not ISO_DATE_PATTERN.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string")
    return value


def _require_str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Field '{key}' must be a list of strings")
    return list(value)


@dataclass
class Eligibility:
    """Eligibility requirements attached to an offer."""

    type: EligibilityType
    conditions: List[str] = field(default_factory=list)
    program: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Eligibility":
        """Build eligibility from its JSON shape."""
        if not isinstance(data, dict):
            raise ValueError("Eligibility must be an object")

        raw_type = data.get("type")
        try:
            eligibility_type = EligibilityType(raw_type)
        except ValueError:
            raise ValueError(f"Unknown eligibility type: {raw_type}")

        program = data.get("program")
        if program is not None and not isinstance(program, str):
            raise ValueError("Eligibility program must be a string")

        return cls(
            type=eligibility_type,
            conditions=_require_str_list(data, "conditions"),
            program=program,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type.value,
            "conditions": list(self.conditions),
        }
        if self.program is not None:
            data["program"] = self.program
        return data


@dataclass
class Offer:
    """One vendor's deal entry in the catalog."""

    vendor: str
    category: str
    description: str
    tier: str
    url: str
    tags: List[str]
    verified_date: str
    eligibility: Optional[Eligibility] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Offer":
        """
        Build an offer from its JSON shape and validate it.

        Raises:
            ValueError: If a field is missing or has the wrong shape.
        """
        if not isinstance(data, dict):
            raise ValueError("Offer must be an object")

        eligibility_data = data.get("eligibility")
        offer = cls(
            vendor=_require_str(data, "vendor"),
            category=_require_str(data, "category"),
            description=_require_str(data, "description"),
            tier=_require_str(data, "tier"),
            url=_require_str(data, "url"),
            tags=_require_str_list(data, "tags"),
            verified_date=_require_str(data, "verifiedDate"),
            eligibility=(
                Eligibility.from_dict(eligibility_data)
                if eligibility_data is not None
                else None
            ),
        )
        offer.validate()
        return offer

    def validate(self) -> bool:
        """Validate the offer data."""
        if not self.vendor or not self.vendor.strip():
            raise ValueError("Offer vendor cannot be empty")

        if not self.category or not self.category.strip():
            raise ValueError(f"Offer category cannot be empty ({self.vendor})")

        if self.url:
            parsed_url = urlparse(self.url)
            if not parsed_url.scheme or not parsed_url.netloc:
                raise ValueError(f"Invalid URL format: {self.url}")

        if not is_iso_date(self.verified_date):
            raise ValueError(
                f"verifiedDate must be YYYY-MM-DD ({self.vendor}: {self.verified_date})"
            )

        return True

    def searchable_text(self) -> str:
        """Lowercase text that keyword queries are matched against."""
        parts = [self.vendor, self.description, self.category, " ".join(self.tags)]
        return " ".join(parts).lower()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "vendor": self.vendor,
            "category": self.category,
            "description": self.description,
            "tier": self.tier,
            "url": self.url,
            "tags": list(self.tags),
            "verifiedDate": self.verified_date,
        }
        if self.eligibility is not None:
            data["eligibility"] = self.eligibility.to_dict()
        return data
