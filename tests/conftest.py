"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the AgentDeals test suite.
"""

import json
from datetime import date

import pytest

from agent_deals.components.catalog_store import CatalogStore
from agent_deals.utils.error_handling import get_error_tracker
from catalog_fixtures import make_change_dict, make_offer_dict


# Test data fixtures
@pytest.fixture
def offer_dicts():
    """A small catalog covering categories, tags, eligibility and dates."""
    return [
        make_offer_dict(
            "Neon",
            "Databases",
            "2026-09-30",
            description="Serverless Postgres with branching",
            tags=["postgres", "serverless"],
            eligibility={"type": "public", "conditions": []},
        ),
        make_offer_dict(
            "Supabase",
            "Databases",
            "2026-10-02",
            description="Postgres with auth and storage",
            tags=["postgres", "auth"],
        ),
        make_offer_dict(
            "Vercel",
            "Cloud Hosting",
            "2026-10-05",
            description="Frontend hosting for personal projects",
            tags=["hosting", "serverless"],
            eligibility={"type": "public", "conditions": ["Non-commercial"]},
        ),
        make_offer_dict(
            "GitHub Actions",
            "CI/CD",
            "2026-09-15",
            description="CI minutes for public repositories",
            tags=["ci"],
            eligibility={"type": "oss", "conditions": ["Public repositories"]},
        ),
        make_offer_dict(
            "AWS Activate",
            "Startup Programs",
            "2026-07-01",
            description="Cloud credits for startups",
            tags=["credits", "cloud"],
            eligibility={
                "type": "accelerator",
                "conditions": ["Approved accelerator"],
                "program": "Activate Portfolio",
            },
        ),
        make_offer_dict(
            "Neon Auth",
            "Authentication",
            "2026-10-02",
            description="Auth for Neon projects",
            tags=["auth"],
        ),
    ]


@pytest.fixture
def change_dicts():
    """Change events spread over several dates."""
    return [
        make_change_dict("Heroku", "free_tier_removed", "2022-11-28"),
        make_change_dict("PlanetScale", "free_tier_removed", "2024-04-08"),
        make_change_dict("Neon", "limits_increased", "2026-10-01"),
        make_change_dict("Google Gemini", "limits_reduced", "2026-09-25"),
        make_change_dict("Gemini Code Assist", "new_free_tier", "2026-10-10"),
    ]


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document under the temporary directory."""

    def _write(name, document):
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def catalog_store(write_json, offer_dicts, change_dicts):
    """CatalogStore backed by temporary offers and changes documents."""
    offers_path = write_json("index.json", {"offers": offer_dicts})
    changes_path = write_json("deal_changes.json", {"changes": change_dicts})
    return CatalogStore(offers_path, changes_path)


@pytest.fixture
def fixed_today():
    """Clock pinned to 2026-10-18."""
    return lambda: date(2026, 10, 18)


@pytest.fixture(autouse=True)
def clear_error_tracker():
    """Keep recorded errors from leaking between tests."""
    get_error_tracker().clear()
    yield
    get_error_tracker().clear()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to every test not marked otherwise."""
    for item in items:
        if not any(
            marker.name in ["integration", "slow"] for marker in item.iter_markers()
        ):
            item.add_marker(pytest.mark.unit)
