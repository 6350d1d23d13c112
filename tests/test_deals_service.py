"""
Tests for the tool facade.
"""

from unittest.mock import patch

import pytest

from agent_deals.components.catalog_store import CatalogStore
from agent_deals.services.deals_service import DealsService, ToolResult
from agent_deals.utils.error_handling import get_error_tracker


@pytest.fixture
def service(catalog_store, fixed_today):
    return DealsService(catalog_store, today=fixed_today)


class TestToolDispatch:
    """Test tool routing and error reporting."""

    def test_tool_names(self, service):
        """Test that the four catalog tools are registered."""
        assert service.tool_names == [
            "list_categories",
            "search_offers",
            "get_offer_details",
            "get_deal_changes",
        ]

    def test_unknown_tool(self, service):
        """Test that unknown tools return an error result."""
        result = service.call_tool("delete_everything")

        assert result.is_error
        assert result.message == "Unknown tool: delete_everything"

    def test_arguments_must_be_object(self, service):
        """Test that non-object arguments are rejected."""
        result = service.call_tool("search_offers", ["neon"])

        assert result.is_error
        assert result.message == "Tool arguments must be an object"

    def test_unexpected_failure_becomes_error_result(self, service):
        """Test that internal failures are reported, recorded and not raised."""
        with patch.object(
            service.query_engine, "get_categories", side_effect=RuntimeError("boom")
        ):
            result = service.list_categories()

        assert result.is_error
        assert result.message == "Error listing categories: boom"
        assert len(get_error_tracker().get_component_errors("deals.service")) == 1

    def test_argument_errors_are_not_tracked(self, service):
        """Test that rejected arguments are not recorded as failures."""
        service.search_offers(limit=-1)

        assert get_error_tracker().get_component_errors("deals.service") == []

    def test_to_dict(self):
        """Test the serialized result envelope."""
        assert ToolResult(is_error=False, payload=[1]).to_dict() == {
            "isError": False,
            "data": [1],
        }
        assert ToolResult(is_error=True, message="nope").to_dict() == {
            "isError": True,
            "message": "nope",
        }


class TestListCategories:
    """Test the list_categories tool."""

    def test_returns_counts(self, service):
        """Test category payloads."""
        result = service.list_categories()

        assert not result.is_error
        assert {"name": "Databases", "count": 2} in result.payload
        assert sum(c["count"] for c in result.payload) == 6

    def test_empty_catalog(self, tmp_path):
        """Test that a missing catalog yields no categories rather than an error."""
        store = CatalogStore(tmp_path / "index.json", tmp_path / "changes.json")
        result = DealsService(store).list_categories()

        assert not result.is_error
        assert result.payload == []


class TestSearchOffers:
    """Test the search_offers tool."""

    def test_unpaginated_search(self, service):
        """Test that all matches are returned without limit or offset."""
        result = service.search_offers(query="postgres")

        assert not result.is_error
        assert [r["vendor"] for r in result.payload["results"]] == ["Neon", "Supabase"]
        assert result.payload["total"] == 2

    def test_paginated_search(self, service):
        """Test that limit and offset slice while total stays unsliced."""
        result = service.search_offers(sort="vendor", limit=2, offset=1)

        assert [r["vendor"] for r in result.payload["results"]] == [
            "GitHub Actions",
            "Neon",
        ]
        assert result.payload["total"] == 6
        assert result.payload["limit"] == 2
        assert result.payload["offset"] == 1

    def test_eligibility_filter(self, service):
        """Test eligibility filtering through the tool."""
        result = service.search_offers(eligibility_type="oss")

        assert [r["vendor"] for r in result.payload["results"]] == ["GitHub Actions"]

    @pytest.mark.parametrize(
        "arguments, message",
        [
            ({"sort": "popularity"}, "'sort' must be one of"),
            ({"eligibility_type": "vip"}, "'eligibility_type' must be one of"),
            ({"limit": -1}, "'limit' must be a non-negative integer"),
            ({"offset": "2"}, "'offset' must be a non-negative integer"),
            ({"limit": True}, "'limit' must be a non-negative integer"),
            ({"query": 42}, "'query' must be a string"),
        ],
    )
    def test_invalid_arguments(self, service, arguments, message):
        """Test argument validation before the catalog is queried."""
        result = service.call_tool("search_offers", arguments)

        assert result.is_error
        assert result.message.startswith("Invalid arguments: ")
        assert message in result.message


class TestGetOfferDetails:
    """Test the get_offer_details tool."""

    def test_found(self, service):
        """Test a successful lookup with related vendors."""
        result = service.get_offer_details("neon")

        assert not result.is_error
        assert result.payload["vendor"] == "Neon"
        assert result.payload["relatedVendors"] == ["Supabase"]

    def test_not_found_with_suggestions(self, service):
        """Test the miss message listing suggestions."""
        result = service.get_offer_details("neo")

        assert result.is_error
        assert result.message == 'Vendor "neo" not found. Did you mean: Neon, Neon Auth?'
        assert result.payload["suggestions"] == ["Neon", "Neon Auth"]

    def test_not_found_without_suggestions(self, service):
        """Test the miss message when nothing is similar."""
        result = service.get_offer_details("Heroku")

        assert result.is_error
        assert result.message == 'Vendor "Heroku" not found. No similar vendors found.'

    def test_vendor_required(self, service):
        """Test that the vendor argument is required."""
        result = service.call_tool("get_offer_details", {})

        assert result.is_error
        assert result.message == "Invalid arguments: 'vendor' is required"


class TestGetDealChanges:
    """Test the get_deal_changes tool."""

    def test_default_window(self, service):
        """Test that the default window is applied."""
        result = service.get_deal_changes()

        assert not result.is_error
        assert result.payload["total"] == 3

    def test_filters(self, service):
        """Test since, type and vendor arguments."""
        result = service.get_deal_changes(
            since="2020-01-01", change_type="free_tier_removed", vendor="planet"
        )

        assert [c["vendor"] for c in result.payload["changes"]] == ["PlanetScale"]

    def test_invalid_since(self, service):
        """Test that since must be an ISO date."""
        result = service.get_deal_changes(since="last week")

        assert result.is_error
        assert "'since' must be an ISO date" in result.message

    def test_impossible_since(self, service):
        """Test that since must name a real calendar day."""
        result = service.get_deal_changes(since="2024-02-30")

        assert result.is_error
        assert "'since' must be an ISO date" in result.message

    def test_invalid_change_type(self, service):
        """Test that change types outside the enum are rejected."""
        result = service.get_deal_changes(change_type="price_hike")

        assert result.is_error
        assert "'change_type' must be one of" in result.message
