"""
Tests for category aggregation, offer search and pagination.
"""

from unittest.mock import Mock

import pytest

from agent_deals.components.query_engine import QueryEngine, locale_key, paginate
from agent_deals.models import Offer
from catalog_fixtures import make_offer_dict


def _vendors(offers):
    return [offer.vendor for offer in offers]


def _non_decreasing(items, key):
    keys = [key(item) for item in items]
    return all(a <= b for a, b in zip(keys, keys[1:]))


def _engine_for(*offer_dicts):
    store = Mock()
    store.load_offers.return_value = [Offer.from_dict(d) for d in offer_dicts]
    return QueryEngine(store)


class TestGetCategories:
    """Test category aggregation."""

    def test_counts_sorted_by_name(self, catalog_store):
        """Test that categories come back sorted with their counts."""
        categories = QueryEngine(catalog_store).get_categories()

        assert [(c.name, c.count) for c in categories] == [
            ("Authentication", 1),
            ("CI/CD", 1),
            ("Cloud Hosting", 1),
            ("Databases", 2),
            ("Startup Programs", 1),
        ]

    def test_counts_sum_to_offer_total(self, catalog_store):
        """Test that every offer is counted exactly once."""
        categories = QueryEngine(catalog_store).get_categories()
        assert sum(c.count for c in categories) == len(catalog_store.load_offers())

    def test_small_catalog(self):
        """Test aggregation over a three offer catalog."""
        engine = _engine_for(
            make_offer_dict("Neon", "Databases"),
            make_offer_dict("Supabase", "Databases"),
            make_offer_dict("Vercel", "Cloud Hosting"),
        )

        assert [c.to_dict() for c in engine.get_categories()] == [
            {"name": "Cloud Hosting", "count": 1},
            {"name": "Databases", "count": 2},
        ]

    def test_empty_catalog(self):
        """Test that an empty catalog has no categories."""
        assert _engine_for().get_categories() == []

    def test_case_variant_categories_counted_separately(self):
        """Test that names differing only in case stay distinct and ordered."""
        engine = _engine_for(
            make_offer_dict("Neon", "databases"),
            make_offer_dict("Supabase", "Databases"),
            make_offer_dict("Turso", "databases"),
            make_offer_dict("Auth0", "Authentication"),
        )

        categories = engine.get_categories()

        assert [(c.name, c.count) for c in categories] == [
            ("Authentication", 1),
            ("Databases", 1),
            ("databases", 2),
        ]
        keys = [locale_key(c.name) for c in categories]
        assert all(a < b for a, b in zip(keys, keys[1:]))

    def test_locale_key_ignores_case(self):
        """Test that the sort key orders names case-insensitively."""
        names = ["beta", "Alpha", "alpha", "Gamma"]
        assert sorted(names, key=locale_key) == ["Alpha", "alpha", "beta", "Gamma"]


class TestSearchOffers:
    """Test offer filtering and sorting."""

    def test_no_filters_returns_catalog_order(self, catalog_store):
        """Test that an unfiltered search returns every offer in order."""
        results = QueryEngine(catalog_store).search_offers()
        assert _vendors(results) == _vendors(catalog_store.load_offers())

    def test_query_matches_tags_and_description(self, catalog_store):
        """Test keyword matching across searchable fields."""
        results = QueryEngine(catalog_store).search_offers(query="postgres")
        assert _vendors(results) == ["Neon", "Supabase"]

    def test_query_terms_are_conjunctive(self, catalog_store):
        """Test that every term must match."""
        results = QueryEngine(catalog_store).search_offers(query="postgres auth")
        assert _vendors(results) == ["Supabase"]

    def test_query_is_case_insensitive(self, catalog_store):
        """Test that query case does not matter."""
        results = QueryEngine(catalog_store).search_offers(query="SERVERLESS")
        assert _vendors(results) == ["Neon", "Vercel"]

    def test_blank_query_is_ignored(self, catalog_store):
        """Test that a whitespace query does not filter."""
        results = QueryEngine(catalog_store).search_offers(query="   ")
        assert len(results) == 6

    def test_category_filter_case_insensitive(self, catalog_store):
        """Test exact category matching ignoring case."""
        results = QueryEngine(catalog_store).search_offers(category="databases")
        assert _vendors(results) == ["Neon", "Supabase"]

    def test_category_filter_is_exact(self, catalog_store):
        """Test that partial category names do not match."""
        assert QueryEngine(catalog_store).search_offers(category="Data") == []

    def test_eligibility_filter_excludes_offers_without_eligibility(
        self, catalog_store
    ):
        """Test that offers lacking eligibility never pass the filter."""
        results = QueryEngine(catalog_store).search_offers(eligibility_type="public")
        assert _vendors(results) == ["Neon", "Vercel"]

    def test_filters_combine(self, catalog_store):
        """Test that category, eligibility and query all apply."""
        results = QueryEngine(catalog_store).search_offers(
            query="serverless", category="Cloud Hosting", eligibility_type="public"
        )
        assert _vendors(results) == ["Vercel"]

    def test_sort_by_vendor(self, catalog_store):
        """Test alphabetical vendor sort."""
        results = QueryEngine(catalog_store).search_offers(sort="vendor")
        assert _vendors(results) == [
            "AWS Activate",
            "GitHub Actions",
            "Neon",
            "Neon Auth",
            "Supabase",
            "Vercel",
        ]

    def test_sort_by_category_then_vendor(self, catalog_store):
        """Test category sort with vendor as tie-breaker."""
        results = QueryEngine(catalog_store).search_offers(sort="category")
        assert _vendors(results) == [
            "Neon Auth",
            "GitHub Actions",
            "Vercel",
            "Neon",
            "Supabase",
            "AWS Activate",
        ]

    def test_sort_newest_is_stable(self, catalog_store):
        """Test newest-first sort keeping catalog order for equal dates."""
        results = QueryEngine(catalog_store).search_offers(sort="newest")
        assert _vendors(results) == [
            "Vercel",
            "Supabase",
            "Neon Auth",
            "Neon",
            "GitHub Actions",
            "AWS Activate",
        ]

    @pytest.fixture
    def mixed_engine(self):
        return _engine_for(
            make_offer_dict("zeta", "Databases", "2026-01-05", tags=["postgres"]),
            make_offer_dict("Alpha", "databases", "2026-03-01", tags=["postgres"]),
            make_offer_dict("beta", "Cloud Hosting", "2025-12-31", tags=["edge"]),
            make_offer_dict("Gamma", "cloud hosting", "2026-03-01", tags=["edge"]),
            make_offer_dict("delta", "Auth", "2026-02-14", tags=["postgres", "edge"]),
            make_offer_dict("Epsilon", "Auth", "2024-02-29", tags=["free"]),
        )

    @pytest.mark.parametrize("query", [None, "postgres", "edge"])
    def test_category_sort_is_ordered(self, mixed_engine, query):
        """Test that category sort never decreases under the locale key."""
        results = mixed_engine.search_offers(query=query, sort="category")

        assert results
        assert _non_decreasing(
            results, lambda o: (locale_key(o.category), locale_key(o.vendor))
        )

    @pytest.mark.parametrize("query", [None, "postgres", "edge"])
    def test_vendor_sort_is_ordered(self, mixed_engine, query):
        """Test that vendor sort never decreases under the locale key."""
        results = mixed_engine.search_offers(query=query, sort="vendor")

        assert results
        assert _non_decreasing(results, lambda o: locale_key(o.vendor))

    @pytest.mark.parametrize("query", [None, "postgres", "edge"])
    def test_newest_sort_never_increases(self, mixed_engine, query):
        """Test that verified dates never increase under newest sort."""
        results = mixed_engine.search_offers(query=query, sort="newest")

        assert results
        assert _non_decreasing(reversed(results), lambda o: o.verified_date)

    @pytest.mark.parametrize(
        "query", ["postgres", "POSTGRES edge", "edge delta", "free", "data post"]
    )
    def test_results_contain_every_term(self, mixed_engine, query):
        """Test that each result holds every term and nothing matching is dropped."""
        terms = query.lower().split()
        every_offer = mixed_engine.search_offers()

        results = mixed_engine.search_offers(query=query)

        assert all(
            all(term in offer.searchable_text() for term in terms) for offer in results
        )
        assert _vendors(results) == [
            offer.vendor
            for offer in every_offer
            if all(term in offer.searchable_text() for term in terms)
        ]

    def test_search_results_from_fixture_contain_every_term(self, catalog_store):
        """Test the term rule over the shared catalog."""
        for query in ["postgres", "postgres auth", "serverless", "neon"]:
            terms = query.split()
            results = QueryEngine(catalog_store).search_offers(query=query)
            assert results
            assert all(
                all(term in offer.searchable_text() for term in terms)
                for offer in results
            )

    def test_unknown_sort_keeps_order(self, catalog_store):
        """Test that an unknown sort value leaves results unsorted."""
        results = QueryEngine(catalog_store).search_offers(sort="popularity")
        assert _vendors(results) == _vendors(catalog_store.load_offers())


class TestPaginate:
    """Test result slicing."""

    @pytest.fixture
    def offers(self):
        return [
            Offer.from_dict(make_offer_dict(f"Vendor {i}", "Databases"))
            for i in range(25)
        ]

    def test_no_arguments_returns_everything(self, offers):
        """Test that pagination is off without limit or offset."""
        page = paginate(offers)

        assert len(page.results) == 25
        assert (page.total, page.limit, page.offset) == (25, 25, 0)

    def test_offset_only_uses_default_limit(self, offers):
        """Test that an offset alone pages by 20."""
        page = paginate(offers, offset=2)

        assert _vendors(page.results) == [f"Vendor {i}" for i in range(2, 22)]
        assert page.limit == 20
        assert page.total == 25

    def test_limit_and_offset(self, offers):
        """Test an explicit page."""
        page = paginate(offers, limit=5, offset=20)

        assert _vendors(page.results) == [f"Vendor {i}" for i in range(20, 25)]
        assert page.total == 25

    def test_offset_past_end(self, offers):
        """Test that an offset beyond the results yields an empty page."""
        page = paginate(offers, limit=5, offset=100)

        assert page.results == []
        assert page.total == 25

    def test_zero_limit(self, offers):
        """Test that a zero limit still reports the total."""
        page = paginate(offers, limit=0)

        assert page.results == []
        assert page.total == 25

    def test_negative_values_rejected(self, offers):
        """Test that negative limits and offsets raise ValueError."""
        with pytest.raises(ValueError):
            paginate(offers, limit=-1)
        with pytest.raises(ValueError):
            paginate(offers, offset=-3)

    def test_to_dict(self, offers):
        """Test the serialized page shape."""
        data = paginate(offers[:3], limit=2).to_dict()

        assert [r["vendor"] for r in data["results"]] == ["Vendor 0", "Vendor 1"]
        assert data["total"] == 3
        assert data["limit"] == 2
        assert data["offset"] == 0
