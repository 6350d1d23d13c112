"""
Tool facade over the catalog query components.

This service is what a transport (stdio, HTTP, CLI) talks to. It validates
tool arguments, runs the query, applies pagination and returns JSON-ready
payloads. Lookup misses and unexpected failures come back as error results
rather than exceptions.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Optional

from ..components.change_feed import DEFAULT_WINDOW_DAYS, ChangeFeed
from ..components.offer_resolver import OfferResolver
from ..components.query_engine import SORT_OPTIONS, QueryEngine, paginate
from ..interfaces import ICatalogSource
from ..models.change import ChangeType
from ..models.offer import EligibilityType, is_iso_date
from ..models.query import OfferNotFound
from ..utils.error_handling import ErrorCategory, with_error_handling

logger = logging.getLogger(__name__)

ELIGIBILITY_TYPES = [e.value for e in EligibilityType]
CHANGE_TYPES = [c.value for c in ChangeType]


class ToolArgumentError(ValueError):
    """Tool arguments failed validation before reaching the catalog."""


@dataclass
class ToolResult:
    """Outcome of one tool call."""

    is_error: bool
    payload: Any = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_error:
            return {"isError": True, "message": self.message}
        return {"isError": False, "data": self.payload}


def _optional_str(arguments: Dict[str, Any], name: str) -> Optional[str]:
    value = arguments.get(name)
    if value is not None and not isinstance(value, str):
        raise ToolArgumentError(f"'{name}' must be a string")
    return value


def _optional_choice(arguments: Dict[str, Any], name: str, choices) -> Optional[str]:
    value = _optional_str(arguments, name)
    if value is not None and value not in choices:
        raise ToolArgumentError(f"'{name}' must be one of: {', '.join(choices)}")
    return value


def _optional_count(arguments: Dict[str, Any], name: str) -> Optional[int]:
    value = arguments.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ToolArgumentError(f"'{name}' must be a non-negative integer")
    return value


class DealsService:
    """Exposes the catalog as named tools with plain-data results."""

    def __init__(
        self,
        store: ICatalogSource,
        change_window_days: int = DEFAULT_WINDOW_DAYS,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.query_engine = QueryEngine(store)
        self.resolver = OfferResolver(store)
        self.change_feed = ChangeFeed(store, window_days=change_window_days, today=today)

        self._tools: Dict[str, Callable[[Dict[str, Any]], ToolResult]] = {
            "list_categories": self._list_categories,
            "search_offers": self._search_offers,
            "get_offer_details": self._get_offer_details,
            "get_deal_changes": self._get_deal_changes,
        }
        self._actions = {
            "list_categories": "listing categories",
            "search_offers": "searching offers",
            "get_offer_details": "getting offer details",
            "get_deal_changes": "getting deal changes",
        }

    @property
    def tool_names(self):
        return list(self._tools)

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """
        Dispatch a tool call by name.

        Invalid arguments are rejected before the catalog is queried; any
        other failure is logged and reported as an error result.
        """
        handler = self._tools.get(name)
        if handler is None:
            return ToolResult(is_error=True, message=f"Unknown tool: {name}")

        arguments = arguments or {}
        if not isinstance(arguments, dict):
            return ToolResult(is_error=True, message="Tool arguments must be an object")

        try:
            return handler(arguments)
        except ToolArgumentError as e:
            logger.info(f"{name} rejected arguments: {e}")
            return ToolResult(is_error=True, message=f"Invalid arguments: {e}")
        except Exception as e:
            logger.error(f"{name} error: {e}", exc_info=True)
            return ToolResult(
                is_error=True, message=f"Error {self._actions[name]}: {e}"
            )

    def list_categories(self) -> ToolResult:
        return self.call_tool("list_categories")

    def search_offers(self, **arguments) -> ToolResult:
        return self.call_tool("search_offers", arguments)

    def get_offer_details(self, vendor: str) -> ToolResult:
        return self.call_tool("get_offer_details", {"vendor": vendor})

    def get_deal_changes(self, **arguments) -> ToolResult:
        return self.call_tool("get_deal_changes", arguments)

    @with_error_handling(
        "deals.service", ErrorCategory.TOOL_CALL, passthrough=(ToolArgumentError,)
    )
    def _list_categories(self, arguments: Dict[str, Any]) -> ToolResult:
        categories = self.query_engine.get_categories()
        return ToolResult(is_error=False, payload=[c.to_dict() for c in categories])

    @with_error_handling(
        "deals.service", ErrorCategory.TOOL_CALL, passthrough=(ToolArgumentError,)
    )
    def _search_offers(self, arguments: Dict[str, Any]) -> ToolResult:
        query = _optional_str(arguments, "query")
        category = _optional_str(arguments, "category")
        eligibility_type = _optional_choice(
            arguments, "eligibility_type", ELIGIBILITY_TYPES
        )
        sort = _optional_choice(arguments, "sort", SORT_OPTIONS)
        limit = _optional_count(arguments, "limit")
        offset = _optional_count(arguments, "offset")

        results = self.query_engine.search_offers(query, category, eligibility_type, sort)
        page = paginate(results, limit=limit, offset=offset)
        return ToolResult(is_error=False, payload=page.to_dict())

    @with_error_handling(
        "deals.service", ErrorCategory.TOOL_CALL, passthrough=(ToolArgumentError,)
    )
    def _get_offer_details(self, arguments: Dict[str, Any]) -> ToolResult:
        vendor = _optional_str(arguments, "vendor")
        if not vendor:
            raise ToolArgumentError("'vendor' is required")

        result = self.resolver.get_offer_details(vendor)
        if isinstance(result, OfferNotFound):
            if result.suggestions:
                message = f"{result.error} Did you mean: {', '.join(result.suggestions)}?"
            else:
                message = f"{result.error} No similar vendors found."
            return ToolResult(is_error=True, payload=result.to_dict(), message=message)

        return ToolResult(is_error=False, payload=result.to_dict())

    @with_error_handling(
        "deals.service", ErrorCategory.TOOL_CALL, passthrough=(ToolArgumentError,)
    )
    def _get_deal_changes(self, arguments: Dict[str, Any]) -> ToolResult:
        since = _optional_str(arguments, "since")
        if since is not None and not is_iso_date(since):
            raise ToolArgumentError("'since' must be an ISO date (YYYY-MM-DD)")
        change_type = _optional_choice(arguments, "change_type", CHANGE_TYPES)
        vendor = _optional_str(arguments, "vendor")

        result = self.change_feed.get_deal_changes(since, change_type, vendor)
        return ToolResult(is_error=False, payload=result.to_dict())
