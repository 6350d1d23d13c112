"""
Service layer for the AgentDeals catalog.

This module contains the configuration manager and the tool facade that
transports and the command line use to query the catalog.
"""

from .config_manager import ConfigurationManager
from .deals_service import DealsService, ToolArgumentError, ToolResult

__all__ = [
    "ConfigurationManager",
    "DealsService",
    "ToolResult",
    "ToolArgumentError",
]
