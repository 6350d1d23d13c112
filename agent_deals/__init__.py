"""
AgentDeals Offer Catalog

A queryable catalog of developer tool offers (free tiers, discounts and
pricing changes) with a companion monitor that detects pricing page changes
and flags entries whose verification has gone stale.
"""

__version__ = "0.1.0"
__author__ = "AgentDeals Team"
