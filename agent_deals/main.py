"""
Main entry point for the AgentDeals catalog command line.
"""

import argparse
import json
import sys
from typing import List, Optional

from .components.catalog_store import CatalogStore, parse_offers
from .components.drift_hasher import DriftHasher, PageFetcher, SnapshotRepository
from .components.query_engine import SORT_OPTIONS
from .components.staleness_checker import find_stale_entries
from .models.config import Configuration
from .services.config_manager import ConfigurationManager
from .services.deals_service import (
    CHANGE_TYPES,
    ELIGIBILITY_TYPES,
    DealsService,
    ToolResult,
)
from .utils.error_handling import CatalogLoadError
from .utils.logging import get_logger, setup_logging

EXIT_OK = 0
EXIT_FOUND = 1
EXIT_FAILURE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-deals",
        description="Query the developer tool offer catalog and monitor pricing pages.",
    )
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("categories", help="List categories with offer counts")

    search = subparsers.add_parser("search", help="Search offers")
    search.add_argument("--query", "-q")
    search.add_argument("--category", "-c")
    search.add_argument("--eligibility-type", choices=ELIGIBILITY_TYPES)
    search.add_argument("--sort", choices=SORT_OPTIONS)
    search.add_argument("--limit", type=int)
    search.add_argument("--offset", type=int)

    details = subparsers.add_parser("details", help="Show one vendor's offer")
    details.add_argument("vendor")

    changes = subparsers.add_parser("changes", help="List recent deal changes")
    changes.add_argument("--since", help="ISO date (YYYY-MM-DD)")
    changes.add_argument("--change-type", choices=CHANGE_TYPES)
    changes.add_argument("--vendor")

    subparsers.add_parser("check-pricing", help="Detect pricing page changes")

    staleness = subparsers.add_parser(
        "check-staleness", help="List entries not verified recently"
    )
    staleness.add_argument(
        "threshold", nargs="?", help="Days since verification (default from config)"
    )

    return parser


def _print_tool_result(result: ToolResult) -> int:
    if result.is_error:
        print(result.message, file=sys.stderr)
        return EXIT_FOUND
    print(json.dumps(result.payload, indent=2))
    return EXIT_OK


def run_query(args: argparse.Namespace, config: Configuration) -> int:
    """Run one of the catalog query commands."""
    store = CatalogStore(config.data.offers_path, config.data.changes_path)
    service = DealsService(store, change_window_days=config.change_window_days)

    if args.command == "categories":
        result = service.list_categories()
    elif args.command == "search":
        arguments = {
            "query": args.query,
            "category": args.category,
            "eligibility_type": args.eligibility_type,
            "sort": args.sort,
            "limit": args.limit,
            "offset": args.offset,
        }
        result = service.search_offers(
            **{key: value for key, value in arguments.items() if value is not None}
        )
    elif args.command == "details":
        result = service.get_offer_details(args.vendor)
    else:
        arguments = {
            "since": args.since,
            "change_type": args.change_type,
            "vendor": args.vendor,
        }
        result = service.get_deal_changes(
            **{key: value for key, value in arguments.items() if value is not None}
        )

    return _print_tool_result(result)


def run_pricing_check(config: Configuration) -> int:
    """
    Fetch every vendor pricing page and compare against the stored snapshot.

    Returns 1 when any page changed, 0 otherwise (fetch errors are reported
    but do not change the exit code), 2 when the catalog cannot be read.
    """
    logger = get_logger("pricing.monitor")

    try:
        offers = parse_offers(config.data.offers_path)
    except CatalogLoadError as e:
        logger.error("Failed to read index", extra={"source": e.source, "reason": e.reason})
        print(f"Failed to read index: {e.reason}", file=sys.stderr)
        return EXIT_FAILURE

    repository = SnapshotRepository(config.data.snapshot_path)
    previous = repository.load()

    fetcher = PageFetcher(
        timeout=config.monitor.fetch_timeout, user_agent=config.monitor.user_agent
    )
    try:
        hasher = DriftHasher(fetcher, max_workers=config.monitor.max_workers)
        report = hasher.check(offers, previous)
    finally:
        fetcher.close()

    repository.save(report)

    for vendor in report.skipped:
        print(f"Warning: {vendor} has no url field", file=sys.stderr)

    if report.is_baseline:
        print(f"Baseline created: {len(report.snapshot)} vendors hashed.")
        print(f"Hashes saved to {repository.path}")
    elif not report.has_changes:
        print("No pricing page changes detected.")
    else:
        print(f"{len(report.changed)} pricing page(s) changed:\n")
        for check in report.changed:
            print(f"  {check.vendor} - {check.url}")

    if report.has_errors:
        print(f"\n{len(report.errors)} error(s):\n")
        for check in report.errors:
            print(f"  {check.vendor} - {check.error} ({check.url})")

    logger.info(
        "Pricing check complete",
        extra={
            "changed": len(report.changed),
            "errors": len(report.errors),
            "unchanged": report.unchanged_count,
            "baseline": report.is_baseline,
        },
    )
    return report.exit_code


def run_staleness_check(threshold: Optional[str], config: Configuration) -> int:
    """
    Report entries whose verification date is older than the threshold.

    Returns 0 when everything is fresh, 1 when stale entries exist and 2 on
    an invalid threshold or unreadable catalog.
    """
    if threshold is None:
        threshold_days = config.stale_threshold_days
    else:
        try:
            threshold_days = int(threshold)
        except ValueError:
            threshold_days = -1
        if threshold_days < 0:
            print(
                f"Invalid threshold: {threshold}. Must be a non-negative integer.",
                file=sys.stderr,
            )
            return EXIT_FAILURE

    try:
        offers = parse_offers(config.data.offers_path)
    except CatalogLoadError as e:
        print(f"Failed to read index: {e.reason}", file=sys.stderr)
        return EXIT_FAILURE

    stale = find_stale_entries(offers, threshold_days)
    if not stale:
        print(f"All {len(offers)} entries verified within {threshold_days} days.")
        return EXIT_OK

    print(f"Found {len(stale)} stale entries (threshold: {threshold_days} days):\n")
    for entry in stale:
        days = (
            "never verified"
            if entry.never_verified
            else f"{entry.days_since} days ago"
        )
        print(f"  {entry.vendor} ({entry.category}) - {days}")
    return EXIT_FOUND


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = ConfigurationManager(args.config).load_config()
    except (ValueError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    setup_logging(
        log_dir=config.log_directory, log_level=args.log_level or config.log_level
    )
    logger = get_logger("main")
    logger.debug("Running command", extra={"command": args.command})

    if args.command == "check-pricing":
        return run_pricing_check(config)
    if args.command == "check-staleness":
        return run_staleness_check(args.threshold, config)
    return run_query(args, config)


if __name__ == "__main__":
    sys.exit(main())
