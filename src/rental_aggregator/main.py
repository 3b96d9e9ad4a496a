"""Main orchestrator for the rental aggregator."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from .adapters import build_adapters
from .adapters.base import BaseAdapter
from .config import load_config
from .models.listing import Snapshot, SourceOutcome
from .services.aggregator import AggregationOrchestrator
from .services.cache import ResultCache
from .services.changes import ChangeDispatcher, Notifier
from .services.email_sender import EmailNotifier
from .utils.http import HttpClient
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


class RentalFeed:
    """
    Main entry point for the listing feed.

    Coordinates: adapters -> orchestrator -> cache -> change dispatch.
    ``get_current_listings`` is the single inbound operation; everything
    else is read-only status for dashboards.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        adapters: Optional[Sequence[BaseAdapter]] = None,
        notifier: Optional[Notifier] = None,
        only_agency: Optional[str] = None,
        notify: bool = True,
    ):
        self.config = config
        if adapters is None:
            client = HttpClient.from_config(config.get("scraper"))
            adapters = build_adapters(config, client, only=only_agency)
        self.adapters = list(adapters)

        notifications = config.get("notifications", {})
        if notifier is None and notify and notifications.get("enabled"):
            notifier = EmailNotifier(notifications.get("recipients", []))
        self.dispatcher = ChangeDispatcher(notifier if notify else None)

        self.orchestrator = AggregationOrchestrator(self.adapters)
        self.cache = ResultCache(self.orchestrator, self.dispatcher)

    async def get_current_listings(self, force_refresh: bool = False) -> Snapshot:
        """Return the current snapshot, scraping only when the cache is stale."""
        return await self.cache.get(force_refresh=force_refresh)

    def source_status(self) -> Dict[str, Any]:
        """Per-source outcomes of the last run, for dashboards."""
        snapshot = self.cache.current
        outcomes: List[SourceOutcome] = list(snapshot.outcomes) if snapshot else []
        return {
            "last_run": snapshot.captured_at.isoformat() if snapshot else None,
            "fresh": self.cache.is_fresh(),
            "count": snapshot.count if snapshot else 0,
            "sources": [outcome.to_dict() for outcome in outcomes],
            "errors": snapshot.errors if snapshot else [],
            "agencies": [adapter.get_source_name() for adapter in self.adapters],
        }

    async def watch(self, interval_minutes: float, iterations: Optional[int] = None) -> None:
        """Refresh on a fixed interval; ``iterations=None`` runs until cancelled."""
        completed = 0
        while iterations is None or completed < iterations:
            snapshot = await self.get_current_listings(force_refresh=True)
            logger.info(
                f"Refreshed feed: {snapshot.count} listings, "
                f"{len(snapshot.failed_outcomes)} failed sources"
            )
            completed += 1
            if iterations is not None and completed >= iterations:
                break
            await asyncio.sleep(interval_minutes * 60)
        await self.cache.wait_for_notifications()


def print_snapshot(snapshot: Snapshot, limit: int = 20) -> None:
    print("\n=== Rental Aggregator Results ===")
    print(f"Captured at {snapshot.captured_at:%Y-%m-%d %H:%M:%S} - {snapshot.count} listings")
    for record in snapshot.records[:limit]:
        print(f"  - {record.title[:50]} ({record.agency_name})")
        print(f"    {record.display_price()} | {record.display_size()} | {record.days_since_listed} days ago")
        print(f"    {record.source_url}")

    print("\nSources:")
    for outcome in snapshot.outcomes:
        status = f"{outcome.count} listings" if outcome.succeeded else f"FAILED: {outcome.error_message}"
        print(f"  {outcome.agency_name}: {status}")


def main(argv: Optional[Sequence[str]] = None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Rental Aggregator - unified feed of Groningen rental listings"
    )
    parser.add_argument(
        "-c",
        "--config",
        default="./config/config.yaml",
        help="Path to configuration file (defaults are used if it does not exist)",
    )
    parser.add_argument(
        "--agency",
        help="Only scrape this agency (e.g., gruno, vandermeulen)",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep refreshing on the configured interval",
    )
    parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Skip new-listing notifications",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the snapshot as JSON",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else None)

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        if args.config != parser.get_default("config"):
            logger.error(f"Configuration file not found: {args.config}")
            sys.exit(1)
        logger.info("No config file found, using defaults")
        config = load_config(None)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    try:
        feed = RentalFeed(config, only_agency=args.agency, notify=not args.no_notify)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    if args.watch:
        interval = config.get("schedule", {}).get("refresh_interval_minutes", 10)
        try:
            asyncio.run(feed.watch(interval))
        except KeyboardInterrupt:
            logger.info("Stopped")
        return

    snapshot = asyncio.run(feed.get_current_listings())
    if args.json:
        print(json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_snapshot(snapshot)


if __name__ == "__main__":
    main()
