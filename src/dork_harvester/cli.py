"""CLI entrypoint for dork-harvester."""

from __future__ import annotations

import argparse
import dataclasses
import signal
import threading
from collections.abc import Sequence
from typing import Any

from .config import (
    DEFAULT_ERROR_DELAY,
    DEFAULT_NAVIGATION_TIMEOUT,
    DEFAULT_PAGE_DELAY,
    DEFAULT_SEARCH_ENDPOINT,
    DEFAULT_SETTLE_DELAY,
    CrawlConfig,
    default_store_path,
)
from .controller import CrawlController, build_controller
from .errors import ConfigError, HarvesterError, ValidationError
from .io_csv import build_rows, write_rows
from .logging_utils import configure_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Dork Harvester - page through search results and collect email addresses."
    )
    parser.add_argument("--query", "--dork", dest="query", help="Search query (dork) to crawl.")
    parser.add_argument("--pages", help="Number of result pages to crawl.")
    parser.add_argument(
        "--resume",
        action="store_true",
        help="Reuse the query and page count saved by the previous crawl.",
    )
    parser.add_argument(
        "--clear", action="store_true", help="Forget accumulated emails before anything else."
    )
    parser.add_argument("--list", action="store_true", help="Print accumulated emails and exit.")
    parser.add_argument("--export", help="Write accumulated emails to this CSV path.")
    parser.add_argument(
        "--store", help="Session file path (or set DORK_HARVESTER_STORE env var)."
    )
    parser.add_argument(
        "--browser",
        choices=["requests", "selenium"],
        default="requests",
        help="Surface used to load result pages.",
    )
    parser.add_argument(
        "--endpoint", default=DEFAULT_SEARCH_ENDPOINT, help="Search engine base URL."
    )
    parser.add_argument(
        "--page-delay",
        type=float,
        default=DEFAULT_PAGE_DELAY,
        help="Seconds to wait between result pages.",
    )
    parser.add_argument(
        "--error-delay",
        type=float,
        default=DEFAULT_ERROR_DELAY,
        help="Seconds to wait after a failed page.",
    )
    parser.add_argument(
        "--settle-delay",
        type=float,
        default=DEFAULT_SETTLE_DELAY,
        help="Seconds to let a page render before scanning it.",
    )
    parser.add_argument(
        "--navigation-timeout",
        type=float,
        default=DEFAULT_NAVIGATION_TIMEOUT,
        help="Seconds to wait for a result page to finish loading.",
    )
    parser.add_argument(
        "--filter-broad-pass-only",
        action="store_true",
        help="Apply the placeholder filter only to the general page-text pass.",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bars.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse and pre-validate CLI input."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.resume and args.query:
        parser.error("--resume cannot be combined with --query.")
    if not (args.query or args.resume or args.clear or args.list or args.export):
        parser.error("Provide --query, --resume, --clear, --list, or --export.")
    return args


def namespace_to_config(args: argparse.Namespace) -> CrawlConfig:
    """Convert CLI args to validated CrawlConfig."""
    return CrawlConfig(
        store_path=args.store or default_store_path(),
        search_endpoint=args.endpoint,
        browser=args.browser,
        page_delay=args.page_delay,
        error_delay=args.error_delay,
        settle_delay=args.settle_delay,
        navigation_timeout=args.navigation_timeout,
        filter_all_passes=not args.filter_broad_pass_only,
        show_progress=not args.no_progress,
    )


def _crawl_settings(args: argparse.Namespace, controller: CrawlController) -> tuple[str, str]:
    if args.resume:
        return controller.saved_query, args.pages or controller.saved_max_pages
    return args.query, args.pages or "1"


def _run_crawl(controller: CrawlController, query: str, pages: str) -> str:
    """Run one crawl, turning Ctrl-C into a cooperative stop."""

    def _request_stop(_signum: int, _frame: Any) -> None:
        controller.stop()

    if threading.current_thread() is not threading.main_thread():
        # signal handlers can only be installed from the main thread
        return controller.start(query, pages)
    previous = signal.signal(signal.SIGINT, _request_stop)
    try:
        return controller.start(query, pages)
    finally:
        signal.signal(signal.SIGINT, previous)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.verbose)
    logger = get_logger()
    crawling = bool(args.query or args.resume)
    try:
        config = namespace_to_config(args)
        if not crawling:
            # Store maintenance never needs a real browser.
            config = dataclasses.replace(config, browser="requests", show_progress=False)
        controller = build_controller(config, logger=logger)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    except HarvesterError as exc:
        logger.error("Cannot prepare crawl: %s", exc)
        return 2

    try:
        if args.clear:
            controller.clear()
        if crawling:
            query, pages = _crawl_settings(args, controller)
            try:
                status = _run_crawl(controller, query, pages)
            except ValidationError as exc:
                logger.error("Cannot start crawl: %s", exc)
                return 2
            logger.info("Crawl %s with %d emails accumulated", status, len(controller.emails))
        if args.list:
            for email in sorted(controller.emails):
                print(email)
        if args.export:
            write_rows(args.export, build_rows(controller.emails, controller.saved_query))
            logger.info("Wrote %d emails to %s", len(controller.emails), args.export)
    finally:
        controller.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
