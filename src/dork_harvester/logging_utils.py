"""Logging setup shared by the CLI and the crawl components."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
LOGGER_NAME = "dork_harvester"


def configure_logging(verbose: bool = False) -> None:
    """Send crawl status lines to stderr; ``verbose`` adds per-page navigation detail."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_logger() -> logging.Logger:
    """Return the logger handed to the controller, extractor, browsers and store."""
    return logging.getLogger(LOGGER_NAME)
