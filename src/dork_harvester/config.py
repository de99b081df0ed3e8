"""Runtime configuration model."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .validation import validate_runtime_constraints

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0 Safari/537.36"
)
DEFAULT_SEARCH_ENDPOINT = "https://www.google.com"
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_RESULTS_PER_PAGE = 10
DEFAULT_PAGE_DELAY = 2.0
DEFAULT_ERROR_DELAY = 1.0
DEFAULT_SETTLE_DELAY = 1.0
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_NAVIGATION_TIMEOUT = 30.0
STORE_ENV_VAR = "DORK_HARVESTER_STORE"


def default_store_path() -> str:
    """Return the session store location, honouring DORK_HARVESTER_STORE."""
    override = os.getenv(STORE_ENV_VAR)
    if override:
        return override
    return str(Path.home() / ".dork_harvester" / "session.json")


@dataclass(frozen=True)
class CrawlConfig:
    """Validated configuration used by the crawl controller and its collaborators."""

    store_path: str
    search_endpoint: str = DEFAULT_SEARCH_ENDPOINT
    browser: str = "requests"
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    results_per_page: int = DEFAULT_RESULTS_PER_PAGE
    page_delay: float = DEFAULT_PAGE_DELAY
    error_delay: float = DEFAULT_ERROR_DELAY
    settle_delay: float = DEFAULT_SETTLE_DELAY
    poll_interval: float = DEFAULT_POLL_INTERVAL
    navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT
    filter_all_passes: bool = True
    show_progress: bool = True

    def __post_init__(self) -> None:
        validate_runtime_constraints(
            search_endpoint=self.search_endpoint,
            browser=self.browser,
            page_delay=self.page_delay,
            error_delay=self.error_delay,
            settle_delay=self.settle_delay,
            poll_interval=self.poll_interval,
            navigation_timeout=self.navigation_timeout,
            results_per_page=self.results_per_page,
        )
