"""Crawl controller: the page-by-page search loop with start/stop/clear control."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Iterable

from .browsers import RequestsBrowser, SeleniumBrowser, make_retry_session
from .config import CrawlConfig
from .errors import MessagingError, NavigationError, PersistenceError, ValidationError
from .extractor import PageExtractor
from .messaging import ACTION_EXTRACT, TYPE_EMAILS_EXTRACTED, LocalChannel
from .models import (
    STATUS_COMPLETED,
    STATUS_ERROR,
    STATUS_NORMAL,
    STATUS_RUNNING,
    STATUS_STOPPED,
    TAB_COMPLETE,
    Browser,
    Channel,
    CrawlState,
    Message,
    PersistedSession,
    Reporter,
    SessionStore,
)
from .reporting import LoggingReporter, TqdmReporter
from .search import build_search_url
from .storage import JsonSessionStore
from .validation import validate_start_request

SleepFn = Callable[[float], None]


class CrawlController:
    """Drive a bounded multi-page crawl and keep the accumulated email set.

    The controller is ``Idle`` until :meth:`start` is called and returns to
    ``Idle`` when the loop ends or :meth:`stop` is called. Each crawl owns one
    :class:`CrawlState`; a stop marks that state and the loop notices it before
    starting the next page.
    """

    def __init__(
        self,
        config: CrawlConfig,
        *,
        browser: Browser,
        channel: Channel,
        store: SessionStore,
        reporter: Reporter,
        logger: logging.Logger,
        sleep_fn: SleepFn = time.sleep,
    ) -> None:
        self._config = config
        self._browser = browser
        self._channel = channel
        self._store = store
        self._reporter = reporter
        self._logger = logger
        self._sleep = sleep_fn
        self._emails: set[str] = set()
        self._state: CrawlState | None = None
        self._query = ""
        self._max_pages = ""
        self._last_status: tuple[str, str] = ("", STATUS_NORMAL)
        channel.subscribe(self._on_message)
        self._load_saved_data()

    @property
    def emails(self) -> frozenset[str]:
        return frozenset(self._emails)

    @property
    def running(self) -> bool:
        return self._state is not None and self._state.running

    @property
    def state(self) -> CrawlState | None:
        return self._state

    @property
    def saved_query(self) -> str:
        return self._query

    @property
    def saved_max_pages(self) -> str:
        return self._max_pages

    @property
    def last_status(self) -> tuple[str, str]:
        return self._last_status

    def _report(self, message: str, kind: str = STATUS_NORMAL) -> None:
        self._last_status = (message, kind)
        self._reporter.status(message, kind)

    def _load_saved_data(self) -> None:
        try:
            session = self._store.load()
        except PersistenceError as exc:
            self._logger.error("Error loading saved data: %s", exc)
            return
        self._emails.update(session.emails)
        self._query = session.query
        self._max_pages = session.max_pages
        if self._emails:
            self._reporter.emails(sorted(self._emails))

    def _save_data(self) -> None:
        session = PersistedSession(
            emails=set(self._emails), query=self._query, max_pages=self._max_pages
        )
        try:
            self._store.save(session)
        except PersistenceError as exc:
            self._logger.error("Error saving data: %s", exc)

    def start(self, query: str, page_count: int | str) -> str:
        """Run a crawl to completion or until stopped; return the final status."""
        if self.running:
            raise ValidationError("A crawl is already running.")
        try:
            query, pages = validate_start_request(query, page_count)
        except ValidationError as exc:
            self._report(str(exc), STATUS_ERROR)
            raise

        state = CrawlState(query=query, total_pages=pages)
        self._state = state
        self._query = query
        self._max_pages = str(pages)
        self._report("Starting extraction...", STATUS_RUNNING)
        self._save_data()

        try:
            self._run(state)
        finally:
            state.running = False
            if self._state is state:
                self._state = None

        if state.stop_requested:
            # the in-flight page may have reported after stop(); stopped stays last
            if self._last_status[1] != STATUS_STOPPED:
                self._report(f"Stopped. Found {len(self._emails)} emails", STATUS_STOPPED)
            return STATUS_STOPPED
        self._report(f"Completed. Found {len(self._emails)} emails", STATUS_COMPLETED)
        return STATUS_COMPLETED

    def _run(self, state: CrawlState) -> None:
        for page_index in range(state.total_pages):
            if state.stop_requested:
                break
            state.page_index = page_index
            self._reporter.progress(state.current_page, state.total_pages)
            self._report(f"Searching page {state.current_page}...", STATUS_RUNNING)
            try:
                self._crawl_page(state)
                if page_index < state.total_pages - 1 and not state.stop_requested:
                    self._sleep(self._config.page_delay)
            except Exception as exc:
                self._logger.warning("Error on page %d: %s", state.current_page, exc)
                self._report(f"Error on page {state.current_page}", STATUS_ERROR)
                self._sleep(self._config.error_delay)

    def _crawl_page(self, state: CrawlState) -> None:
        url = build_search_url(
            state.query,
            state.page_index,
            endpoint=self._config.search_endpoint,
            results_per_page=self._config.results_per_page,
        )
        tab_id = self._browser.active_tab()
        self._logger.debug("Navigating %s to %s", tab_id, url)
        self._browser.navigate(tab_id, url)
        self.wait_for_page_load(tab_id)

        response = self._channel.send(tab_id, {"action": ACTION_EXTRACT})
        if response is None:
            raise MessagingError(f"No response to extraction request from {tab_id}.")
        if not response.get("success"):
            raise MessagingError(str(response.get("error") or "Extraction failed."))
        self.handle_extracted_emails(response.get("emails") or [])

    def wait_for_page_load(self, tab_id: str) -> None:
        """Wait until the tab has finished loading.

        Browsers that expose ``wait_for_load`` are trusted to block; others are
        polled at the configured interval until the timeout runs out.
        """
        timeout = self._config.navigation_timeout
        wait_for_load = getattr(self._browser, "wait_for_load", None)
        if callable(wait_for_load):
            wait_for_load(tab_id, timeout)
            return

        max_polls = math.ceil(timeout / self._config.poll_interval)
        for _ in range(max_polls):
            if self._browser.get_status(tab_id) == TAB_COMPLETE:
                return
            self._sleep(self._config.poll_interval)
        if self._browser.get_status(tab_id) != TAB_COMPLETE:
            raise NavigationError(f"Tab {tab_id} did not finish loading within {timeout}s.")

    def handle_extracted_emails(self, emails: Iterable[str]) -> int:
        """Merge emails into the accumulated set; return how many were new."""
        incoming = {email.strip().lower() for email in emails if email and email.strip()}
        added = incoming - self._emails
        if added:
            self._emails.update(added)
            self._reporter.emails(sorted(self._emails))
            self._save_data()
        return len(added)

    def _on_message(self, message: Message) -> None:
        if message.get("type") == TYPE_EMAILS_EXTRACTED:
            self.handle_extracted_emails(message.get("emails") or [])

    def stop(self) -> None:
        """Request a stop; the loop exits before starting its next page."""
        state = self._state
        if state is None or not state.running:
            self._logger.debug("Stop requested while idle.")
            return
        state.stop_requested = True
        state.running = False
        self._state = None
        self._report(f"Stopped. Found {len(self._emails)} emails", STATUS_STOPPED)

    def clear(self) -> None:
        """Forget every accumulated email, in memory and in the store."""
        self._emails.clear()
        self._save_data()
        self._reporter.emails([])
        self._report("Emails cleared", STATUS_NORMAL)

    def close(self) -> None:
        close_fn = getattr(self._browser, "close", None)
        if callable(close_fn):
            close_fn()
        close_reporter = getattr(self._reporter, "close", None)
        if callable(close_reporter):
            close_reporter()


def build_browser(config: CrawlConfig, *, logger: logging.Logger) -> Browser:
    """Create the browser surface named by ``config.browser``."""
    if config.browser == "selenium":
        return SeleniumBrowser(
            user_agent=config.user_agent,
            page_load_timeout=config.navigation_timeout,
            logger=logger,
        )
    return RequestsBrowser(
        session=make_retry_session(config.user_agent),
        timeout=config.request_timeout,
        logger=logger,
    )


def build_controller(
    config: CrawlConfig,
    *,
    logger: logging.Logger,
    browser: Browser | None = None,
    reporter: Reporter | None = None,
    sleep_fn: SleepFn = time.sleep,
) -> CrawlController:
    """Wire concrete collaborators into a ready controller."""
    browser = browser if browser is not None else build_browser(config, logger=logger)
    channel = LocalChannel(logger=logger)
    PageExtractor(
        browser=browser,
        channel=channel,
        logger=logger,
        settle_delay=config.settle_delay,
        filter_all_passes=config.filter_all_passes,
        sleep_fn=sleep_fn,
    )
    if reporter is None:
        reporter = (
            TqdmReporter(logger=logger) if config.show_progress else LoggingReporter(logger=logger)
        )
    return CrawlController(
        config,
        browser=browser,
        channel=channel,
        store=JsonSessionStore(config.store_path, logger=logger),
        reporter=reporter,
        logger=logger,
        sleep_fn=sleep_fn,
    )
