"""Page-context extractor that answers extraction requests for a loaded tab."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .config import DEFAULT_SETTLE_DELAY
from .errors import ExtractionError
from .extraction import scan_page
from .messaging import ACTION_EXTRACT, TYPE_EMAILS_EXTRACTED, LocalChannel
from .models import Browser, Message


class PageExtractor:
    """Scan whatever page a tab currently shows for email addresses."""

    def __init__(
        self,
        *,
        browser: Browser,
        logger: logging.Logger,
        channel: LocalChannel | None = None,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        filter_all_passes: bool = True,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        self._browser = browser
        self._logger = logger
        self._channel = channel
        self._settle_delay = settle_delay
        self._filter_all_passes = filter_all_passes
        self._sleep = sleep_fn
        if channel is not None:
            channel.register_handler(self.handle_message)

    def scan(self, tab_id: str) -> set[str]:
        """Scan the current page, raising ExtractionError when that is impossible."""
        try:
            html = self._browser.page_source(tab_id)
            return scan_page(html, filter_all_passes=self._filter_all_passes)
        except Exception as exc:
            raise ExtractionError(f"Could not scan {tab_id}: {exc}") from exc

    def extract(self, tab_id: str) -> set[str]:
        """Wait for the page to settle, then return its emails; never raises."""
        self._sleep(self._settle_delay)
        try:
            emails = self.scan(tab_id)
        except ExtractionError as exc:
            self._logger.warning("Error extracting emails: %s", exc)
            return set()
        self._logger.info("Found %d emails on current page", len(emails))
        return emails

    def handle_message(self, tab_id: str, message: Message) -> Message | None:
        if message.get("action") != ACTION_EXTRACT:
            return None
        emails = sorted(self.extract(tab_id))
        if self._channel is not None:
            self._channel.publish({"type": TYPE_EMAILS_EXTRACTED, "emails": emails})
        return {"success": True, "emails": emails}
