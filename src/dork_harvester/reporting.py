"""Status, progress and result display sinks."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from tqdm import tqdm

from .models import STATUS_ERROR, STATUS_NORMAL


class LoggingReporter:
    """Report crawl activity through the package logger."""

    def __init__(self, *, logger: logging.Logger) -> None:
        self._logger = logger
        self.last_status: tuple[str, str] = ("", STATUS_NORMAL)
        self.email_count = 0

    def status(self, message: str, kind: str = STATUS_NORMAL) -> None:
        self.last_status = (message, kind)
        if kind == STATUS_ERROR:
            self._logger.warning(message)
        else:
            self._logger.info(message)

    def progress(self, current_page: int, total_pages: int) -> None:
        self._logger.debug(
            "Progress %d/%d (%.0f%%)", current_page, total_pages, current_page / total_pages * 100
        )

    def emails(self, emails: Iterable[str]) -> None:
        self.email_count = len(list(emails))
        self._logger.debug("Accumulated emails: %d", self.email_count)


class TqdmReporter(LoggingReporter):
    """Logging reporter that also draws a page progress bar."""

    def __init__(self, *, logger: logging.Logger) -> None:
        super().__init__(logger=logger)
        self._bar: Any = None

    def progress(self, current_page: int, total_pages: int) -> None:
        if self._bar is None or self._bar.total != total_pages or current_page == 1:
            self.close()
            self._bar = tqdm(total=total_pages, desc="result pages", unit="page")
        self._bar.n = current_page
        self._bar.refresh()

    def emails(self, emails: Iterable[str]) -> None:
        super().emails(emails)
        if self._bar is not None:
            self._bar.set_postfix(emails=self.email_count)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
