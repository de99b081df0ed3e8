"""Protocols and lightweight model types."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol

Message = dict[str, Any]
MessageListener = Callable[[Message], None]

STATUS_NORMAL = "normal"
STATUS_RUNNING = "running"
STATUS_ERROR = "error"
STATUS_STOPPED = "stopped"
STATUS_COMPLETED = "completed"

TAB_COMPLETE = "complete"
TAB_LOADING = "loading"


class Browser(Protocol):
    """Contract for the surface that hosts result pages."""

    def active_tab(self) -> str:
        """Return the identifier of the tab the crawl drives."""

    def navigate(self, tab_id: str, url: str) -> None:
        """Start loading a URL in a tab."""

    def get_status(self, tab_id: str) -> str:
        """Return ``complete`` or ``loading`` for a tab."""

    def page_source(self, tab_id: str) -> str:
        """Return the rendered HTML currently shown in a tab."""


class Channel(Protocol):
    """Contract for the request/response and push transport to the extractor."""

    def send(self, tab_id: str, message: Message) -> Message | None:
        """Deliver a request to the page context of a tab and return its response."""

    def subscribe(self, listener: MessageListener) -> None:
        """Register a listener for pushed messages."""

    def publish(self, message: Message) -> None:
        """Push a message to every listener."""


class SessionStore(Protocol):
    """Contract for durable session storage."""

    def load(self) -> PersistedSession:
        """Return the stored session, or an empty one."""

    def save(self, session: PersistedSession) -> None:
        """Overwrite the stored session."""


class Reporter(Protocol):
    """Contract for status, progress and result display."""

    def status(self, message: str, kind: str = STATUS_NORMAL) -> None:
        """Show a status line."""

    def progress(self, current_page: int, total_pages: int) -> None:
        """Show crawl progress."""

    def emails(self, emails: Iterable[str]) -> None:
        """Refresh the displayed email list."""


@dataclass
class CrawlState:
    """Mutable state of one crawl, owned by the loop that runs it."""

    query: str
    total_pages: int
    page_index: int = 0
    running: bool = True
    stop_requested: bool = False

    @property
    def current_page(self) -> int:
        return self.page_index + 1

    @property
    def progress(self) -> float:
        return self.current_page / self.total_pages


@dataclass
class PersistedSession:
    """Accumulated emails plus the last crawl settings."""

    emails: set[str] = field(default_factory=set)
    query: str = ""
    max_pages: str = ""
