"""Browser surfaces that load result pages into tabs."""

from __future__ import annotations

import logging
from typing import Any

from requests import Session
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException
from urllib3.util.retry import Retry

from .errors import BrowserError, NavigationError
from .models import TAB_COMPLETE, TAB_LOADING
from .validation import is_supported_url

DEFAULT_TAB = "tab-0"


def make_retry_session(user_agent: str) -> Session:
    """Create requests session with retry/backoff defaults."""
    session = Session()
    session.headers.update({"User-Agent": user_agent, "Accept-Language": "en-US,en;q=0.8"})
    retry = Retry(
        total=3,
        backoff_factor=0.6,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset({"GET"}),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class RequestsBrowser:
    """Single-tab surface backed by plain HTTP requests.

    Pages are fetched synchronously, so a tab is ``complete`` as soon as
    :meth:`navigate` returns. No script runs, which means only server-rendered
    markup is visible to the extractor.
    """

    def __init__(self, *, session: Session, timeout: float, logger: logging.Logger) -> None:
        self._session = session
        self._timeout = timeout
        self._logger = logger
        self._pages: dict[str, str] = {}
        self._status: dict[str, str] = {}

    def active_tab(self) -> str:
        return DEFAULT_TAB

    def navigate(self, tab_id: str, url: str) -> None:
        if not is_supported_url(url):
            raise NavigationError(f"Unsupported URL: {url}")
        self._status[tab_id] = TAB_LOADING
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except RequestException as exc:
            self._pages.pop(tab_id, None)
            self._status[tab_id] = TAB_COMPLETE
            raise NavigationError(f"Failed to load {url}: {exc}") from exc
        self._logger.debug("Loaded %s into %s (%d bytes)", url, tab_id, len(response.text))
        self._pages[tab_id] = str(response.text)
        self._status[tab_id] = TAB_COMPLETE

    def get_status(self, tab_id: str) -> str:
        return self._status.get(tab_id, TAB_COMPLETE)

    def page_source(self, tab_id: str) -> str:
        return self._pages.get(tab_id, "")

    def close(self) -> None:
        self._session.close()


class SeleniumBrowser:
    """Selenium surface with one isolated headless Chrome instance."""

    def __init__(
        self,
        *,
        user_agent: str,
        page_load_timeout: float,
        logger: logging.Logger,
        headless: bool = True,
    ) -> None:
        try:
            from selenium import webdriver
            from selenium.webdriver.chrome.service import (
                Service as ChromeService,
            )
            from selenium.webdriver.support.ui import WebDriverWait
            from webdriver_manager.chrome import ChromeDriverManager
        except ImportError as exc:  # pragma: no cover - exercised only when selenium requested
            raise BrowserError(
                "Selenium dependencies are not installed. Use pip install .[selenium]."
            ) from exc

        self._logger = logger
        self._wait_factory: Any = WebDriverWait
        options = webdriver.ChromeOptions()
        if headless:
            options.add_argument("--headless=new")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument(f"user-agent={user_agent}")
        try:
            service = ChromeService(ChromeDriverManager().install())
            self._driver: Any = webdriver.Chrome(service=service, options=options)
            self._driver.set_page_load_timeout(page_load_timeout)
        except Exception as exc:  # pragma: no cover - integration behavior
            raise BrowserError(f"Failed to start Selenium driver: {exc}") from exc

    def active_tab(self) -> str:
        return str(self._driver.current_window_handle)

    def _focus(self, tab_id: str) -> None:
        if self._driver.current_window_handle != tab_id:
            self._driver.switch_to.window(tab_id)

    def navigate(self, tab_id: str, url: str) -> None:
        if not is_supported_url(url):
            raise NavigationError(f"Unsupported URL: {url}")
        try:
            self._focus(tab_id)
            self._driver.get(url)
        except Exception as exc:
            raise NavigationError(f"Failed to load {url}: {exc}") from exc

    def get_status(self, tab_id: str) -> str:
        self._focus(tab_id)
        state = self._driver.execute_script("return document.readyState")
        return TAB_COMPLETE if state == "complete" else TAB_LOADING

    def wait_for_load(self, tab_id: str, timeout: float) -> None:
        """Block until the tab reports ``document.readyState == "complete"``."""
        self._focus(tab_id)
        try:
            self._wait_factory(self._driver, timeout).until(
                lambda driver: driver.execute_script("return document.readyState") == "complete"
            )
        except Exception as exc:
            raise NavigationError(f"Tab {tab_id} did not finish loading: {exc}") from exc

    def page_source(self, tab_id: str) -> str:
        self._focus(tab_id)
        return str(self._driver.page_source)

    def close(self) -> None:
        try:
            self._driver.quit()
        except Exception:  # pragma: no cover - integration behavior
            return None
