import logging
import sys
from typing import Any

import pytest
import requests

from dork_harvester.browsers import (
    DEFAULT_TAB,
    RequestsBrowser,
    SeleniumBrowser,
    make_retry_session,
)
from dork_harvester.errors import BrowserError, NavigationError


class FakeResponse:
    def __init__(self, *, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.RequestException("bad status")


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self._response = response
        self.calls: list[str] = []
        self.closed = False

    def get(self, url: str, **_kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        return self._response

    def close(self) -> None:
        self.closed = True


def _browser(response: FakeResponse) -> tuple[RequestsBrowser, FakeSession]:
    session = FakeSession(response)
    browser = RequestsBrowser(
        session=session,  # type: ignore[arg-type]
        timeout=5.0,
        logger=logging.getLogger("test"),
    )
    return browser, session


def test_requests_browser_loads_page_into_tab() -> None:
    browser, session = _browser(FakeResponse(text="<p>a@acme.io</p>"))
    tab = browser.active_tab()
    assert tab == DEFAULT_TAB
    browser.navigate(tab, "https://www.google.com/search?q=x&start=0")
    assert browser.get_status(tab) == "complete"
    assert browser.page_source(tab) == "<p>a@acme.io</p>"
    assert session.calls == ["https://www.google.com/search?q=x&start=0"]


def test_requests_browser_rejects_invalid_urls() -> None:
    browser, session = _browser(FakeResponse(text="<html/>"))
    with pytest.raises(NavigationError):
        browser.navigate(DEFAULT_TAB, "file:///tmp/test")
    assert session.calls == []


def test_requests_browser_wraps_http_errors_and_drops_stale_page() -> None:
    browser, _session = _browser(FakeResponse(text="old"))
    browser.navigate(DEFAULT_TAB, "https://acme.io")
    browser._session = FakeSession(FakeResponse(status_code=429))  # type: ignore[assignment]
    with pytest.raises(NavigationError):
        browser.navigate(DEFAULT_TAB, "https://acme.io/2")
    assert browser.page_source(DEFAULT_TAB) == ""
    assert browser.get_status(DEFAULT_TAB) == "complete"


def test_requests_browser_close_closes_session() -> None:
    browser, session = _browser(FakeResponse())
    browser.close()
    assert session.closed is True


def test_make_retry_session_sets_user_agent() -> None:
    session = make_retry_session("my-agent")
    assert session.headers["User-Agent"] == "my-agent"
    assert session.get_adapter("https://www.google.com").max_retries.total == 3


def test_selenium_browser_import_error_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "selenium", None)
    with pytest.raises(BrowserError):
        SeleniumBrowser(user_agent="agent", page_load_timeout=5, logger=logging.getLogger("test"))


class Driver:
    def __init__(self, ready_state: str = "complete") -> None:
        self.closed = False
        self.page_source = "<html/>"
        self.current_window_handle = "win-1"
        self.visited: list[str] = []
        self.ready_state = ready_state
        self.switch_to = self

    def window(self, handle: str) -> None:
        self.current_window_handle = handle

    def get(self, url: str) -> None:
        self.visited.append(url)

    def execute_script(self, _script: str) -> str:
        return self.ready_state

    def quit(self) -> None:
        self.closed = True


class ImmediateWait:
    def __init__(self, driver: Any, timeout: float) -> None:
        self._driver = driver
        self.timeout = timeout

    def until(self, condition: Any) -> Any:
        if not condition(self._driver):
            raise TimeoutError("timed out")
        return True


def _selenium(driver: Driver) -> SeleniumBrowser:
    browser = SeleniumBrowser.__new__(SeleniumBrowser)
    browser._driver = driver  # type: ignore[attr-defined]
    browser._logger = logging.getLogger("test")  # type: ignore[attr-defined]
    browser._wait_factory = ImmediateWait  # type: ignore[attr-defined]
    return browser


def test_selenium_browser_navigate_status_and_close_on_stub_driver() -> None:
    driver = Driver()
    browser = _selenium(driver)

    tab = browser.active_tab()
    browser.navigate(tab, "https://acme.io")
    assert driver.visited == ["https://acme.io"]
    assert browser.get_status(tab) == "complete"
    assert browser.page_source(tab) == "<html/>"
    with pytest.raises(NavigationError):
        browser.navigate(tab, "file:///tmp/nope")
    browser.close()
    assert driver.closed is True


def test_selenium_browser_switches_tabs_and_reports_loading() -> None:
    driver = Driver(ready_state="interactive")
    browser = _selenium(driver)
    assert browser.get_status("win-2") == "loading"
    assert driver.current_window_handle == "win-2"


def test_selenium_browser_wait_for_load() -> None:
    browser = _selenium(Driver())
    browser.wait_for_load("win-1", 5)

    slow = _selenium(Driver(ready_state="loading"))
    with pytest.raises(NavigationError):
        slow.wait_for_load("win-1", 5)
