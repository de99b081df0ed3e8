"""Validation and runtime guardrails."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from .errors import ConfigError, ValidationError

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
SUPPORTED_BROWSERS = frozenset({"requests", "selenium"})


def is_supported_url(url: str) -> bool:
    """Allow only absolute HTTP(S) URLs with a hostname."""
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def parse_page_count(value: int | str | None) -> int:
    """Parse a page count the way the control surface reads its input field.

    Strings are read up to the first non-digit, so ``"3 pages"`` is 3.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid page count: {value!r}")
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(value or "")
    if match is None:
        raise ValidationError(f"Invalid page count: {value!r}")
    return int(match.group(1))


def validate_start_request(query: str | None, page_count: int | str | None) -> tuple[str, int]:
    """Return the cleaned (query, page_count) pair or raise ValidationError."""
    cleaned = (query or "").strip()
    pages = parse_page_count(page_count)
    if not cleaned or pages < 1:
        raise ValidationError("Please enter valid dork and max pages")
    return cleaned, pages


def validate_runtime_constraints(
    *,
    search_endpoint: str,
    browser: str,
    page_delay: float,
    error_delay: float,
    settle_delay: float,
    poll_interval: float,
    navigation_timeout: float,
    results_per_page: int,
) -> None:
    """Validate CLI/runtime configuration and raise ConfigError on invalid values."""
    if not is_supported_url(search_endpoint):
        raise ConfigError("--endpoint must be an absolute http(s) URL.")
    if browser not in SUPPORTED_BROWSERS:
        raise ConfigError(f"--browser must be one of: {', '.join(sorted(SUPPORTED_BROWSERS))}.")
    if page_delay < 0 or error_delay < 0 or settle_delay < 0:
        raise ConfigError("--page-delay, --error-delay and --settle-delay must be >= 0.")
    if poll_interval <= 0:
        raise ConfigError("poll interval must be > 0.")
    if navigation_timeout < poll_interval:
        raise ConfigError("--navigation-timeout cannot be shorter than the poll interval.")
    if results_per_page < 1:
        raise ConfigError("results per page must be >= 1.")
