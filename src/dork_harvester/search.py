"""Search result URL construction."""

from __future__ import annotations

from urllib.parse import quote

from .config import DEFAULT_RESULTS_PER_PAGE, DEFAULT_SEARCH_ENDPOINT

# Characters encodeURIComponent leaves alone beyond quote()'s own unreserved set.
_URI_COMPONENT_SAFE = "!*'()"


def encode_query(query: str) -> str:
    """Percent-encode a dork the way browsers encode a URI component."""
    return quote(query, safe=_URI_COMPONENT_SAFE)


def page_offset(page_index: int, results_per_page: int = DEFAULT_RESULTS_PER_PAGE) -> int:
    """Return the ``start`` offset for a zero-based result page."""
    if page_index < 0:
        raise ValueError("page_index must be >= 0")
    return page_index * results_per_page


def build_search_url(
    query: str,
    page_index: int,
    *,
    endpoint: str = DEFAULT_SEARCH_ENDPOINT,
    results_per_page: int = DEFAULT_RESULTS_PER_PAGE,
) -> str:
    """Build the results URL for one page of a dork."""
    start = page_offset(page_index, results_per_page)
    return f"{endpoint.rstrip('/')}/search?q={encode_query(query)}&start={start}"
