"""Pure extraction helpers: email matching, false-positive filtering and page scanning."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from urllib.parse import unquote

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

EMAIL_REGEX = re.compile(r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b")
EMAIL_SHAPE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAILTO_REGEX = re.compile(r"mailto:([^?&]+)", re.IGNORECASE)
MAX_EMAIL_LENGTH = 253

RESULT_CONTAINER_SELECTOR = "div[data-header-feature], .g, .MjjYud"
SNIPPET_SELECTOR = ".VwiC3b, .s3v9rd, .hgKElc, .IsZvec"
TEXT_ELEMENT_SELECTOR = "p, div, span, td, th, li"

FALSE_POSITIVES = frozenset(
    {
        "example@example.com",
        "user@example.com",
        "admin@localhost",
        "test@test.com",
        "no-reply@google.com",
        "noreply@google.com",
    }
)
PLACEHOLDER_DOMAINS = frozenset({"example.com", "test.com", "localhost", "domain.com"})

_HIDDEN_TAGS = frozenset({"script", "style", "noscript", "template", "head"})
_BLOCK_TAGS = frozenset(
    {"br", "div", "p", "li", "ul", "ol", "table", "tr", "td", "th"}
    | {f"h{level}" for level in range(1, 7)}
)
_HIDDEN_STYLE = re.compile(r"(display\s*:\s*none|visibility\s*:\s*hidden)", re.IGNORECASE)


def extract_emails(text: str) -> set[str]:
    """Return normalized emails discovered in plain text."""
    return {match.group(0).lower() for match in EMAIL_REGEX.finditer(text or "")}


def is_valid_email(email: str) -> bool:
    """Reject placeholder addresses and strings that are not shaped like an email."""
    lowered = email.lower()
    if lowered in FALSE_POSITIVES:
        return False
    _, _, domain = lowered.partition("@")
    if domain in PLACEHOLDER_DOMAINS:
        return False
    return bool(EMAIL_SHAPE.match(lowered)) and len(lowered) <= MAX_EMAIL_LENGTH


def mailto_address(href: str) -> str | None:
    """Decode the address part of a mailto link, dropping any query string."""
    match = MAILTO_REGEX.search(href or "")
    if match is None:
        return None
    address = unquote(match.group(1)).strip().lower()
    if "@" not in address:
        return None
    return address


def _hidden(node: Tag) -> bool:
    if node.name in _HIDDEN_TAGS or node.has_attr("hidden"):
        return True
    if str(node.get("aria-hidden", "")).lower() == "true":
        return True
    return bool(_HIDDEN_STYLE.search(str(node.get("style", ""))))


def is_visible(element: Tag) -> bool:
    """Return False when the element or an ancestor is removed from layout."""
    node: Tag | None = element
    while node is not None and node.name != "[document]":
        if _hidden(node):
            return False
        node = node.parent
    return True


def _collect_text(element: Tag, parts: list[str]) -> None:
    for child in element.children:
        if isinstance(child, Tag):
            if _hidden(child):
                continue
            block = child.name in _BLOCK_TAGS
            if block:
                parts.append(" ")
            _collect_text(child, parts)
            if block:
                parts.append(" ")
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            parts.append(str(child))


def _text(element: Tag) -> str:
    """Approximate innerText: inline markup joins, block elements are set apart,
    and hidden subtrees contribute nothing.
    """
    parts: list[str] = []
    _collect_text(element, parts)
    return "".join(parts)


def _matches(elements: Iterable[Tag]) -> Iterator[str]:
    for element in elements:
        yield from extract_emails(_text(element))


def scan_result_containers(soup: BeautifulSoup) -> set[str]:
    """Scan primary result blocks, including mailto link targets."""
    found: set[str] = set()
    for container in soup.select(RESULT_CONTAINER_SELECTOR):
        found.update(extract_emails(_text(container)))
        for link in container.select('a[href*="mailto:"]'):
            if not is_visible(link):
                continue
            address = mailto_address(str(link.get("href", "")))
            if address:
                found.add(address)
    return found


def scan_snippets(soup: BeautifulSoup) -> set[str]:
    """Scan result summary regions."""
    return set(_matches(soup.select(SNIPPET_SELECTOR)))


def scan_visible_text(soup: BeautifulSoup) -> set[str]:
    """Scan every visible text-bearing element; the noisiest pass, always filtered."""
    visible = (element for element in soup.select(TEXT_ELEMENT_SELECTOR) if is_visible(element))
    return {email for email in _matches(visible) if is_valid_email(email)}


def scan_page(html: str, *, filter_all_passes: bool = True) -> set[str]:
    """Run all three passes over a page and return the merged email set.

    With ``filter_all_passes`` disabled only the visible-text pass is filtered,
    which mirrors the behaviour of the browser extension this tool grew out of.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    targeted = scan_result_containers(soup) | scan_snippets(soup)
    if filter_all_passes:
        targeted = {email for email in targeted if is_valid_email(email)}
    return targeted | scan_visible_text(soup)
