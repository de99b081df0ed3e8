import pytest

from dork_harvester.search import build_search_url, encode_query, page_offset


def test_build_search_url_encodes_query_and_offset() -> None:
    url = build_search_url("foo bar", 2)
    assert "q=foo%20bar" in url
    assert "start=20" in url
    assert url == "https://www.google.com/search?q=foo%20bar&start=20"


def test_first_page_starts_at_zero() -> None:
    assert build_search_url("x", 0).endswith("&start=0")


def test_encode_query_matches_uri_component_rules() -> None:
    assert encode_query('site:acme.io "contact"') == "site%3Aacme.io%20%22contact%22"
    assert encode_query("a&b=c/d") == "a%26b%3Dc%2Fd"
    assert encode_query("keep-_.!~*'()") == "keep-_.!~*'()"


def test_custom_endpoint_and_page_size() -> None:
    url = build_search_url("q", 3, endpoint="https://search.local/", results_per_page=25)
    assert url == "https://search.local/search?q=q&start=75"


def test_page_offset_rejects_negative_index() -> None:
    with pytest.raises(ValueError):
        page_offset(-1)
