import logging

import pytest

from dork_harvester.errors import MessagingError
from dork_harvester.messaging import LocalChannel


def _channel() -> LocalChannel:
    return LocalChannel(logger=logging.getLogger("test"))


def test_send_routes_to_registered_handler() -> None:
    channel = _channel()
    seen: list[tuple[str, dict[str, object]]] = []

    def handler(tab_id: str, message: dict[str, object]) -> dict[str, object]:
        seen.append((tab_id, message))
        return {"success": True, "emails": []}

    channel.register_handler(handler)
    assert channel.send("tab-0", {"action": "extractEmails"}) == {"success": True, "emails": []}
    assert seen == [("tab-0", {"action": "extractEmails"})]


def test_send_without_listener_raises() -> None:
    with pytest.raises(MessagingError):
        _channel().send("tab-0", {"action": "extractEmails"})


def test_send_wraps_handler_failures() -> None:
    channel = _channel()

    def handler(_tab_id: str, _message: dict[str, object]) -> None:
        raise RuntimeError("page context gone")

    channel.register_handler(handler)
    with pytest.raises(MessagingError, match="page context gone"):
        channel.send("tab-0", {"action": "extractEmails"})


def test_publish_reaches_all_listeners_even_if_one_fails() -> None:
    channel = _channel()
    received: list[dict[str, object]] = []

    def broken(_message: dict[str, object]) -> None:
        raise ValueError("boom")

    channel.subscribe(broken)
    channel.subscribe(received.append)
    channel.publish({"type": "emails_extracted", "emails": ["a@acme.io"]})
    assert received == [{"type": "emails_extracted", "emails": ["a@acme.io"]}]
