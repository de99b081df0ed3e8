"""In-process request/response and push channel between controller and extractor."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .errors import MessagingError
from .models import Message, MessageListener

ACTION_EXTRACT = "extractEmails"
TYPE_EMAILS_EXTRACTED = "emails_extracted"

RequestHandler = Callable[[str, Message], "Message | None"]


class LocalChannel:
    """Route requests to the page-context handler and fan pushed messages out.

    A request gets at most one response. A handler that returns ``None`` means
    nobody answered, which the sender sees as ``None``.
    """

    def __init__(self, *, logger: logging.Logger) -> None:
        self._logger = logger
        self._handler: RequestHandler | None = None
        self._listeners: list[MessageListener] = []

    def register_handler(self, handler: RequestHandler) -> None:
        self._handler = handler

    def send(self, tab_id: str, message: Message) -> Message | None:
        if self._handler is None:
            raise MessagingError(f"No page context is listening in {tab_id}.")
        try:
            return self._handler(tab_id, message)
        except Exception as exc:
            raise MessagingError(f"Request {message!r} to {tab_id} failed: {exc}") from exc

    def subscribe(self, listener: MessageListener) -> None:
        self._listeners.append(listener)

    def publish(self, message: Message) -> None:
        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception as exc:
                self._logger.warning("Listener failed for %s: %s", message.get("type"), exc)
