"""Durable session store backed by a JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import PersistenceError
from .models import PersistedSession

KEY_EMAILS = "extractedEmails"
KEY_QUERY = "dork"
KEY_MAX_PAGES = "maxPages"


def session_to_payload(session: PersistedSession) -> dict[str, Any]:
    """Serialize a session using the extension's storage keys."""
    return {
        KEY_EMAILS: sorted(session.emails),
        KEY_QUERY: session.query,
        KEY_MAX_PAGES: session.max_pages,
    }


def session_from_payload(payload: Any) -> PersistedSession:
    """Parse a stored payload; missing keys fall back to empty values."""
    if not isinstance(payload, dict):
        raise PersistenceError("Session payload must be a JSON object.")
    emails = payload.get(KEY_EMAILS) or []
    if not isinstance(emails, list) or not all(isinstance(item, str) for item in emails):
        raise PersistenceError(f"{KEY_EMAILS} must be a list of strings.")
    max_pages = payload.get(KEY_MAX_PAGES)
    return PersistedSession(
        emails={email.lower() for email in emails},
        query=str(payload.get(KEY_QUERY) or ""),
        max_pages="" if max_pages is None else str(max_pages),
    )


class JsonSessionStore:
    """Key-value session store kept in a single UTF-8 JSON file."""

    def __init__(self, path: str, *, logger: logging.Logger) -> None:
        self._path = Path(path)
        self._logger = logger

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> PersistedSession:
        if not self._path.exists():
            return PersistedSession()
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Cannot read session from {self._path}: {exc}") from exc
        return session_from_payload(payload)

    def save(self, session: PersistedSession) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(session_to_payload(session), indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write session to {self._path}: {exc}") from exc
        self._logger.debug("Saved %d emails to %s", len(session.emails), self._path)
