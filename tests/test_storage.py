import json
import logging
from pathlib import Path

import pytest

from dork_harvester.errors import PersistenceError
from dork_harvester.models import PersistedSession
from dork_harvester.storage import JsonSessionStore, session_from_payload


def _store(path: Path) -> JsonSessionStore:
    return JsonSessionStore(str(path), logger=logging.getLogger("test"))


def test_load_missing_file_returns_empty_session(tmp_path: Path) -> None:
    session = _store(tmp_path / "none.json").load()
    assert session == PersistedSession()


def test_save_uses_extension_keys(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "session.json"
    _store(path).save(
        PersistedSession(emails={"b@acme.io", "a@acme.io"}, query="site:acme.io", max_pages="3")
    )
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == {
        "extractedEmails": ["a@acme.io", "b@acme.io"],
        "dork": "site:acme.io",
        "maxPages": "3",
    }
    assert _store(path).load().max_pages == "3"


def test_load_corrupt_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        _store(path).load()


def test_payload_validation() -> None:
    with pytest.raises(PersistenceError):
        session_from_payload(["a@acme.io"])
    with pytest.raises(PersistenceError):
        session_from_payload({"extractedEmails": [1, 2]})
    session = session_from_payload({"extractedEmails": ["A@Acme.io"], "maxPages": 4})
    assert session.emails == {"a@acme.io"}
    assert session.max_pages == "4"
    assert session.query == ""


def test_save_failure_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(PersistenceError):
        _store(blocker / "session.json").save(PersistedSession())
