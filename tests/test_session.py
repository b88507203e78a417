import json

import pytest

from budget_dashboard.session import (
    LOGGED_IN,
    LOGGED_OUT,
    SESSION_RESTORED,
    SessionGate,
    TokenStorage,
)


def test_token_storage_round_trip(tmp_path):
    storage = TokenStorage(tmp_path / "state" / "session.json")
    assert storage.load_token() is None

    storage.save_token("abc")
    assert storage.load_token() == "abc"
    assert json.loads((tmp_path / "state" / "session.json").read_text()) == {"access_token": "abc"}

    storage.clear_token()
    assert storage.load_token() is None


def test_token_storage_ignores_unreadable_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("not json")
    assert TokenStorage(path).load_token() is None


def test_clear_token_keeps_other_state(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"access_token": "abc", "theme": "dark"}))
    TokenStorage(path).clear_token()
    assert json.loads(path.read_text()) == {"theme": "dark"}


def test_restore_session_without_token(gate):
    assert gate.restore_session() is False
    assert not gate.is_authenticated


def test_restore_session_ignores_blank_token(token_storage):
    token_storage.save_token("   ")
    gate = SessionGate(token_storage)
    assert gate.restore_session() is False
    assert not gate.is_authenticated


def test_restore_session_with_token(token_storage):
    token_storage.save_token("persisted")
    gate = SessionGate(token_storage)
    events = []
    gate.subscribe(events.append)

    assert gate.restore_session() is True
    assert gate.token == "persisted"
    assert [e.name for e in events] == [SESSION_RESTORED]


def test_login_persists_token(gate, token_storage):
    events = []
    gate.subscribe(events.append)

    gate.login("  secret  ")

    assert gate.is_authenticated
    assert gate.token == "secret"
    assert token_storage.load_token() == "secret"
    assert [e.name for e in events] == [LOGGED_IN]


def test_login_rejects_empty_token(gate):
    with pytest.raises(ValueError):
        gate.login("")
    assert not gate.is_authenticated


def test_logout_erases_token(gate, token_storage):
    gate.login("secret")
    events = []
    gate.subscribe(events.append)

    gate.logout()

    assert not gate.is_authenticated
    assert token_storage.load_token() is None
    assert events[0].name == LOGGED_OUT
    assert events[0].payload == {"was_authenticated": True}


def test_unsubscribe_stops_events(gate):
    events = []
    unsubscribe = gate.subscribe(events.append)
    unsubscribe()
    gate.login("secret")
    assert events == []


def test_auth_headers(gate):
    assert gate.auth_headers() == {"Content-Type": "application/json"}
    gate.login("secret")
    assert gate.auth_headers()["Authorization"] == "Bearer secret"
