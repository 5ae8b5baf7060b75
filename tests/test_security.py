"""Tests for the signed session cookie."""

import time

from arena.core.security import create_session_token, verify_session_token


def test_round_trip():
    token = create_session_token("user-42")
    assert verify_session_token(token) == "user-42"


def test_user_id_with_colon():
    assert verify_session_token(create_session_token("team:alpha")) == "team:alpha"


def test_tampered_signature_rejected():
    token = create_session_token("user-42")
    encoded, sig = token.rsplit(".", 1)
    forged = encoded + "." + ("0" if sig[0] != "0" else "1") + sig[1:]
    assert verify_session_token(forged) is None


def test_expired_token_rejected():
    issued = int(time.time()) - 60 * 60 * 24 * 30
    assert verify_session_token(create_session_token("user-42", issued_at=issued)) is None


def test_garbage_rejected():
    assert verify_session_token(None) is None
    assert verify_session_token("") is None
    assert verify_session_token("no-dot-here") is None
    assert verify_session_token("%%%.abc") is None
