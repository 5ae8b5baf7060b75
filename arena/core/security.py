"""Signed session cookie for identifying the player (base64(user_id:timestamp).hmac)."""
import base64
import hashlib
import hmac
import time

from arena.core.config import get_settings


def _key() -> bytes:
    return get_settings().secret_key.encode("utf-8")


def _sign_payload(payload: bytes) -> str:
    sig = hmac.new(_key(), payload, hashlib.sha256).hexdigest()
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=") + "." + sig


def _verify_sig(payload: bytes, sig: str) -> bool:
    expected = hmac.new(_key(), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, sig)


def create_session_token(user_id: str, issued_at: int | None = None) -> str:
    """Create a signed token for the user (auth cookie value)."""
    ts = int(time.time()) if issued_at is None else issued_at
    payload = f"{user_id}:{ts}".encode("utf-8")
    return _sign_payload(payload)


def verify_session_token(token: str | None) -> str | None:
    """Verify signed token and return user_id if valid and unexpired; None otherwise."""
    if not token or "." not in token:
        return None
    try:
        encoded, sig = token.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not _verify_sig(payload, sig):
            return None
        # user ids may contain ':'; the timestamp is always the last field
        user_id, ts = payload.decode("utf-8").rsplit(":", 1)
        if abs(time.time() - int(ts)) > get_settings().auth_cookie_max_age:
            return None
        return user_id or None
    except (ValueError, UnicodeDecodeError):
        return None
