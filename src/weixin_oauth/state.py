"""Anti-forgery state tokens carried by cookie and redirect parameter.

The plaintext state travels through the provider redirect; the cookie only
ever holds a one-way digest of it, so nothing has to be kept server-side.
"""

import hashlib
import hmac
import secrets
import time


def generate_state() -> str:
    """Create a new state token for one login attempt.

    Combines a microsecond clock component (unique per call on one host)
    with a random suffix from the OS entropy source.

    Returns:
        Opaque state string (hex characters only)
    """
    unique = format(time.time_ns() // 1000, "x")
    return unique + secrets.token_hex(16)


def derive_cookie_value(state: str) -> str:
    """Derive the cookie content for a state token.

    Args:
        state: Plaintext state

    Returns:
        SHA-256 hex digest of the state
    """
    return hashlib.sha256(state.encode("utf-8")).hexdigest()


def verify_state(cookie_value: str | None, state_param: str | None) -> bool:
    """Check a callback state against the state cookie.

    Args:
        cookie_value: Value of the state cookie (None if absent)
        state_param: `state` query parameter of the callback

    Returns:
        True only if the cookie holds the digest of state_param
    """
    if not cookie_value or not state_param:
        return False

    expected = derive_cookie_value(state_param)
    return hmac.compare_digest(cookie_value.encode("utf-8"), expected.encode("utf-8"))
