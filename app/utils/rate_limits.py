# app/utils/rate_limits.py

from flask import request, current_app

from ..utils.extensions import limiter, get_remote_address


# ---------- KEY FUNCTIONS ----------

def _get_request_data():
    """Safely get JSON or form data as a dict."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form or request.values
    return data or {}


def login_key_func():
    """
    Rate-limit per username where possible, else fall back to IP.
    Good for the unauthenticated authenticate endpoint.
    """
    username = _get_request_data().get("username")
    if username:
        return f"login:{str(username).lower()[:100]}"
    return get_remote_address()


# ---------- LIMITERS ----------

def authenticate_limiter(f):
    return limiter.limit(
        lambda: current_app.config.get("AUTHENTICATE_RATE_LIMIT", "10 per minute"),
        key_func=login_key_func,
        error_message="Too many login attempts, please try again later.",
    )(f)
