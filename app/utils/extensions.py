# app/utils/extensions.py
import os

from flask import g, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .logger import Log


def on_authenticate_breach(request_limit):
    """Flask-Limiter breach hook: one warning line per rejected request."""
    identity = g.get("current_user") or {}
    Log.warning(
        f"[extensions.py][rate_limit][ip:{get_remote_address()}] "
        f"{request.method} {request.path} over {getattr(request_limit, 'limit', '?')} "
        f"(key={getattr(request_limit, 'key', '?')}, subject={identity.get('id') or 'anonymous'})"
    )


# no default limits: only routes that opt in (authenticate) are throttled
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI", "memory://"),
    on_breach=on_authenticate_breach,
)
