# app/extensions/__init__.py

from flask_cors import CORS
from .db import db
from ..security.passwords import password_hasher
from ..services.asset_store import asset_store

# Only app-aware extensions should be global
cors = CORS()

__all__ = [
    "cors",
    "db",
    "password_hasher",
    "asset_store",
]
