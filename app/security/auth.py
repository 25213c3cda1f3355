from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, request

from ..constants.service_code import AUTHENTICATION_MESSAGES, ROLES
from ..models.vendor_model import Vendor
from ..utils.errors import AuthenticationError
from ..utils.logger import Log
from .policy import authorize

ALGORITHM = "HS256"


class Authenticator:
    """
    Credential check plus stateless bearer tokens.

    The signing secret and expiry are injected from app config at start-up.
    """

    def __init__(self):
        self.secret = None
        self.expiry_seconds = 60 * 60 * 24

    def init_app(self, app):
        self.secret = app.config["SECRET_KEY"]
        self.expiry_seconds = int(app.config.get("TOKEN_EXPIRY_TIME", self.expiry_seconds))
        app.extensions["authenticator"] = self

    def authenticate(self, username, password):
        """Return (vendor_id, token); unknown user and wrong password look the same."""
        vendor = Vendor.get_by_username(username)
        if not vendor or not Vendor.compare_password(vendor, password):
            raise AuthenticationError(AUTHENTICATION_MESSAGES["WRONG_CREDENTIALS"])

        vendor_id = str(vendor["_id"])
        return vendor_id, self.issue_token(vendor_id, vendor["account"]["role"])

    def issue_token(self, subject_id, role):
        now = datetime.now(timezone.utc)
        payload = {
            "id": str(subject_id),
            "role": role,
            "iat": now,
            "exp": now + timedelta(seconds=self.expiry_seconds),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify_token(self, token):
        try:
            data = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError(AUTHENTICATION_MESSAGES["BAD_TOKEN"])
        except jwt.InvalidTokenError:
            raise AuthenticationError(AUTHENTICATION_MESSAGES["BAD_TOKEN"])

        if data.get("role") not in (ROLES["ADMIN"], ROLES["USER"]):
            raise AuthenticationError(AUTHENTICATION_MESSAGES["BAD_TOKEN"])
        return {"id": data.get("id"), "role": data.get("role")}


authenticator = Authenticator()


def extract_token():
    """
    Bearer value from the request: JSON or url-encoded form body field, then
    query parameter, then the x-access-token header, then Authorization: Bearer.

    Multipart bodies are never parsed here: upload routes run their capacity and
    size checks before the body is read, so they take the token from the query
    string or a header.
    """
    body = request.get_json(silent=True) if request.is_json else None
    if isinstance(body, dict) and body.get("token"):
        return body["token"]
    if request.mimetype == "application/x-www-form-urlencoded" and request.form.get("token"):
        return request.form["token"]
    if request.args.get("token"):
        return request.args["token"]
    if request.headers.get("x-access-token"):
        return request.headers["x-access-token"]

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(None, 1)[1]
    return None


def current_identity():
    """Identity of the caller; no token at all means guest."""
    identity = g.get("current_user")
    if identity is not None:
        return identity

    token = extract_token()
    if token:
        identity = current_app.extensions["authenticator"].verify_token(token)
    else:
        identity = {"id": None, "role": ROLES["GUEST"]}

    g.current_user = identity
    return identity


def require_role(roles):
    """
    Route guard: resolve the caller and apply the access policy before the view
    (and before any argument parsing or storage access) runs.
    """
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            identity = current_identity()
            path_vendor_id = (request.view_args or {}).get("vendor_id")
            try:
                authorize(identity["role"], roles, path_vendor_id, identity.get("id"))
            except PermissionError:
                Log.info(
                    f"[auth.py][require_role] denied role={identity['role']} "
                    f"subject={identity.get('id')} path_vendor={path_vendor_id} endpoint={request.endpoint}"
                )
                raise
            return f(*args, **kwargs)
        return decorated
    return decorator
