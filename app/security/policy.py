"""
Access policy: who may call what, and which vendor fields they may see.

Both functions are pure; they never touch storage so they can run before the
target resource is loaded.
"""
import copy

from ..constants.service_code import ROLES, AUTHENTICATION_MESSAGES
from ..utils.errors import AuthorizationError


def authorize(role, route_roles, path_vendor_id=None, subject_id=None):
    """
    Allow or raise AuthorizationError.

    A `user` must additionally be addressing its own vendor: the vendor id in the
    route path has to equal the token subject. `admin` and `guest` skip that check.
    """
    if role not in route_roles:
        raise AuthorizationError(AUTHENTICATION_MESSAGES["FORBIDDEN"])

    if role == ROLES["USER"]:
        if path_vendor_id is None or subject_id is None or str(path_vendor_id) != str(subject_id):
            raise AuthorizationError(AUTHENTICATION_MESSAGES["FORBIDDEN"])

    return True


def redact(vendor, role):
    """Strip account fields a non-admin caller must not see."""
    if vendor is None:
        return None

    if role == ROLES["ADMIN"]:
        return vendor

    redacted = copy.copy(vendor)
    account = vendor.get("account") or {}
    redacted["account"] = {
        "username": account.get("username"),
        "password_hash": account.get("password_hash"),
    }
    return redacted
