import pytest

from app.security.policy import authorize, redact
from app.utils.errors import AuthorizationError

VENDOR_ID = "5f1d7f3e9b1e8a3c4d2b1a00"
OTHER_ID = "5f1d7f3e9b1e8a3c4d2b1a01"


def test_admin_may_address_any_vendor():
    assert authorize("admin", ["admin", "user"], VENDOR_ID, OTHER_ID)


def test_user_may_address_own_vendor_only():
    assert authorize("user", ["admin", "user"], VENDOR_ID, VENDOR_ID)
    with pytest.raises(AuthorizationError):
        authorize("user", ["admin", "user"], VENDOR_ID, OTHER_ID)


def test_user_without_vendor_in_path_is_denied():
    with pytest.raises(AuthorizationError):
        authorize("user", ["admin", "user"], None, VENDOR_ID)


def test_role_outside_route_roles_is_denied():
    with pytest.raises(AuthorizationError):
        authorize("guest", ["admin", "user"], VENDOR_ID, None)
    with pytest.raises(AuthorizationError):
        authorize("user", ["admin"], VENDOR_ID, VENDOR_ID)


def test_guest_skips_ownership_check():
    assert authorize("guest", ["admin", "user", "guest"], VENDOR_ID, None)


def test_authorization_error_is_a_permission_error():
    with pytest.raises(PermissionError):
        authorize("guest", ["admin"])


def test_redact_keeps_full_record_for_admin():
    vendor = {"_id": VENDOR_ID, "account": {"username": "a", "password_hash": "h", "role": "user"}}
    assert redact(vendor, "admin") is vendor


def test_redact_reduces_account_for_user_and_leaves_source_untouched():
    vendor = {
        "_id": VENDOR_ID,
        "account": {"username": "a", "password_hash": "h", "role": "user"},
        "contact": {"email": "a@example.com"},
    }
    redacted = redact(vendor, "user")
    assert redacted["account"] == {"username": "a", "password_hash": "h"}
    assert redacted["contact"] == vendor["contact"]
    assert vendor["account"]["role"] == "user"


def test_redact_none():
    assert redact(None, "user") is None
