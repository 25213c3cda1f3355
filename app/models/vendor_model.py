from __future__ import annotations

from typing import Any, Dict, Optional

from marshmallow import ValidationError
from pymongo.errors import DuplicateKeyError

from ..extensions import password_hasher
from ..constants.service_code import ROLES
from ..utils.logger import Log
from .base_model import BaseModel, to_object_id


CONTACT_FIELDS = (
    "name",
    "lastname",
    "shopname",
    "address",
    "phone",
    "city",
    "state",
    "country",
    "postcode",
    "email",
    "site",
)

# vendor field holding the ordered ids for each child kind
CHILD_ID_FIELDS = {
    "product": "product_ids",
    "announcement": "announcement_ids",
    "request": "request_ids",
}


def _empty_contact() -> Dict[str, Any]:
    return {field: None for field in CONTACT_FIELDS}


def _normalise_contact(contact: Dict[str, Any]) -> Dict[str, Any]:
    normalised = _empty_contact()
    for field in CONTACT_FIELDS:
        if contact.get(field) is not None:
            normalised[field] = contact[field]
    for field in ("email", "site"):
        if normalised[field]:
            normalised[field] = str(normalised[field]).lower()
    return normalised


class Vendor(BaseModel):
    """
    Vendor model (MongoDB): the tenant aggregate root.

    The account sub-document carries the credentials. The password is only ever
    stored as a bcrypt hash: every write path that touches `account.password`
    goes through `_hash_password_field`.
    """

    collection_name = "vendors"

    def __init__(self, username, password, role=ROLES["USER"], contact=None, **kwargs):
        super().__init__(**kwargs)
        self.account = {
            "username": username,
            "password_hash": password_hasher.hash(password),
            "role": role,
        }
        self.contact = _normalise_contact(contact or {})
        self.product_ids = []
        self.announcement_ids = []
        self.request_ids = []

    @classmethod
    def insert(cls, record):
        # concurrent creates that both passed username_exists land here
        try:
            return super().insert(record)
        except DuplicateKeyError as e:
            Log.info(f"[vendor_model.py][insert] duplicate username: {e}")
            raise ValidationError({"username": ["username already exists"]}) from e

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------
    @classmethod
    def get_by_username(cls, username) -> Optional[Dict[str, Any]]:
        return cls.find_one({"account.username": username})

    @classmethod
    def username_exists(cls, username) -> bool:
        return cls.count({"account.username": username}) > 0

    @staticmethod
    def compare_password(vendor: Dict[str, Any], candidate: str) -> bool:
        return password_hasher.verify(candidate, (vendor.get("account") or {}).get("password_hash"))

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    @classmethod
    def update_fields(cls, record_id, fields, **scope):
        """
        Generic partial update. A plaintext `account.password` (or a full
        `account` sub-document carrying `password`) is hashed here, and only if
        it differs from what is stored.
        """
        fields = dict(fields)
        if "account.password" in fields or "password" in (fields.get("account") or {}):
            fields = cls._hash_password_field(record_id, fields)
        return super().update_fields(record_id, fields, **scope)

    @classmethod
    def _hash_password_field(cls, record_id, fields):
        current = cls.find_by_id(record_id) or {}
        current_hash = (current.get("account") or {}).get("password_hash")

        if "account.password" in fields:
            plain = fields.pop("account.password")
            if password_hasher.needs_hash(plain, current_hash):
                fields["account.password_hash"] = password_hasher.hash(plain)
                Log.info(f"[vendor_model.py][_hash_password_field] password re-hashed for {record_id}")

        if "account" in fields and "password" in fields["account"]:
            account = dict(fields["account"])
            plain = account.pop("password")
            if password_hasher.needs_hash(plain, current_hash):
                account["password_hash"] = password_hasher.hash(plain)
                Log.info(f"[vendor_model.py][_hash_password_field] password re-hashed for {record_id}")
            else:
                account["password_hash"] = current_hash
            fields["account"] = account

        return fields

    @classmethod
    def update_account(cls, vendor_id, password, role=None) -> bool:
        """Explicit account update: the only path that changes credentials or role."""
        fields = {"account.password": password}
        if role is not None:
            fields["account.role"] = role
        return cls.update_fields(vendor_id, fields)

    @classmethod
    def update_contact(cls, vendor_id, contact) -> bool:
        return cls.update_fields(vendor_id, {"contact": _normalise_contact(contact)})

    @classmethod
    def set_child_ids(cls, vendor_id, kind, child_ids) -> bool:
        """Persist the ordered id list for one child kind."""
        field = CHILD_ID_FIELDS[kind]
        return cls.update_fields(vendor_id, {field: [to_object_id(c) for c in child_ids]})

    @staticmethod
    def child_ids(vendor: Dict[str, Any], kind) -> list:
        return list(vendor.get(CHILD_ID_FIELDS[kind]) or [])
