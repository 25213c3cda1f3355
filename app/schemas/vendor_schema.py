# schemas/vendor_schema.py
from marshmallow import Schema, fields, validate, EXCLUDE

from ..constants.service_code import ACCOUNT_ROLES
from ..utils.validation import validate_alphanumeric, validate_numeric, validate_alpha


class ContactSchema(Schema):
    """Schema for replacing a vendor's contact."""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "invalid contact name"})
    lastname = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "invalid contact lastname"})
    shopname = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "invalid contact shopname"})
    address = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "invalid contact address"})
    phone = fields.Str(required=True, validate=validate_numeric, error_messages={"required": "invalid contact phone"})
    city = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "invalid contact city"})
    state = fields.Str(required=True, validate=validate_alpha, error_messages={"required": "invalid contact state"})
    country = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "invalid contact country"})
    postcode = fields.Str(required=True, validate=validate_numeric, error_messages={"required": "invalid contact postcode"})

    # optional
    email = fields.Email(allow_none=True, error_messages={"invalid": "invalid contact email"})
    site = fields.Url(allow_none=True, error_messages={"invalid": "invalid contact site"})


class VendorCreateSchema(Schema):
    """Schema for creating a vendor (admin only)."""

    class Meta:
        unknown = EXCLUDE

    username = fields.Str(required=True, validate=validate_alphanumeric, error_messages={"required": "invalid username"})
    password = fields.Str(required=True, load_only=True, validate=validate_alphanumeric,
                          error_messages={"required": "invalid password"})
    role = fields.Str(required=True, validate=validate.OneOf(ACCOUNT_ROLES), error_messages={"required": "invalid role"})
    contact = fields.Nested(ContactSchema(partial=True), allow_none=True)


class AccountUpdateSchema(Schema):
    """
    Account update: password is required; role is honoured for admins only.
    The username can never be changed.
    """

    class Meta:
        unknown = EXCLUDE

    password = fields.Str(required=True, load_only=True, validate=validate_alphanumeric,
                          error_messages={"required": "invalid password"})
    role = fields.Str(validate=validate.OneOf(ACCOUNT_ROLES), error_messages={"invalid": "invalid role"})


class VendorListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    sort = fields.Str(load_default=None)
    limit = fields.Int(load_default=None, validate=validate.Range(min=1))
    offset = fields.Int(load_default=0, validate=validate.Range(min=0))
    username = fields.Str(load_default=None)
    role = fields.Str(load_default=None, validate=validate.OneOf(ACCOUNT_ROLES))
