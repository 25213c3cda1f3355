# schemas/request_schema.py
from marshmallow import Schema, fields, validate, EXCLUDE

from ..constants.service_code import REQUEST_STATUSES
from ..utils.validation import validate_ascii, validate_numeric, validate_objectid


class RequestCreateSchema(Schema):
    """Customer request; `product` is the id of one of the vendor's products."""

    class Meta:
        unknown = EXCLUDE

    product = fields.Str(required=True, validate=validate_objectid,
                         error_messages={"required": "invalid product"})
    name = fields.Str(required=True, validate=validate_ascii, error_messages={"required": "invalid request name"})
    email = fields.Email(required=True, error_messages={"required": "invalid request email"})
    phone = fields.Str(required=True, validate=validate_numeric, error_messages={"required": "invalid request phone"})
    notes = fields.Str(required=True, validate=validate_ascii, error_messages={"required": "invalid request notes"})


class RequestUpdateSchema(Schema):
    """Request update; the product reference is fixed at creation."""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate_ascii, error_messages={"required": "invalid request name"})
    email = fields.Email(required=True, error_messages={"required": "invalid request email"})
    phone = fields.Str(required=True, validate=validate_numeric, error_messages={"required": "invalid request phone"})
    notes = fields.Str(required=True, validate=validate_ascii, error_messages={"required": "invalid request notes"})
    status = fields.Str(required=True, validate=validate.OneOf(REQUEST_STATUSES),
                        error_messages={"required": "invalid request status"})


class RequestListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    sort = fields.Str(load_default=None)
    limit = fields.Int(load_default=None, validate=validate.Range(min=1))
    offset = fields.Int(load_default=0, validate=validate.Range(min=0))
    status = fields.Str(load_default=None, validate=validate.OneOf(REQUEST_STATUSES))
    product = fields.Str(load_default=None, validate=validate_objectid)
