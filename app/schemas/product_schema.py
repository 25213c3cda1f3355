# schemas/product_schema.py
from marshmallow import Schema, fields, validate, EXCLUDE

from ..utils.validation import validate_ascii


class ProductSchema(Schema):
    """Schema for creating or replacing a product. Only client-settable fields."""

    class Meta:
        unknown = EXCLUDE

    # Required fields
    category = fields.Str(required=True, validate=validate_ascii, error_messages={"required": "invalid category"})
    name = fields.Str(required=True, validate=validate_ascii, error_messages={"required": "invalid name"})
    description = fields.Str(required=True, validate=validate_ascii, error_messages={"required": "invalid description"})
    price = fields.Float(required=True, validate=validate.Range(min=0), error_messages={"required": "invalid price"})

    # Optional fields
    featured = fields.Bool()
    enabled = fields.Bool()
    sale = fields.Str(validate=validate.Length(min=1))
    keywords = fields.List(fields.Str(), validate=validate.Length(min=1))


class ProductListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    sort = fields.Str(load_default=None)
    limit = fields.Int(load_default=None, validate=validate.Range(min=1))
    offset = fields.Int(load_default=0, validate=validate.Range(min=0))
    category = fields.Str(load_default=None)
    name = fields.Str(load_default=None)
    featured = fields.Bool(load_default=None)
    enabled = fields.Bool(load_default=None)
    sale = fields.Str(load_default=None)
