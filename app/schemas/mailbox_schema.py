from marshmallow import Schema, fields, validate, EXCLUDE

from ..utils.validation import validate_ascii, validate_numeric


class MailboxMessageSchema(Schema):
    """Contact message relayed to a vendor's mailbox."""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate_ascii, error_messages={"required": "invalid contact name"})
    lastname = fields.Str(required=True, validate=validate_ascii, error_messages={"required": "invalid contact lastname"})
    email = fields.Email(required=True, error_messages={"required": "invalid contact email"})
    text = fields.Str(required=True, validate=[validate_ascii, validate.Length(max=5000)],
                      error_messages={"required": "invalid mail text"})
    phone = fields.Str(validate=validate_numeric, error_messages={"invalid": "invalid contact phone"})
