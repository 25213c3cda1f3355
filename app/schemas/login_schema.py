from marshmallow import Schema, fields, EXCLUDE

from ..utils.validation import validate_alphanumeric


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.Str(
        required=True,
        validate=validate_alphanumeric,
        error_messages={"required": "invalid username"},
        )
    password = fields.Str(
        required=True,
        load_only=True,
        validate=validate_alphanumeric,
        error_messages={"required": "invalid password"},
        )
