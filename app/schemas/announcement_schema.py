# schemas/announcement_schema.py
from marshmallow import Schema, fields, validate, EXCLUDE

from ..utils.validation import validate_ascii


class AnnouncementSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    announcement_text = fields.Str(required=True, validate=validate_ascii,
                                   error_messages={"required": "invalid announcement text"})
    featured = fields.Bool()


class AnnouncementListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    sort = fields.Str(load_default=None)
    limit = fields.Int(load_default=None, validate=validate.Range(min=1))
    offset = fields.Int(load_default=0, validate=validate.Range(min=0))
    featured = fields.Bool(load_default=None)
