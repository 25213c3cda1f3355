import re

from bson import ObjectId
from marshmallow import ValidationError


def validate_objectid(value):
    if not ObjectId.is_valid(value):
        raise ValidationError(f"{value} is not a valid ID. Ensure you add a valid Item ID.")

def validate_alphanumeric(value):
    if not value or not value.isascii() or not value.isalnum():
        raise ValidationError("Must be a non-empty alphanumeric value.")

def validate_alpha(value):
    if not value or not value.isascii() or not value.isalpha():
        raise ValidationError("Must contain letters only.")

def validate_numeric(value):
    if not re.fullmatch(r"[0-9]+", value or ""):
        raise ValidationError("Must contain digits only.")

def validate_ascii(value):
    if not value or not value.isascii():
        raise ValidationError("Must be a non-empty ASCII value.")

def validate_path_ids(**ids):
    """
    Validate ObjectId path parameters, aggregating every bad one into a single
    ValidationError (e.g. {"vendor_id": ["invalid vendor"]}).
    """
    errors = {}
    for name, value in ids.items():
        if not ObjectId.is_valid(str(value)):
            label = name[:-3] if name.endswith("_id") else name
            errors[name] = [f"invalid {label}"]
    if errors:
        raise ValidationError(errors)
