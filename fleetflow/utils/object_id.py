# fleetflow/utils/object_id.py
from bson import ObjectId, errors

from fleetflow.errors import ValidationError

def parse_object_id(value: str, entity: str = "record") -> ObjectId:
    """Convert a path/body id into an ObjectId, rejecting malformed input."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (errors.InvalidId, TypeError):
        raise ValidationError(
            message=f"Invalid {entity} ID format",
            details=f"The provided {entity} ID '{value}' is not valid",
            example="Expected format: '507f1f77bcf86cd799439011' (24 characters, hexadecimal)"
        )
