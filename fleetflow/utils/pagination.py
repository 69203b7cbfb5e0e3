# fleetflow/utils/pagination.py
from fleetflow.errors import ValidationError

MAX_LIMIT = 100

def validate_paging(skip: int, limit: int) -> None:
    if skip < 0:
        raise ValidationError(
            message="Invalid skip value",
            details="Skip value cannot be negative",
            example="Use skip=0 for first page"
        )
    if limit < 1 or limit > MAX_LIMIT:
        raise ValidationError(
            message="Invalid limit value",
            details=f"Limit must be between 1 and {MAX_LIMIT}",
            example="Use limit=10 for 10 items per page"
        )
