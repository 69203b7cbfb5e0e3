# fleetflow/models/base.py
from datetime import date, datetime
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_date(value: Any) -> Any:
    # date-only fields are stored as midnight datetimes
    if isinstance(value, datetime):
        return value.date()
    return value


def as_datetime(value: date) -> datetime:
    return datetime.combine(value, datetime.min.time())


class DocumentModel(BaseModel):
    """A stored document; ``_id`` surfaces as a string ``id``."""
    id: str = Field(default="", alias="_id")

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v
