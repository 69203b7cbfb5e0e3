# fleetflow/models/fuel.py
import datetime as dt
from typing import Optional
from pydantic import field_validator

from .base import DocumentModel, as_date

class FuelLogModel(DocumentModel):
    vehicle_id: str
    vehicle_name: str = ""
    liters: float
    cost: float
    date: dt.date
    created_at: Optional[dt.datetime] = None

    @field_validator("date", mode="before")
    @classmethod
    def date_only(cls, v):
        return as_date(v)
