# fleetflow/schemas/fuel.py
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field

from .base import OutSchema

class FuelLogCreate(BaseModel):
    vehicle_id: str
    liters: float = Field(..., gt=0, allow_inf_nan=False)
    cost: float = Field(..., ge=0, allow_inf_nan=False)
    date: Optional[dt.date] = None

class FuelLogOut(OutSchema):
    vehicle_id: str
    vehicle_name: str
    liters: float
    cost: float
    date: dt.date
    created_at: Optional[dt.datetime] = None
