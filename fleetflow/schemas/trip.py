# fleetflow/schemas/trip.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from fleetflow.models.enums import TripStatus
from .base import OutSchema

class TripCreate(BaseModel):
    # presence is checked by the lifecycle engine so the rule order holds
    vehicle_id: Optional[str] = None
    driver_id: Optional[str] = None
    cargo_weight: Optional[float] = Field(None, allow_inf_nan=False, description="Cargo weight in kg")
    freight_amount: Optional[float] = Field(None, allow_inf_nan=False, description="Defaults to cargo weight x rate per kg")
    origin: Optional[str] = None
    destination: Optional[str] = None

class TripOut(OutSchema):
    origin: str
    destination: str
    cargo_weight: float
    freight_amount: float
    vehicle_id: str
    vehicle_name: str
    driver_id: Optional[str] = None
    driver_name: str
    status: TripStatus
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
