# fleetflow/models/vehicle.py
from datetime import datetime
from typing import Optional
from pydantic import field_validator

from .base import DocumentModel
from .enums import VehicleStatus, VehicleType, normalize_token

class VehicleModel(DocumentModel):
    name: str
    model: str = ""
    license_plate: str
    type: VehicleType
    capacity: float
    odometer: float = 0
    region: str = ""
    current_load: float = 0
    acquisition_cost: Optional[float] = None
    status: VehicleStatus = VehicleStatus.available
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("type", "status", mode="before")
    @classmethod
    def normalize_enums(cls, v):
        return normalize_token(v)

    @field_validator("license_plate", mode="before")
    @classmethod
    def upper_plate(cls, v):
        return v.strip().upper() if isinstance(v, str) else v
