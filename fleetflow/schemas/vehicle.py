# fleetflow/schemas/vehicle.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from fleetflow.models.enums import VehicleStatus, VehicleType
from .base import OutSchema

class VehicleBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    model: str = ""
    license_plate: str = Field(..., min_length=1, max_length=15)
    type: str = Field(..., description="truck, van, bike or car")
    capacity: float = Field(..., allow_inf_nan=False, description="Maximum load in kg")
    odometer: Optional[float] = Field(None, allow_inf_nan=False)
    region: Optional[str] = None
    acquisition_cost: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

class VehicleCreate(VehicleBase):
    pass

class VehicleUpdate(VehicleBase):
    out_of_service: bool = False

class VehicleOut(OutSchema):
    name: str
    model: str
    license_plate: str
    type: VehicleType
    capacity: float
    odometer: float
    region: str
    current_load: float
    acquisition_cost: Optional[float] = None
    status: VehicleStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
