# fleetflow/schemas/driver.py
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

from fleetflow.models.enums import DriverCategory, DriverStatus
from .base import OutSchema

class DriverBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    license_number: str = Field(..., min_length=1, max_length=50)
    license_expiry: date
    category: str = DriverCategory.truck.value
    status: str = DriverStatus.available.value

class DriverCreate(DriverBase):
    pass

class DriverUpdate(DriverBase):
    pass

class DriverOut(OutSchema):
    name: str
    license_number: str
    license_expiry: date
    category: DriverCategory
    status: DriverStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class DriverPerformance(BaseModel):
    id: str
    name: str
    category: DriverCategory
    status: DriverStatus
    total_trips: int
    completed_trips: int
    completion_rate: int
    license_expired: bool
