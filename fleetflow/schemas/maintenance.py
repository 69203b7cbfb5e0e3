# fleetflow/schemas/maintenance.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from fleetflow.models.enums import MaintenanceStatus, ServiceType
from .base import OutSchema

class MaintenanceLogCreate(BaseModel):
    vehicle_id: str
    service_type: str = ServiceType.preventative.value
    description: str = Field(..., min_length=1)
    cost: float = Field(..., ge=0, allow_inf_nan=False)

class MaintenanceLogOut(OutSchema):
    vehicle_id: str
    vehicle_name: str
    service_type: ServiceType
    description: str
    cost: float
    status: MaintenanceStatus
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
